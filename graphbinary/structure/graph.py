"""Graph-domain values carried by the protocol.

Elements (:class:`Vertex`, :class:`Edge`, :class:`VertexProperty`) follow
graph identity semantics: two elements of the same class are equal when
their ids are equal, whatever their labels or properties.

Example:
    >>> marko = Vertex(1, "person")
    >>> lop = Vertex(3, "software")
    >>> created = Edge(9, "created", marko, lop, {"weight": 0.4})
    >>> path = Path([{"a"}, set()], [marko, lop])
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Set


class Direction(Enum):
    """Direction of an edge relative to a vertex."""

    OUT = "OUT"
    IN = "IN"
    BOTH = "BOTH"


class T(Enum):
    """Tokens naming the intrinsic parts of an element."""

    id = "id"
    label = "label"
    key = "key"
    value = "value"


class Element:
    """Base of identifiable graph elements."""

    __slots__ = ("_id", "_label")

    def __init__(self, id: Any, label: str):
        self._id = id
        self._label = label

    @property
    def id(self) -> Any:
        return self._id

    @property
    def label(self) -> str:
        return self._label

    def __eq__(self, other: object) -> bool:
        return isinstance(other, self.__class__) and self._id == other._id

    def __hash__(self) -> int:
        return hash((self.__class__.__name__, self._id))


class Vertex(Element):
    """A vertex with an optional list of vertex properties."""

    __slots__ = ("_properties",)

    def __init__(
        self,
        id: Any,
        label: str = "vertex",
        properties: Optional[List["VertexProperty"]] = None,
    ):
        super().__init__(id, label)
        self._properties = properties

    @property
    def properties(self) -> Optional[List["VertexProperty"]]:
        return self._properties

    def __repr__(self) -> str:
        return f"v[{self._id}]"


class Edge(Element):
    """A directed edge between two vertices.

    Only the id and label of each endpoint travel on the wire; decoded
    endpoints are bare :class:`Vertex` references.
    """

    __slots__ = ("_out_v", "_in_v", "_properties")

    def __init__(
        self,
        id: Any,
        label: str,
        out_v: Vertex,
        in_v: Vertex,
        properties: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(id, label)
        self._out_v = out_v
        self._in_v = in_v
        self._properties = properties

    @property
    def out_v(self) -> Vertex:
        return self._out_v

    @property
    def in_v(self) -> Vertex:
        return self._in_v

    @property
    def properties(self) -> Optional[Dict[str, Any]]:
        return self._properties

    def __repr__(self) -> str:
        return f"e[{self._id}][{self._out_v.id}-{self._label}->{self._in_v.id}]"


class VertexProperty(Element):
    """A property of a vertex, which may carry meta-properties."""

    __slots__ = ("_value", "_properties")

    def __init__(
        self,
        id: Any,
        label: str,
        value: Any,
        properties: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(id, label)
        self._value = value
        self._properties = properties

    @property
    def key(self) -> str:
        return self._label

    @property
    def value(self) -> Any:
        return self._value

    @property
    def properties(self) -> Optional[Dict[str, Any]]:
        return self._properties

    def __repr__(self) -> str:
        return f"vp[{self._label}->{self._value!r}]"


class Property:
    """A key/value property of an edge or meta-property."""

    __slots__ = ("_key", "_value")

    def __init__(self, key: str, value: Any):
        self._key = key
        self._value = value

    @property
    def key(self) -> str:
        return self._key

    @property
    def value(self) -> Any:
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Property):
            return False
        return self._key == other._key and self._value == other._value

    def __hash__(self) -> int:
        return hash((Property, self._key))

    def __repr__(self) -> str:
        return f"p[{self._key}->{self._value!r}]"


class Path:
    """A traversal path: the visited objects and the labels of each step.

    ``labels[i]`` is the set of step labels attached to ``objects[i]``.
    """

    __slots__ = ("_labels", "_objects")

    def __init__(self, labels: List[Set[str]], objects: List[Any]):
        self._labels = labels
        self._objects = objects

    @property
    def labels(self) -> List[Set[str]]:
        return self._labels

    @property
    def objects(self) -> List[Any]:
        return self._objects

    def __getitem__(self, index: int) -> Any:
        return self._objects[index]

    def __len__(self) -> int:
        return len(self._objects)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return False
        return self._labels == other._labels and self._objects == other._objects

    def __hash__(self) -> int:
        return hash((Path, len(self._objects)))

    def __repr__(self) -> str:
        return f"path[{', '.join(repr(o) for o in self._objects)}]"


class Traverser:
    """A result object together with its bulk (repeat count)."""

    __slots__ = ("_object", "_bulk")

    def __init__(self, object: Any, bulk: int = 1):
        self._object = object
        self._bulk = bulk

    @property
    def object(self) -> Any:
        return self._object

    @property
    def bulk(self) -> int:
        return self._bulk

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Traverser):
            return False
        return self._object == other._object and self._bulk == other._bulk

    def __hash__(self) -> int:
        return hash((Traverser, self._bulk))

    def __repr__(self) -> str:
        return f"Traverser({self._object!r}, bulk={self._bulk})"

"""Built-in composite codecs: collections and graph entities.

Composite bodies contain nested envelopes, written and read through the
context handed in by the writer or reader so that nested values go
through the full registry.

Collections:
    LIST / SET  int32 count, then ``count`` envelopes
    MAP         int32 count, then ``count`` key envelope / value envelope pairs

Graph entities (every field is an envelope):
    VERTEX           id, label, properties (list of VertexProperty or null)
    EDGE             id, label, out-vertex id, out-vertex label,
                     in-vertex id, in-vertex label, properties (map or null)
    PROPERTY         key, value
    VERTEX_PROPERTY  id, label, value, properties (map or null)
    PATH             labels (list of sets of strings), objects (list)
    TRAVERSER        int64 bulk, value
    DIRECTION / T    name as a STRING envelope
"""

from enum import Enum
from typing import Any, List, Tuple, Type

from graphbinary.exceptions import (
    BufferUnderrunException,
    EncodingPreconditionException,
    MalformedValueException,
    SerializationException,
)
from graphbinary.serialization.api import ReadContext, TypeCodec, WriteContext
from graphbinary.serialization.buffer import Buffer
from graphbinary.serialization.registry import RegistryEntry
from graphbinary.structure.graph import (
    Direction,
    Edge,
    Path,
    Property,
    T,
    Traverser,
    Vertex,
    VertexProperty,
)
from graphbinary.structure.types import DataType, freeze


def read_count(buffer: Buffer, envelopes_per_item: int = 1) -> int:
    """Read a collection count and check it against the remaining bytes.

    Every envelope takes at least one byte, so a count that cannot fit in
    what is left fails before any element is read.
    """
    count = buffer.read_int()
    if count < 0:
        raise MalformedValueException(f"Negative collection count: {count}")
    needed = count * envelopes_per_item
    if needed > buffer.readable_bytes():
        raise BufferUnderrunException(
            f"Collection of {count} items cannot fit in the "
            f"{buffer.readable_bytes()} remaining bytes",
            requested=needed,
            available=buffer.readable_bytes(),
        )
    return count


def _hashable(value: Any, what: str) -> Any:
    value = freeze(value)
    try:
        hash(value)
    except TypeError as e:
        raise MalformedValueException(
            f"{what} of type {type(value).__name__} is not hashable", cause=e
        ) from e
    return value


def _field(
    value: Any,
    kinds: Tuple[type, ...],
    entity: str,
    name: str,
    nullable: bool = False,
    error: Type[SerializationException] = MalformedValueException,
) -> Any:
    if value is None and nullable:
        return value
    if not isinstance(value, kinds):
        raise error(
            f"{entity} {name} must be {' or '.join(k.__name__ for k in kinds)}, "
            f"got {type(value).__name__}"
        )
    return value


def _check(
    value: Any, kinds: Tuple[type, ...], entity: str, name: str, nullable: bool = False
) -> Any:
    return _field(value, kinds, entity, name, nullable, EncodingPreconditionException)


class ListCodec(TypeCodec[list]):
    """Ordered, possibly heterogeneous sequence. Tuples are written as lists."""

    def write(self, value: list, buffer: Buffer, context: WriteContext) -> None:
        buffer.write_int(len(value))
        for item in value:
            context.write_value(item, buffer)

    def read(self, buffer: Buffer, context: ReadContext) -> list:
        count = read_count(buffer)
        return [context.read_value(buffer) for _ in range(count)]


class SetCodec(TypeCodec[set]):
    """Unordered collection of distinct values.

    Elements are written sorted by their encoded bytes, so equal sets
    always produce the same output.

    Decoded elements that are mutable containers are frozen so they can
    live in a Python set.
    """

    def write(self, value: set, buffer: Buffer, context: WriteContext) -> None:
        envelopes = []
        for item in value:
            scratch = Buffer()
            context.write_value(item, scratch)
            envelopes.append(scratch.to_bytes())
        envelopes.sort()
        buffer.write_int(len(envelopes))
        for envelope in envelopes:
            buffer.write_bytes(envelope)

    def read(self, buffer: Buffer, context: ReadContext) -> set:
        count = read_count(buffer)
        result = set()
        for _ in range(count):
            result.add(_hashable(context.read_value(buffer), "Set element"))
        return result


class MapCodec(TypeCodec[dict]):
    """Key/value pairs in iteration order. Keys may be composite."""

    def write(self, value: dict, buffer: Buffer, context: WriteContext) -> None:
        buffer.write_int(len(value))
        for key, item in value.items():
            context.write_value(key, buffer)
            context.write_value(item, buffer)

    def read(self, buffer: Buffer, context: ReadContext) -> dict:
        count = read_count(buffer, envelopes_per_item=2)
        result = {}
        for _ in range(count):
            key = _hashable(context.read_value(buffer), "Map key")
            result[key] = context.read_value(buffer)
        return result


class VertexCodec(TypeCodec[Vertex]):
    def write(self, value: Vertex, buffer: Buffer, context: WriteContext) -> None:
        _check(value.label, (str,), "Vertex", "label")
        properties = _check(
            value.properties, (list, tuple), "Vertex", "properties", nullable=True
        )
        for prop in properties or ():
            _check(prop, (VertexProperty,), "Vertex", "property")
        context.write_value(value.id, buffer)
        context.write_value(value.label, buffer)
        context.write_value(value.properties, buffer)

    def read(self, buffer: Buffer, context: ReadContext) -> Vertex:
        id = context.read_value(buffer)
        label = _field(context.read_value(buffer), (str,), "Vertex", "label")
        properties = _field(
            context.read_value(buffer), (list,), "Vertex", "properties", nullable=True
        )
        if properties is not None:
            for prop in properties:
                _field(prop, (VertexProperty,), "Vertex", "property")
        return Vertex(id, label, properties)


class EdgeCodec(TypeCodec[Edge]):
    """Edge with the id and label of both endpoints, out-vertex first."""

    def write(self, value: Edge, buffer: Buffer, context: WriteContext) -> None:
        _check(value.label, (str,), "Edge", "label")
        _check(value.out_v, (Vertex,), "Edge", "out-vertex")
        _check(value.out_v.label, (str,), "Edge", "out-vertex label")
        _check(value.in_v, (Vertex,), "Edge", "in-vertex")
        _check(value.in_v.label, (str,), "Edge", "in-vertex label")
        _check(value.properties, (dict,), "Edge", "properties", nullable=True)
        context.write_value(value.id, buffer)
        context.write_value(value.label, buffer)
        context.write_value(value.out_v.id, buffer)
        context.write_value(value.out_v.label, buffer)
        context.write_value(value.in_v.id, buffer)
        context.write_value(value.in_v.label, buffer)
        context.write_value(value.properties, buffer)

    def read(self, buffer: Buffer, context: ReadContext) -> Edge:
        id = context.read_value(buffer)
        label = _field(context.read_value(buffer), (str,), "Edge", "label")
        out_id = context.read_value(buffer)
        out_label = _field(context.read_value(buffer), (str,), "Edge", "out-vertex label")
        in_id = context.read_value(buffer)
        in_label = _field(context.read_value(buffer), (str,), "Edge", "in-vertex label")
        properties = _field(
            context.read_value(buffer), (dict,), "Edge", "properties", nullable=True
        )
        return Edge(id, label, Vertex(out_id, out_label), Vertex(in_id, in_label), properties)


class PropertyCodec(TypeCodec[Property]):
    def write(self, value: Property, buffer: Buffer, context: WriteContext) -> None:
        _check(value.key, (str,), "Property", "key")
        context.write_value(value.key, buffer)
        context.write_value(value.value, buffer)

    def read(self, buffer: Buffer, context: ReadContext) -> Property:
        key = _field(context.read_value(buffer), (str,), "Property", "key")
        return Property(key, context.read_value(buffer))


class VertexPropertyCodec(TypeCodec[VertexProperty]):
    def write(self, value: VertexProperty, buffer: Buffer, context: WriteContext) -> None:
        _check(value.label, (str,), "VertexProperty", "label")
        _check(value.properties, (dict,), "VertexProperty", "properties", nullable=True)
        context.write_value(value.id, buffer)
        context.write_value(value.label, buffer)
        context.write_value(value.value, buffer)
        context.write_value(value.properties, buffer)

    def read(self, buffer: Buffer, context: ReadContext) -> VertexProperty:
        id = context.read_value(buffer)
        label = _field(context.read_value(buffer), (str,), "VertexProperty", "label")
        value = context.read_value(buffer)
        properties = _field(
            context.read_value(buffer), (dict,), "VertexProperty", "properties", nullable=True
        )
        return VertexProperty(id, label, value, properties)


class PathCodec(TypeCodec[Path]):
    """Two parallel lists: per-step label sets and the visited objects."""

    def write(self, value: Path, buffer: Buffer, context: WriteContext) -> None:
        labels = list(value.labels)
        objects = list(value.objects)
        if len(labels) != len(objects):
            raise EncodingPreconditionException(
                f"Path has {len(labels)} label sets for {len(objects)} objects"
            )
        for step_labels in labels:
            if not isinstance(step_labels, (set, frozenset)):
                raise EncodingPreconditionException(
                    f"Path labels must be sets, got {type(step_labels).__name__}"
                )
        context.write_value(labels, buffer)
        context.write_value(objects, buffer)

    def read(self, buffer: Buffer, context: ReadContext) -> Path:
        labels = _field(context.read_value(buffer), (list,), "Path", "labels")
        objects = _field(context.read_value(buffer), (list,), "Path", "objects")
        if len(labels) != len(objects):
            raise MalformedValueException(
                f"Path has {len(labels)} label sets for {len(objects)} objects"
            )
        for step_labels in labels:
            _field(step_labels, (set,), "Path", "step labels")
            for label in step_labels:
                _field(label, (str,), "Path", "label")
        return Path(labels, objects)


class TraverserCodec(TypeCodec[Traverser]):
    def write(self, value: Traverser, buffer: Buffer, context: WriteContext) -> None:
        if value.bulk < 0:
            raise EncodingPreconditionException(f"Traverser bulk cannot be negative: {value.bulk}")
        buffer.write_long(value.bulk)
        context.write_value(value.object, buffer)

    def read(self, buffer: Buffer, context: ReadContext) -> Traverser:
        bulk = buffer.read_long()
        if bulk < 0:
            raise MalformedValueException(f"Traverser bulk cannot be negative: {bulk}")
        return Traverser(context.read_value(buffer), bulk)


class EnumCodec(TypeCodec[Enum]):
    """Enum member written as a STRING envelope of its name.

    Args:
        enum_type: The enum class handled by this codec.
    """

    def __init__(self, enum_type: Type[Enum]):
        self._enum_type = enum_type

    def write(self, value: Enum, buffer: Buffer, context: WriteContext) -> None:
        context.write_value(value.name, buffer)

    def read(self, buffer: Buffer, context: ReadContext) -> Enum:
        name = _field(context.read_value(buffer), (str,), self._enum_type.__name__, "name")
        try:
            return self._enum_type[name]
        except KeyError:
            raise MalformedValueException(
                f"Unknown {self._enum_type.__name__} member: {name!r}"
            ) from None

    def __repr__(self) -> str:
        return f"EnumCodec({self._enum_type.__name__})"


def get_composite_entries() -> List[RegistryEntry]:
    """Registry entries of all built-in composite types."""
    return [
        RegistryEntry(DataType.LIST, (list, tuple), ListCodec()),
        RegistryEntry(DataType.SET, (set, frozenset), SetCodec()),
        RegistryEntry(DataType.MAP, (dict,), MapCodec()),
        RegistryEntry(DataType.VERTEX, (Vertex,), VertexCodec()),
        RegistryEntry(DataType.EDGE, (Edge,), EdgeCodec()),
        RegistryEntry(DataType.PROPERTY, (Property,), PropertyCodec()),
        RegistryEntry(DataType.VERTEX_PROPERTY, (VertexProperty,), VertexPropertyCodec()),
        RegistryEntry(DataType.PATH, (Path,), PathCodec()),
        RegistryEntry(DataType.TRAVERSER, (Traverser,), TraverserCodec()),
        RegistryEntry(DataType.DIRECTION, (Direction,), EnumCodec(Direction)),
        RegistryEntry(DataType.T, (T,), EnumCodec(T)),
    ]

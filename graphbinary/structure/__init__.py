"""Values exchanged over the GraphBinary protocol."""

from graphbinary.structure.types import (
    DataType,
    PROTOCOL_VERSION,
    CUSTOM_TYPE_MIN,
    CUSTOM_TYPE_MAX,
    Byte,
    Short,
    Long,
    BigInteger,
    Float32,
    TypedNull,
    typed_null,
    UnknownCustomValue,
    HashableDict,
    freeze,
    is_custom_code,
    type_name,
)
from graphbinary.structure.graph import (
    Direction,
    T,
    Element,
    Vertex,
    Edge,
    VertexProperty,
    Property,
    Path,
    Traverser,
)

__all__ = [
    "DataType",
    "PROTOCOL_VERSION",
    "CUSTOM_TYPE_MIN",
    "CUSTOM_TYPE_MAX",
    "Byte",
    "Short",
    "Long",
    "BigInteger",
    "Float32",
    "TypedNull",
    "typed_null",
    "UnknownCustomValue",
    "HashableDict",
    "freeze",
    "is_custom_code",
    "type_name",
    "Direction",
    "T",
    "Element",
    "Vertex",
    "Edge",
    "VertexProperty",
    "Property",
    "Path",
    "Traverser",
]

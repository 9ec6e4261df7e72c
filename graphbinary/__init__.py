"""GraphBinary: a self-describing binary codec for graph data."""

from graphbinary.exceptions import (
    GraphBinaryException,
    IllegalStateException,
    IllegalArgumentException,
    ConfigurationException,
    SerializationException,
    UnsupportedTypeException,
    MalformedValueException,
    BufferUnderrunException,
    EncodingPreconditionException,
)
from graphbinary.structure import (
    DataType,
    Byte,
    Short,
    Long,
    BigInteger,
    Float32,
    TypedNull,
    typed_null,
    UnknownCustomValue,
    Direction,
    T,
    Vertex,
    Edge,
    VertexProperty,
    Property,
    Path,
    Traverser,
)
from graphbinary.serialization import (
    Buffer,
    TypeCodec,
    TypeRegistry,
    GraphBinaryWriter,
    GraphBinaryReader,
    GraphBinarySerializer,
)
from graphbinary.config import SerializationConfig, CustomTypeConfig
from graphbinary.logging import configure_logging, get_logger

__version__ = "1.0.0"

__all__ = [
    "GraphBinaryException",
    "IllegalStateException",
    "IllegalArgumentException",
    "ConfigurationException",
    "SerializationException",
    "UnsupportedTypeException",
    "MalformedValueException",
    "BufferUnderrunException",
    "EncodingPreconditionException",
    "DataType",
    "Byte",
    "Short",
    "Long",
    "BigInteger",
    "Float32",
    "TypedNull",
    "typed_null",
    "UnknownCustomValue",
    "Direction",
    "T",
    "Vertex",
    "Edge",
    "VertexProperty",
    "Property",
    "Path",
    "Traverser",
    "Buffer",
    "TypeCodec",
    "TypeRegistry",
    "GraphBinaryWriter",
    "GraphBinaryReader",
    "GraphBinarySerializer",
    "SerializationConfig",
    "CustomTypeConfig",
    "configure_logging",
    "get_logger",
]

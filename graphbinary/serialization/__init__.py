"""GraphBinary serialization package."""

from graphbinary.serialization.buffer import Buffer
from graphbinary.serialization.api import (
    WriteContext,
    ReadContext,
    TypeCodec,
    FunctionCodec,
)
from graphbinary.serialization.registry import (
    RegistryEntry,
    TypeRegistry,
)
from graphbinary.serialization.builtin import get_builtin_entries
from graphbinary.serialization.composite import get_composite_entries
# service imports graphbinary.config, which needs the modules above
from graphbinary.serialization.service import (
    GraphBinaryWriter,
    GraphBinaryReader,
    GraphBinarySerializer,
)

__all__ = [
    "Buffer",
    "WriteContext",
    "ReadContext",
    "TypeCodec",
    "FunctionCodec",
    "RegistryEntry",
    "TypeRegistry",
    "get_builtin_entries",
    "get_composite_entries",
    "GraphBinaryWriter",
    "GraphBinaryReader",
    "GraphBinarySerializer",
]

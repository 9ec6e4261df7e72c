"""Codec interfaces.

Every wire type is handled by one :class:`TypeCodec`. A codec only reads
and writes the *body* of a value: the type code and nullable flag around
it are owned by :class:`~graphbinary.serialization.service.GraphBinaryWriter`
and :class:`~graphbinary.serialization.service.GraphBinaryReader`.

Composite codecs recurse through the context they are handed, which
re-enters the writer or reader with the full registry one level deeper.

Example:
    A codec for a user type, registered in the custom range::

        from graphbinary.serialization.api import TypeCodec

        class Point:
            def __init__(self, x: float, y: float):
                self.x = x
                self.y = y

        class PointCodec(TypeCodec[Point]):
            def write(self, value: Point, buffer, context) -> None:
                buffer.write_double(value.x)
                buffer.write_double(value.y)

            def read(self, buffer, context) -> Point:
                return Point(buffer.read_double(), buffer.read_double())

        registry.register_custom(0xC1, Point, PointCodec())
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from graphbinary.serialization.buffer import Buffer

if TYPE_CHECKING:
    from graphbinary.serialization.registry import TypeRegistry

T = TypeVar("T")


class WriteContext(ABC):
    """Handle a codec uses to write nested values."""

    @property
    @abstractmethod
    def registry(self) -> "TypeRegistry":
        """The registry driving this encode pass."""
        pass

    @property
    @abstractmethod
    def depth(self) -> int:
        """Nesting depth of the value whose body is being written."""
        pass

    @abstractmethod
    def write_value(self, value: Any, buffer: Buffer) -> None:
        """Write a complete envelope (type code, flag and body) for ``value``.

        Args:
            value: The nested value, which may be ``None``.
            buffer: The buffer to append to.
        """
        pass


class ReadContext(ABC):
    """Handle a codec uses to read nested values."""

    @property
    @abstractmethod
    def registry(self) -> "TypeRegistry":
        """The registry driving this decode pass."""
        pass

    @property
    @abstractmethod
    def depth(self) -> int:
        """Nesting depth of the value whose body is being read."""
        pass

    @abstractmethod
    def read_value(self, buffer: Buffer) -> Any:
        """Read one complete envelope and return the value it holds.

        Args:
            buffer: The buffer positioned at a type code.

        Returns:
            The decoded value, or ``None`` for any null.
        """
        pass


class TypeCodec(ABC, Generic[T]):
    """Body encoder/decoder for one wire type.

    ``write`` and ``read`` must be exact inverses, and ``read`` must consume
    exactly the bytes ``write`` produced.
    """

    @abstractmethod
    def write(self, value: T, buffer: Buffer, context: WriteContext) -> None:
        """Write the body of ``value``.

        Args:
            value: The non-null value to write.
            buffer: The buffer to append to.
            context: Writer context for nested values.
        """
        pass

    @abstractmethod
    def read(self, buffer: Buffer, context: ReadContext) -> T:
        """Read a body and build its value.

        Args:
            buffer: The buffer positioned at the body.
            context: Reader context for nested values.

        Returns:
            The decoded value.
        """
        pass


class FunctionCodec(TypeCodec[Any]):
    """Adapts a pair of plain functions to :class:`TypeCodec`.

    Args:
        write_fn: ``write_fn(value, buffer, context)``.
        read_fn: ``read_fn(buffer, context) -> value``.
    """

    def __init__(
        self,
        write_fn: Callable[[Any, Buffer, WriteContext], None],
        read_fn: Callable[[Buffer, ReadContext], Any],
    ):
        self._write_fn = write_fn
        self._read_fn = read_fn

    def write(self, value: Any, buffer: Buffer, context: WriteContext) -> None:
        self._write_fn(value, buffer, context)

    def read(self, buffer: Buffer, context: ReadContext) -> Any:
        return self._read_fn(buffer, context)

    def __repr__(self) -> str:
        return f"FunctionCodec({getattr(self._write_fn, '__name__', self._write_fn)!s})"

"""Big-endian byte buffer with independent read and write cursors."""

import struct
from typing import Union

from graphbinary.exceptions import (
    BufferUnderrunException,
    EncodingPreconditionException,
    IllegalArgumentException,
    MalformedValueException,
)


BYTE_SIZE = 1
SHORT_SIZE = 2
INT_SIZE = 4
LONG_SIZE = 8
FLOAT_SIZE = 4
DOUBLE_SIZE = 8

_BYTE = struct.Struct(">b")
_UNSIGNED_BYTE = struct.Struct(">B")
_SHORT = struct.Struct(">h")
_INT = struct.Struct(">i")
_LONG = struct.Struct(">q")
_FLOAT = struct.Struct(">f")
_DOUBLE = struct.Struct(">d")

_RANGES = {
    "byte": (-(1 << 7), (1 << 7) - 1),
    "unsigned byte": (0, (1 << 8) - 1),
    "short": (-(1 << 15), (1 << 15) - 1),
    "int": (-(1 << 31), (1 << 31) - 1),
    "long": (-(1 << 63), (1 << 63) - 1),
}


class Buffer:
    """A growable byte sequence with a read cursor.

    Writes append at the end of the data (``writer_index``); reads consume
    from ``reader_index``. A buffer belongs to a single encode or decode
    pass at a time and does no locking.

    Example:
        >>> buffer = Buffer()
        >>> buffer.write_int(2023)
        >>> buffer.write_unsigned_byte(3)
        >>> Buffer(buffer.to_bytes()).read_int()
        2023
    """

    __slots__ = ("_data", "_reader_index")

    def __init__(self, data: Union[bytes, bytearray, memoryview] = b""):
        self._data = bytearray(data)
        self._reader_index = 0

    @property
    def reader_index(self) -> int:
        return self._reader_index

    def set_reader_index(self, pos: int) -> None:
        if pos < 0 or pos > len(self._data):
            raise IllegalArgumentException(
                f"Reader index {pos} outside 0..{len(self._data)}"
            )
        self._reader_index = pos

    @property
    def writer_index(self) -> int:
        return len(self._data)

    def readable_bytes(self) -> int:
        """Number of bytes between the read cursor and the end of data."""
        return len(self._data) - self._reader_index

    def to_bytes(self) -> bytes:
        """All written bytes, regardless of the read cursor."""
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Buffer(size={len(self._data)}, reader_index={self._reader_index})"

    # -- writes --------------------------------------------------------------

    def write_byte(self, value: int) -> None:
        self._pack(_BYTE, "byte", value)

    def write_unsigned_byte(self, value: int) -> None:
        self._pack(_UNSIGNED_BYTE, "unsigned byte", value)

    def write_boolean(self, value: bool) -> None:
        self._data.append(1 if value else 0)

    def write_short(self, value: int) -> None:
        self._pack(_SHORT, "short", value)

    def write_int(self, value: int) -> None:
        self._pack(_INT, "int", value)

    def write_long(self, value: int) -> None:
        self._pack(_LONG, "long", value)

    def write_float(self, value: float) -> None:
        try:
            self._data.extend(_FLOAT.pack(value))
        except (OverflowError, struct.error) as e:
            raise EncodingPreconditionException(
                f"Value {value!r} cannot be written as a 32-bit float", cause=e
            ) from e

    def write_double(self, value: float) -> None:
        self._data.extend(_DOUBLE.pack(value))

    def write_bytes(self, value: Union[bytes, bytearray, memoryview]) -> None:
        """Append a raw run of bytes with no length prefix."""
        self._data.extend(value)

    def write_string(self, value: str) -> None:
        """Write an int32 byte length followed by the UTF-8 bytes."""
        try:
            encoded = value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodingPreconditionException(
                "String is not encodable as UTF-8", cause=e
            ) from e
        self.write_int(len(encoded))
        self._data.extend(encoded)

    def _pack(self, packer: struct.Struct, width: str, value: int) -> None:
        low, high = _RANGES[width]
        if not low <= value <= high:
            raise EncodingPreconditionException(
                f"Value {value} is outside the {width} range [{low}, {high}]"
            )
        self._data.extend(packer.pack(value))

    # -- reads ---------------------------------------------------------------

    def read_byte(self) -> int:
        return self._unpack(_BYTE)

    def read_unsigned_byte(self) -> int:
        return self._unpack(_UNSIGNED_BYTE)

    def read_boolean(self) -> bool:
        value = self._unpack(_UNSIGNED_BYTE)
        if value > 1:
            raise MalformedValueException(f"Boolean byte must be 0 or 1, got {value}")
        return value == 1

    def read_short(self) -> int:
        return self._unpack(_SHORT)

    def read_int(self) -> int:
        return self._unpack(_INT)

    def read_long(self) -> int:
        return self._unpack(_LONG)

    def read_float(self) -> float:
        return self._unpack(_FLOAT)

    def read_double(self) -> float:
        return self._unpack(_DOUBLE)

    def read_bytes(self, length: int) -> bytes:
        """Read exactly ``length`` raw bytes."""
        if length < 0:
            raise MalformedValueException(f"Negative byte run length: {length}")
        self.ensure_readable(length)
        start = self._reader_index
        self._reader_index += length
        return bytes(self._data[start:self._reader_index])

    def read_string(self) -> str:
        length = self.read_int()
        if length < 0:
            raise MalformedValueException(f"Negative string length: {length}")
        raw = self.read_bytes(length)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedValueException("String body is not valid UTF-8", cause=e) from e

    def ensure_readable(self, length: int) -> None:
        """Fail unless at least ``length`` bytes are left to read."""
        available = self.readable_bytes()
        if length > available:
            raise BufferUnderrunException(
                f"Need {length} bytes at position {self._reader_index}, "
                f"only {available} available",
                requested=length,
                available=available,
            )

    def _unpack(self, packer: struct.Struct):
        self.ensure_readable(packer.size)
        value = packer.unpack_from(self._data, self._reader_index)[0]
        self._reader_index += packer.size
        return value

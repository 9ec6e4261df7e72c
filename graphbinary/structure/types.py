"""Wire type codes and the Python value model.

The :class:`DataType` table is the versioned contract of the protocol:
codes are only ever added, never reassigned. Custom types live in the
reserved range ``CUSTOM_TYPE_MIN..CUSTOM_TYPE_MAX``.

Python has one ``int`` and one ``float``, so the narrower and wider wire
widths are selected with small wrapper types::

    Byte(7)        # BYTE, int8
    Short(300)     # SHORT, int16
    Long(1)        # LONG, int64 even though 1 fits in int32
    BigInteger(1)  # BIG_INTEGER
    Float32(1.5)   # FLOAT, binary32

A plain ``int`` is written as INT, LONG or BIG_INTEGER depending on its
magnitude, and a plain ``float`` as DOUBLE. Decoding returns the wrapper
so re-encoding a decoded value produces the same bytes.
"""

import struct
from enum import IntEnum
from typing import Any

from graphbinary.exceptions import EncodingPreconditionException


class DataType(IntEnum):
    """Built-in type codes of protocol version 1."""

    INT = 0x01
    LONG = 0x02
    STRING = 0x03
    DATETIME = 0x04
    TIME = 0x05
    DURATION = 0x06
    DATE = 0x07
    DOUBLE = 0x08
    LIST = 0x09
    MAP = 0x0A
    SET = 0x0B
    UUID = 0x0C
    EDGE = 0x0D
    PATH = 0x0E
    PROPERTY = 0x0F
    FLOAT = 0x10
    VERTEX = 0x11
    VERTEX_PROPERTY = 0x12
    LOCAL_DATETIME = 0x13
    DIRECTION = 0x18
    T = 0x20
    TRAVERSER = 0x21
    BIG_DECIMAL = 0x22
    BIG_INTEGER = 0x23
    BYTE = 0x24
    BINARY = 0x25
    SHORT = 0x26
    BOOLEAN = 0x27
    UNSPECIFIED_NULL = 0xFE


PROTOCOL_VERSION = 1

CUSTOM_TYPE_MIN = 0xC0
CUSTOM_TYPE_MAX = 0xEF

NOT_NULL_FLAG = 0x00
NULL_FLAG = 0x01

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

_BINARY32 = struct.Struct(">f")


def is_custom_code(type_code: int) -> bool:
    """Whether a type code lies in the reserved custom range."""
    return CUSTOM_TYPE_MIN <= type_code <= CUSTOM_TYPE_MAX


def type_name(type_code: int) -> str:
    """Human readable name of a type code, for messages and tooling."""
    try:
        return DataType(type_code).name
    except ValueError:
        if is_custom_code(type_code):
            return f"CUSTOM(0x{type_code:02X})"
        return f"0x{type_code:02X}"


class Byte(int):
    """An int carried as a signed 8-bit BYTE."""

    def __repr__(self) -> str:
        return f"Byte({int(self)})"


class Short(int):
    """An int carried as a signed 16-bit SHORT."""

    def __repr__(self) -> str:
        return f"Short({int(self)})"


class Long(int):
    """An int carried as a signed 64-bit LONG."""

    def __repr__(self) -> str:
        return f"Long({int(self)})"


class BigInteger(int):
    """An int carried as an arbitrary precision BIG_INTEGER."""

    def __repr__(self) -> str:
        return f"BigInteger({int(self)})"


class Float32(float):
    """A float carried as an IEEE-754 binary32 FLOAT.

    The value is rounded to the nearest binary32 on construction, so a
    decoded Float32 compares equal to the one that was encoded. Finite
    values beyond the binary32 range raise
    :class:`~graphbinary.exceptions.EncodingPreconditionException`.
    """

    def __new__(cls, value: Any = 0.0) -> "Float32":
        value = float(value)
        try:
            narrowed = _BINARY32.unpack(_BINARY32.pack(value))[0]
        except OverflowError as e:
            raise EncodingPreconditionException(
                f"Value {value!r} is outside the 32-bit float range", cause=e
            ) from e
        return super().__new__(cls, narrowed)

    def __repr__(self) -> str:
        return f"Float32({float(self)!r})"


class TypedNull:
    """A null that still declares its type.

    Written as ``[type_code, 0x01]``; decodes to ``None``.

    Example:
        >>> writer.write_value(TypedNull(DataType.LIST), buffer)  # 09 01
    """

    __slots__ = ("_type_code",)

    def __init__(self, type_code: int):
        self._type_code = int(type_code)

    @property
    def type_code(self) -> int:
        return self._type_code

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypedNull):
            return False
        return self._type_code == other._type_code

    def __hash__(self) -> int:
        return hash((TypedNull, self._type_code))

    def __repr__(self) -> str:
        return f"TypedNull({type_name(self._type_code)})"


def typed_null(type_code: int) -> TypedNull:
    """Create a :class:`TypedNull` for ``type_code``."""
    return TypedNull(type_code)


class UnknownCustomValue:
    """Opaque body of a custom type the local registry does not know.

    Only produced when the reader is configured to skip unknown custom
    types. Writing it back re-emits the original envelope unchanged.
    """

    __slots__ = ("_type_code", "_payload")

    def __init__(self, type_code: int, payload: bytes):
        self._type_code = type_code
        self._payload = bytes(payload)

    @property
    def type_code(self) -> int:
        return self._type_code

    @property
    def payload(self) -> bytes:
        """The framed body, without its int32 length prefix."""
        return self._payload

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnknownCustomValue):
            return False
        return self._type_code == other._type_code and self._payload == other._payload

    def __hash__(self) -> int:
        return hash((self._type_code, self._payload))

    def __repr__(self) -> str:
        return f"UnknownCustomValue({type_name(self._type_code)}, {len(self._payload)} bytes)"


class HashableDict(dict):
    """A dict usable as a map key or set element.

    Decoding produces it for MAP values that appear in a hashing position.
    It must not be mutated after it has been hashed.
    """

    def __hash__(self) -> int:
        return hash(frozenset(self.items()))


def freeze(value: Any) -> Any:
    """Turn mutable containers into hashable equivalents, recursively.

    ``list`` becomes ``tuple``, ``set`` becomes ``frozenset`` and ``dict``
    becomes :class:`HashableDict`. Each of them encodes to the same code as
    the original, so a frozen key writes the same bytes.
    """
    if isinstance(value, HashableDict):
        return value
    if isinstance(value, dict):
        return HashableDict((freeze(k), freeze(v)) for k, v in value.items())
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(freeze(v) for v in value)
    return value

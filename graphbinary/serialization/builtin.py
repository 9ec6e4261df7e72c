"""Built-in leaf codecs.

Leaf types have a body with a statically known layout and no nested
envelopes. Every multi-byte integer is big-endian.

Supported Types:
    - Integers: bool, Byte, Short, int (INT/LONG/BIG_INTEGER by
      magnitude), Long, BigInteger
    - Floating point: float (DOUBLE), Float32 (FLOAT), Decimal
    - Text and bytes: str, bytes, bytearray
    - Date/Time: date, time, datetime (aware and naive), timedelta
    - Other: UUID

Body layouts:
    DATE            int32 year, u8 month, u8 day
    TIME            u8 hour, u8 minute, u8 second, int32 nanosecond
    LOCAL_DATETIME  DATE body, TIME body
    DATETIME        DATE body, TIME body, int32 UTC offset in seconds
    DURATION        int64 seconds, int32 nanosecond adjustment
    BIG_INTEGER     int32 length, two's-complement big-endian bytes
    BIG_DECIMAL     int32 scale, BIG_INTEGER body of the unscaled value
"""

import uuid
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import List, Tuple

from graphbinary.exceptions import (
    EncodingPreconditionException,
    MalformedValueException,
)
from graphbinary.serialization.api import ReadContext, TypeCodec, WriteContext
from graphbinary.serialization.buffer import Buffer
from graphbinary.serialization.registry import RegistryEntry
from graphbinary.structure.types import (
    INT32_MAX,
    INT32_MIN,
    INT64_MAX,
    INT64_MIN,
    BigInteger,
    Byte,
    DataType,
    Float32,
    Long,
    Short,
)

NANOS_PER_MICRO = 1000
MAX_NANO = 999_999_999
SECONDS_PER_DAY = 86400
UUID_SIZE = 16


class BooleanCodec(TypeCodec[bool]):
    """Single byte, 0 or 1. Any other byte is malformed."""

    def write(self, value: bool, buffer: Buffer, context: WriteContext) -> None:
        buffer.write_boolean(value)

    def read(self, buffer: Buffer, context: ReadContext) -> bool:
        return buffer.read_boolean()


class ByteCodec(TypeCodec[Byte]):
    def write(self, value: int, buffer: Buffer, context: WriteContext) -> None:
        buffer.write_byte(value)

    def read(self, buffer: Buffer, context: ReadContext) -> Byte:
        return Byte(buffer.read_byte())


class ShortCodec(TypeCodec[Short]):
    def write(self, value: int, buffer: Buffer, context: WriteContext) -> None:
        buffer.write_short(value)

    def read(self, buffer: Buffer, context: ReadContext) -> Short:
        return Short(buffer.read_short())


class IntCodec(TypeCodec[int]):
    """Signed 32-bit integer.

    Plain Python ints in the int32 range are written with this codec;
    larger ones move to LONG or BIG_INTEGER.
    """

    def write(self, value: int, buffer: Buffer, context: WriteContext) -> None:
        buffer.write_int(value)

    def read(self, buffer: Buffer, context: ReadContext) -> int:
        return buffer.read_int()


class LongCodec(TypeCodec[Long]):
    def write(self, value: int, buffer: Buffer, context: WriteContext) -> None:
        buffer.write_long(value)

    def read(self, buffer: Buffer, context: ReadContext) -> Long:
        return Long(buffer.read_long())


class BigIntegerCodec(TypeCodec[BigInteger]):
    """Arbitrary precision integer in minimal two's-complement form."""

    def write(self, value: int, buffer: Buffer, context: WriteContext) -> None:
        write_big_integer_body(buffer, value)

    def read(self, buffer: Buffer, context: ReadContext) -> BigInteger:
        return BigInteger(read_big_integer_body(buffer))


class FloatCodec(TypeCodec[Float32]):
    def write(self, value: float, buffer: Buffer, context: WriteContext) -> None:
        buffer.write_float(value)

    def read(self, buffer: Buffer, context: ReadContext) -> Float32:
        return Float32(buffer.read_float())


class DoubleCodec(TypeCodec[float]):
    def write(self, value: float, buffer: Buffer, context: WriteContext) -> None:
        buffer.write_double(value)

    def read(self, buffer: Buffer, context: ReadContext) -> float:
        return buffer.read_double()


class BigDecimalCodec(TypeCodec[Decimal]):
    """Decimal as an int32 scale followed by the unscaled BIG_INTEGER body.

    The value equals ``unscaled * 10 ** -scale``. The exponent of the
    Decimal is kept, so ``Decimal("1.50")`` decodes with two places.
    NaN and infinities have no representation.
    """

    def write(self, value: Decimal, buffer: Buffer, context: WriteContext) -> None:
        if not value.is_finite():
            raise EncodingPreconditionException(f"Decimal {value} is not finite")
        sign, digits, exponent = value.as_tuple()
        unscaled = int("".join(map(str, digits))) if digits else 0
        if sign:
            unscaled = -unscaled
        buffer.write_int(-exponent)
        write_big_integer_body(buffer, unscaled)

    def read(self, buffer: Buffer, context: ReadContext) -> Decimal:
        scale = buffer.read_int()
        unscaled = read_big_integer_body(buffer)
        digits = tuple(int(d) for d in str(abs(unscaled)))
        return Decimal((1 if unscaled < 0 else 0, digits, -scale))


class StringCodec(TypeCodec[str]):
    def write(self, value: str, buffer: Buffer, context: WriteContext) -> None:
        buffer.write_string(value)

    def read(self, buffer: Buffer, context: ReadContext) -> str:
        return buffer.read_string()


class BinaryCodec(TypeCodec[bytes]):
    """Opaque bytes with an int32 length prefix."""

    def write(self, value: bytes, buffer: Buffer, context: WriteContext) -> None:
        buffer.write_int(len(value))
        buffer.write_bytes(value)

    def read(self, buffer: Buffer, context: ReadContext) -> bytes:
        length = buffer.read_int()
        if length < 0:
            raise MalformedValueException(f"Negative binary length: {length}")
        return buffer.read_bytes(length)


class UUIDCodec(TypeCodec[uuid.UUID]):
    """16 bytes: most significant 64 bits, then least significant."""

    def write(self, value: uuid.UUID, buffer: Buffer, context: WriteContext) -> None:
        buffer.write_bytes(value.bytes)

    def read(self, buffer: Buffer, context: ReadContext) -> uuid.UUID:
        return uuid.UUID(bytes=buffer.read_bytes(UUID_SIZE))


class DateCodec(TypeCodec[date]):
    """Calendar date: int32 year, u8 month, u8 day.

    Fields that do not form a valid date are rejected, never clamped.
    Python dates cover years 1 to 9999 only.
    """

    def write(self, value: date, buffer: Buffer, context: WriteContext) -> None:
        write_date_fields(buffer, value)

    def read(self, buffer: Buffer, context: ReadContext) -> date:
        year, month, day = read_date_fields(buffer)
        try:
            return date(year, month, day)
        except ValueError as e:
            raise MalformedValueException(
                f"Invalid date {year}-{month}-{day}: {e}", cause=e
            ) from e


class TimeCodec(TypeCodec[time]):
    """Naive time of day with nanosecond field.

    Python keeps microseconds, so sub-microsecond nanoseconds are dropped
    when decoding.
    """

    def write(self, value: time, buffer: Buffer, context: WriteContext) -> None:
        write_time_fields(buffer, value)

    def read(self, buffer: Buffer, context: ReadContext) -> time:
        return _build(time, *read_time_fields(buffer))


class LocalDateTimeCodec(TypeCodec[datetime]):
    def write(self, value: datetime, buffer: Buffer, context: WriteContext) -> None:
        write_date_fields(buffer, value)
        write_time_fields(buffer, value)

    def read(self, buffer: Buffer, context: ReadContext) -> datetime:
        fields = read_date_fields(buffer) + read_time_fields(buffer)
        return _build(datetime, *fields)


class DateTimeCodec(TypeCodec[datetime]):
    """Timezone-aware datetime stored as local fields plus UTC offset.

    Only the offset travels; a named zone decodes as a fixed-offset
    ``datetime.timezone``.
    """

    def write(self, value: datetime, buffer: Buffer, context: WriteContext) -> None:
        offset = value.utcoffset()
        if offset.microseconds:
            raise EncodingPreconditionException(
                f"UTC offset {offset} is not a whole number of seconds"
            )
        write_date_fields(buffer, value)
        write_time_fields(buffer, value)
        buffer.write_int(offset.days * SECONDS_PER_DAY + offset.seconds)

    def read(self, buffer: Buffer, context: ReadContext) -> datetime:
        fields = read_date_fields(buffer) + read_time_fields(buffer)
        offset_seconds = buffer.read_int()
        try:
            tz = timezone(timedelta(seconds=offset_seconds))
        except ValueError as e:
            raise MalformedValueException(
                f"Invalid UTC offset of {offset_seconds} seconds", cause=e
            ) from e
        return _build(datetime, *fields, tzinfo=tz)


class DurationCodec(TypeCodec[timedelta]):
    """Duration as int64 seconds plus a 0..999999999 nanosecond adjustment.

    Negative durations keep the adjustment positive: -1.5 s is written as
    seconds -2, nanos 500000000.
    """

    def write(self, value: timedelta, buffer: Buffer, context: WriteContext) -> None:
        buffer.write_long(value.days * SECONDS_PER_DAY + value.seconds)
        buffer.write_int(value.microseconds * NANOS_PER_MICRO)

    def read(self, buffer: Buffer, context: ReadContext) -> timedelta:
        seconds = buffer.read_long()
        nanos = buffer.read_int()
        if not 0 <= nanos <= MAX_NANO:
            raise MalformedValueException(f"Duration nanos out of range: {nanos}")
        try:
            return timedelta(seconds=seconds, microseconds=nanos // NANOS_PER_MICRO)
        except OverflowError as e:
            raise MalformedValueException(
                f"Duration of {seconds} seconds exceeds the supported range", cause=e
            ) from e


def write_date_fields(buffer: Buffer, value: date) -> None:
    buffer.write_int(value.year)
    buffer.write_unsigned_byte(value.month)
    buffer.write_unsigned_byte(value.day)


def read_date_fields(buffer: Buffer) -> Tuple[int, int, int]:
    return buffer.read_int(), buffer.read_unsigned_byte(), buffer.read_unsigned_byte()


def write_time_fields(buffer: Buffer, value) -> None:
    buffer.write_unsigned_byte(value.hour)
    buffer.write_unsigned_byte(value.minute)
    buffer.write_unsigned_byte(value.second)
    buffer.write_int(value.microsecond * NANOS_PER_MICRO)


def read_time_fields(buffer: Buffer) -> Tuple[int, int, int, int]:
    hour = buffer.read_unsigned_byte()
    minute = buffer.read_unsigned_byte()
    second = buffer.read_unsigned_byte()
    nano = buffer.read_int()
    if not 0 <= nano <= MAX_NANO:
        raise MalformedValueException(f"Nanosecond field out of range: {nano}")
    return hour, minute, second, nano // NANOS_PER_MICRO


def _build(factory, *fields, **kwargs):
    try:
        return factory(*fields, **kwargs)
    except (ValueError, OverflowError) as e:
        raise MalformedValueException(
            f"Invalid {factory.__name__} fields {fields}: {e}", cause=e
        ) from e


def write_big_integer_body(buffer: Buffer, value: int) -> None:
    """Write ``value`` as int32 length plus minimal two's-complement bytes."""
    magnitude_bits = value.bit_length() if value >= 0 else (~value).bit_length()
    length = magnitude_bits // 8 + 1
    buffer.write_int(length)
    buffer.write_bytes(value.to_bytes(length, "big", signed=True))


def read_big_integer_body(buffer: Buffer) -> int:
    length = buffer.read_int()
    if length <= 0:
        raise MalformedValueException(f"Big integer length must be positive, got {length}")
    return int.from_bytes(buffer.read_bytes(length), "big", signed=True)


def _is_int32(value: int) -> bool:
    return not isinstance(value, (Long, BigInteger)) and INT32_MIN <= value <= INT32_MAX


def _is_long(value: int) -> bool:
    if isinstance(value, Long):
        return True
    return not isinstance(value, BigInteger) and INT64_MIN <= value <= INT64_MAX


def _is_big_integer(value: int) -> bool:
    return isinstance(value, BigInteger) or not INT64_MIN <= value <= INT64_MAX


def _is_aware(value) -> bool:
    return value.utcoffset() is not None


def _is_naive(value) -> bool:
    return value.utcoffset() is None


def get_builtin_entries() -> List[RegistryEntry]:
    """Registry entries of all built-in leaf types.

    Order matters for values whose exact type is not registered: they are
    matched with ``isinstance`` in this order, so subclasses are listed
    before their bases (bool before int, datetime before date).
    """
    return [
        RegistryEntry(DataType.BOOLEAN, (bool,), BooleanCodec()),
        RegistryEntry(DataType.BYTE, (Byte,), ByteCodec()),
        RegistryEntry(DataType.SHORT, (Short,), ShortCodec()),
        RegistryEntry(DataType.INT, (int,), IntCodec(), guard=_is_int32),
        RegistryEntry(DataType.LONG, (Long, int), LongCodec(), guard=_is_long),
        RegistryEntry(
            DataType.BIG_INTEGER, (BigInteger, int), BigIntegerCodec(), guard=_is_big_integer
        ),
        RegistryEntry(DataType.FLOAT, (Float32,), FloatCodec()),
        RegistryEntry(DataType.DOUBLE, (float,), DoubleCodec()),
        RegistryEntry(DataType.BIG_DECIMAL, (Decimal,), BigDecimalCodec()),
        RegistryEntry(DataType.STRING, (str,), StringCodec()),
        RegistryEntry(DataType.BINARY, (bytes, bytearray), BinaryCodec()),
        RegistryEntry(DataType.UUID, (uuid.UUID,), UUIDCodec()),
        RegistryEntry(DataType.DATETIME, (datetime,), DateTimeCodec(), guard=_is_aware),
        RegistryEntry(
            DataType.LOCAL_DATETIME, (datetime,), LocalDateTimeCodec(), guard=_is_naive
        ),
        RegistryEntry(DataType.DATE, (date,), DateCodec()),
        RegistryEntry(DataType.TIME, (time,), TimeCodec(), guard=_is_naive),
        RegistryEntry(DataType.DURATION, (timedelta,), DurationCodec()),
    ]

"""Tests for graphbinary/serialization/buffer.py module."""

import math

import pytest

from graphbinary.exceptions import (
    BufferUnderrunException,
    EncodingPreconditionException,
    IllegalArgumentException,
    MalformedValueException,
)
from graphbinary.serialization.buffer import Buffer


class TestBufferCursors:
    """Tests for the read and write cursors."""

    def test_empty(self, buffer):
        assert len(buffer) == 0
        assert buffer.reader_index == 0
        assert buffer.writer_index == 0
        assert buffer.readable_bytes() == 0
        assert buffer.to_bytes() == b""

    def test_from_bytes(self):
        buffer = Buffer(b"\x01\x02\x03")
        assert buffer.readable_bytes() == 3
        assert buffer.read_unsigned_byte() == 1
        assert buffer.reader_index == 1
        assert buffer.readable_bytes() == 2

    def test_from_memoryview(self):
        buffer = Buffer(memoryview(b"\x00\x00\x00\x2a"))
        assert buffer.read_int() == 42

    def test_to_bytes_ignores_reader_index(self):
        buffer = Buffer(b"\x01\x02")
        buffer.read_byte()
        assert buffer.to_bytes() == b"\x01\x02"

    def test_set_reader_index(self):
        buffer = Buffer(b"\x01\x02")
        buffer.read_byte()
        buffer.set_reader_index(0)
        assert buffer.read_byte() == 1

    @pytest.mark.parametrize("pos", [-1, 3])
    def test_set_reader_index_out_of_range(self, pos):
        with pytest.raises(IllegalArgumentException):
            Buffer(b"\x01\x02").set_reader_index(pos)


class TestBufferIntegers:
    """Tests for fixed-width integer writes and reads."""

    @pytest.mark.parametrize("write,read,value,encoded", [
        ("write_byte", "read_byte", -1, b"\xff"),
        ("write_unsigned_byte", "read_unsigned_byte", 254, b"\xfe"),
        ("write_short", "read_short", 0x0102, b"\x01\x02"),
        ("write_int", "read_int", 2023, b"\x00\x00\x07\xe7"),
        ("write_int", "read_int", -2, b"\xff\xff\xff\xfe"),
        ("write_long", "read_long", 1, b"\x00" * 7 + b"\x01"),
    ])
    def test_big_endian(self, buffer, write, read, value, encoded):
        getattr(buffer, write)(value)
        assert buffer.to_bytes() == encoded
        assert getattr(buffer, read)() == value

    @pytest.mark.parametrize("write,value", [
        ("write_byte", 128),
        ("write_byte", -129),
        ("write_unsigned_byte", 256),
        ("write_unsigned_byte", -1),
        ("write_short", 1 << 15),
        ("write_int", 1 << 31),
        ("write_int", -(1 << 31) - 1),
        ("write_long", 1 << 63),
    ])
    def test_out_of_range(self, buffer, write, value):
        with pytest.raises(EncodingPreconditionException):
            getattr(buffer, write)(value)
        assert len(buffer) == 0

    def test_underrun(self):
        buffer = Buffer(b"\x00\x01")
        with pytest.raises(BufferUnderrunException) as exc_info:
            buffer.read_int()
        assert exc_info.value.requested == 4
        assert exc_info.value.available == 2
        assert buffer.reader_index == 0


class TestBufferFloatingPoint:
    def test_double(self, buffer):
        buffer.write_double(1.5)
        assert buffer.to_bytes() == b"\x3f\xf8\x00\x00\x00\x00\x00\x00"
        assert buffer.read_double() == 1.5

    def test_float(self, buffer):
        buffer.write_float(1.5)
        assert buffer.to_bytes() == b"\x3f\xc0\x00\x00"
        assert buffer.read_float() == 1.5

    def test_float_nan(self, buffer):
        buffer.write_float(float("nan"))
        assert math.isnan(buffer.read_float())

    def test_float_overflow(self, buffer):
        with pytest.raises(EncodingPreconditionException):
            buffer.write_float(1e300)


class TestBufferBooleans:
    def test_roundtrip(self, buffer):
        buffer.write_boolean(True)
        buffer.write_boolean(False)
        assert buffer.to_bytes() == b"\x01\x00"
        assert buffer.read_boolean() is True
        assert buffer.read_boolean() is False

    def test_invalid_byte(self):
        with pytest.raises(MalformedValueException):
            Buffer(b"\x02").read_boolean()


class TestBufferStrings:
    def test_string(self, buffer):
        buffer.write_string("héllo")
        assert buffer.to_bytes() == b"\x00\x00\x00\x06h\xc3\xa9llo"
        assert buffer.read_string() == "héllo"

    def test_empty_string(self, buffer):
        buffer.write_string("")
        assert buffer.to_bytes() == b"\x00\x00\x00\x00"
        assert buffer.read_string() == ""

    def test_negative_length(self):
        with pytest.raises(MalformedValueException):
            Buffer(b"\xff\xff\xff\xff").read_string()

    def test_length_beyond_data(self):
        with pytest.raises(BufferUnderrunException):
            Buffer(b"\x00\x00\x00\x05ab").read_string()

    def test_invalid_utf8(self):
        with pytest.raises(MalformedValueException):
            Buffer(b"\x00\x00\x00\x01\xff").read_string()

    def test_lone_surrogate(self, buffer):
        with pytest.raises(EncodingPreconditionException):
            buffer.write_string("\ud800")


class TestBufferRawBytes:
    def test_read_bytes(self):
        buffer = Buffer(b"abc")
        assert buffer.read_bytes(2) == b"ab"
        assert buffer.readable_bytes() == 1

    def test_read_zero_bytes(self):
        assert Buffer(b"").read_bytes(0) == b""

    def test_negative_length(self):
        with pytest.raises(MalformedValueException):
            Buffer(b"abc").read_bytes(-1)

    def test_ensure_readable(self):
        buffer = Buffer(b"abc")
        buffer.ensure_readable(3)
        with pytest.raises(BufferUnderrunException):
            buffer.ensure_readable(4)

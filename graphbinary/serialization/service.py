"""Envelope writer and reader, and the serializer facade.

Every value on the wire is an envelope::

    type_code:u8  nullable_flag:u8  body

except the untyped null, which is the single byte ``0xFE``. The writer and
reader own the envelope; codecs only ever see bodies. Custom-range bodies
are additionally framed with an int32 length so that any peer can skip
them.
"""

from typing import Any, Optional

from graphbinary.config import DEFAULT_MAX_DEPTH, SerializationConfig
from graphbinary.exceptions import (
    EncodingPreconditionException,
    MalformedValueException,
    UnsupportedTypeException,
)
from graphbinary.logging import get_logger, hex_preview
from graphbinary.serialization.api import ReadContext, WriteContext
from graphbinary.serialization.buffer import Buffer
from graphbinary.serialization.registry import TypeRegistry
from graphbinary.structure.types import (
    NOT_NULL_FLAG,
    NULL_FLAG,
    DataType,
    TypedNull,
    UnknownCustomValue,
    is_custom_code,
    type_name,
)

_logger = get_logger("serializer")


class WriteContextImpl(WriteContext):
    """Re-enters a writer one nesting level deeper."""

    __slots__ = ("_writer", "_depth")

    def __init__(self, writer: "GraphBinaryWriter", depth: int):
        self._writer = writer
        self._depth = depth

    @property
    def registry(self) -> TypeRegistry:
        return self._writer.registry

    @property
    def depth(self) -> int:
        return self._depth

    def write_value(self, value: Any, buffer: Buffer) -> None:
        self._writer._write(value, buffer, self._depth)


class ReadContextImpl(ReadContext):
    """Re-enters a reader one nesting level deeper."""

    __slots__ = ("_reader", "_depth")

    def __init__(self, reader: "GraphBinaryReader", depth: int):
        self._reader = reader
        self._depth = depth

    @property
    def registry(self) -> TypeRegistry:
        return self._reader.registry

    @property
    def depth(self) -> int:
        return self._depth

    def read_value(self, buffer: Buffer) -> Any:
        return self._reader._read(buffer, self._depth)


class GraphBinaryWriter:
    """Writes complete envelopes for values.

    Args:
        registry: Registry resolving values to type codes and codecs.
        max_depth: Deepest nesting level accepted, or None for no limit
            other than the interpreter stack.
    """

    def __init__(self, registry: TypeRegistry, max_depth: Optional[int] = DEFAULT_MAX_DEPTH):
        self._registry = registry
        self._max_depth = max_depth

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    def write_value(self, value: Any, buffer: Buffer) -> None:
        """Append the envelope of ``value`` to ``buffer``.

        Args:
            value: Any supported value, ``None``, or a :class:`TypedNull`.
            buffer: Buffer to append to.

        Raises:
            UnsupportedTypeException: If no codec handles the value.
            EncodingPreconditionException: If the value cannot occupy its
                slot (out-of-range width, non-nullable typed null, nesting
                too deep).
        """
        try:
            self._write(value, buffer, 0)
        except RecursionError as e:
            raise EncodingPreconditionException(
                "Value is nested too deeply for the interpreter stack", cause=e
            ) from e

    def _write(self, value: Any, buffer: Buffer, depth: int) -> None:
        if self._max_depth is not None and depth > self._max_depth:
            raise EncodingPreconditionException(
                f"Value nesting exceeds the maximum depth of {self._max_depth}"
            )

        if value is None:
            buffer.write_unsigned_byte(DataType.UNSPECIFIED_NULL)
            return

        if isinstance(value, TypedNull):
            self._write_typed_null(value, buffer)
            return

        if isinstance(value, UnknownCustomValue):
            if not is_custom_code(value.type_code):
                raise EncodingPreconditionException(
                    f"Opaque values are only allowed for custom codes, "
                    f"not {type_name(value.type_code)}"
                )
            buffer.write_unsigned_byte(value.type_code)
            buffer.write_unsigned_byte(NOT_NULL_FLAG)
            buffer.write_int(len(value.payload))
            buffer.write_bytes(value.payload)
            return

        entry = self._registry.entry_for_value(value)
        buffer.write_unsigned_byte(entry.type_code)
        buffer.write_unsigned_byte(NOT_NULL_FLAG)
        context = WriteContextImpl(self, depth + 1)

        if entry.is_custom:
            body = Buffer()
            entry.codec.write(value, body, context)
            buffer.write_int(len(body))
            buffer.write_bytes(body.to_bytes())
        else:
            entry.codec.write(value, buffer, context)

    def _write_typed_null(self, value: TypedNull, buffer: Buffer) -> None:
        if value.type_code == DataType.UNSPECIFIED_NULL:
            raise EncodingPreconditionException(
                "The null marker has no typed null; write None instead"
            )
        entry = self._registry.entry_for_code(value.type_code)
        if not entry.nullable:
            raise EncodingPreconditionException(
                f"{type_name(value.type_code)} does not accept a typed null"
            )
        buffer.write_unsigned_byte(value.type_code)
        buffer.write_unsigned_byte(NULL_FLAG)


class GraphBinaryReader:
    """Reads complete envelopes back into values.

    Args:
        registry: Registry resolving type codes to codecs.
        max_depth: Deepest nesting level accepted, or None for no limit
            other than the interpreter stack.
        skip_unknown_custom_types: Return unregistered custom-range values
            as :class:`UnknownCustomValue` instead of failing.
    """

    def __init__(
        self,
        registry: TypeRegistry,
        max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
        skip_unknown_custom_types: bool = False,
    ):
        self._registry = registry
        self._max_depth = max_depth
        self._skip_unknown_custom_types = skip_unknown_custom_types

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    def read_value(self, buffer: Buffer) -> Any:
        """Read one envelope from ``buffer``.

        Args:
            buffer: Buffer whose read cursor is at a type code.

        Returns:
            The decoded value; ``None`` for the null marker and typed nulls.

        Raises:
            UnsupportedTypeException: If the type code is not registered.
            MalformedValueException: If a body breaks its type's rules.
            BufferUnderrunException: If the bytes end mid-value.
        """
        try:
            return self._read(buffer, 0)
        except RecursionError as e:
            raise MalformedValueException(
                "Value is nested too deeply for the interpreter stack", cause=e
            ) from e

    def _read(self, buffer: Buffer, depth: int) -> Any:
        if self._max_depth is not None and depth > self._max_depth:
            raise MalformedValueException(
                f"Value nesting exceeds the maximum depth of {self._max_depth}"
            )

        type_code = buffer.read_unsigned_byte()
        if type_code == DataType.UNSPECIFIED_NULL:
            return None

        if not self._registry.is_registered(type_code):
            if self._skip_unknown_custom_types and is_custom_code(type_code):
                return self._read_unknown_custom(type_code, buffer)
            raise UnsupportedTypeException(
                f"Unsupported type code {type_name(type_code)} at position "
                f"{buffer.reader_index - 1}",
                type_code=type_code,
            )
        entry = self._registry.entry_for_code(type_code)

        if self._read_null_flag(buffer, type_code):
            return None

        context = ReadContextImpl(self, depth + 1)
        if not entry.is_custom:
            return entry.codec.read(buffer, context)

        body = Buffer(buffer.read_bytes(self._read_frame_length(buffer, type_code)))
        value = entry.codec.read(body, context)
        if body.readable_bytes():
            raise MalformedValueException(
                f"{type_name(type_code)} codec left {body.readable_bytes()} "
                f"of {len(body)} body bytes unread"
            )
        return value

    def _read_unknown_custom(
        self, type_code: int, buffer: Buffer
    ) -> Optional[UnknownCustomValue]:
        if self._read_null_flag(buffer, type_code):
            return None
        payload = buffer.read_bytes(self._read_frame_length(buffer, type_code))
        _logger.debug(
            "Skipped unknown custom type %s: %s", type_name(type_code), hex_preview(payload)
        )
        return UnknownCustomValue(type_code, payload)

    @staticmethod
    def _read_null_flag(buffer: Buffer, type_code: int) -> bool:
        flag = buffer.read_unsigned_byte()
        if flag == NULL_FLAG:
            return True
        if flag != NOT_NULL_FLAG:
            raise MalformedValueException(
                f"Invalid nullable flag 0x{flag:02X} for {type_name(type_code)}"
            )
        return False

    @staticmethod
    def _read_frame_length(buffer: Buffer, type_code: int) -> int:
        length = buffer.read_int()
        if length < 0:
            raise MalformedValueException(
                f"Negative body length {length} for {type_name(type_code)}"
            )
        return length


class GraphBinarySerializer:
    """Entry point bundling a frozen registry with a writer and a reader.

    The registry holds the built-in catalogue plus the custom types of the
    configuration, and is frozen before the serializer is returned, so a
    serializer can be shared between threads. Buffers cannot.

    Args:
        config: Serialization configuration; defaults are used when omitted.
        registry: A pre-built registry to use instead of the default
            catalogue. It is frozen, and custom types from ``config`` are
            not added to it.

    Example:
        >>> serializer = GraphBinarySerializer()
        >>> data = serializer.to_bytes(date(2023, 3, 15))
        >>> data.hex()
        '0700000007e7030f'
        >>> serializer.to_object(data)
        datetime.date(2023, 3, 15)
    """

    def __init__(
        self,
        config: Optional[SerializationConfig] = None,
        registry: Optional[TypeRegistry] = None,
    ):
        self._config = config or SerializationConfig()

        if registry is None:
            registry = TypeRegistry.default()
            for custom in self._config.custom_types:
                registry.register_custom(custom.type_code, custom.kind, custom.codec)
        if not registry.is_frozen:
            registry.freeze()
        self._registry = registry

        self._writer = GraphBinaryWriter(registry, self._config.max_depth)
        self._reader = GraphBinaryReader(
            registry,
            self._config.max_depth,
            self._config.skip_unknown_custom_types,
        )
        _logger.debug(
            "Serializer ready with %d types (max_depth=%s, skip_unknown_custom_types=%s)",
            len(registry),
            self._config.max_depth,
            self._config.skip_unknown_custom_types,
        )

    @property
    def config(self) -> SerializationConfig:
        return self._config

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    @property
    def writer(self) -> GraphBinaryWriter:
        return self._writer

    @property
    def reader(self) -> GraphBinaryReader:
        return self._reader

    def write_value(self, value: Any, buffer: Buffer) -> None:
        """Append the envelope of ``value`` to an existing buffer."""
        self._writer.write_value(value, buffer)

    def read_value(self, buffer: Buffer) -> Any:
        """Read the next envelope from an existing buffer."""
        return self._reader.read_value(buffer)

    def to_bytes(self, value: Any) -> bytes:
        """Encode a single value.

        Args:
            value: The value to encode.

        Returns:
            The complete envelope bytes.
        """
        buffer = Buffer()
        self._writer.write_value(value, buffer)
        return buffer.to_bytes()

    def to_object(self, data: Any) -> Any:
        """Decode a single value that must span all of ``data``.

        Args:
            data: ``bytes``, ``bytearray`` or ``memoryview`` holding exactly
                one envelope.

        Returns:
            The decoded value.

        Raises:
            MalformedValueException: If bytes remain after the value.
        """
        buffer = Buffer(data)
        value = self._reader.read_value(buffer)
        if buffer.readable_bytes():
            raise MalformedValueException(
                f"{buffer.readable_bytes()} trailing bytes after value"
            )
        return value

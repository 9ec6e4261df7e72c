"""GraphBinary exceptions.

This module defines the exception hierarchy for the GraphBinary codec.
All exceptions inherit from :class:`GraphBinaryException`.

Example:
    Handling codec failures::

        from graphbinary.exceptions import (
            BufferUnderrunException,
            SerializationException,
            UnsupportedTypeException,
        )

        try:
            value = serializer.to_object(payload)
        except UnsupportedTypeException as e:
            print(f"Unknown type code: {e.type_code}")
        except BufferUnderrunException:
            print("Message was truncated")
        except SerializationException as e:
            print(f"Could not decode: {e}")
"""

from typing import Optional


class GraphBinaryException(Exception):
    """Base class for all GraphBinary exceptions.

    Args:
        message: The error message describing the exception.
        cause: The underlying exception that caused this error, if any.

    Attributes:
        cause: The underlying cause of this exception, if any.
    """

    def __init__(self, message: str = "", cause: Exception = None):
        super().__init__(message)
        self.cause = cause


class IllegalStateException(GraphBinaryException):
    """Raised when an operation is invoked on an illegal state.

    Example:
        - Registering a type after the registry has been frozen
    """
    pass


class IllegalArgumentException(GraphBinaryException):
    """Raised when an illegal or inappropriate argument is passed.

    Example:
        - Registering a type code outside 0..255
        - Registering a custom type outside the custom code range
        - Binding a kind that is already bound to another code
    """
    pass


class ConfigurationException(GraphBinaryException):
    """Raised when the serialization configuration is invalid.

    Example:
        - Non-positive maximum depth
        - Unresolvable custom codec import path
        - Unreadable or unparsable YAML
    """
    pass


class SerializationException(GraphBinaryException):
    """Raised when a value cannot be encoded or decoded.

    Base class of the codec error taxonomy. A failure inside a nested value
    aborts the whole enclosing call; the buffer position afterwards is
    undefined.
    """
    pass


class UnsupportedTypeException(SerializationException):
    """Raised when no codec exists for a value or a type code.

    Encoding raises it when no registered kind matches the value; decoding
    raises it for an unregistered type code.

    Args:
        message: The error message.
        type_code: The offending wire type code, when decoding.
        value_type: The offending Python type, when encoding.
    """

    def __init__(
        self,
        message: str,
        type_code: Optional[int] = None,
        value_type: Optional[type] = None,
    ):
        super().__init__(message)
        self._type_code = type_code
        self._value_type = value_type

    @property
    def type_code(self) -> Optional[int]:
        """Get the unregistered type code, if any."""
        return self._type_code

    @property
    def value_type(self) -> Optional[type]:
        """Get the unsupported Python type, if any."""
        return self._value_type

    @property
    def is_custom(self) -> bool:
        """Whether the unknown code lies in the custom type range."""
        from graphbinary.structure.types import is_custom_code

        return self._type_code is not None and is_custom_code(self._type_code)


class MalformedValueException(SerializationException):
    """Raised when a body violates the structural rules of its type.

    Example:
        - A negative collection count or string length
        - A date whose fields do not form a valid calendar date
        - A graph entity field holding a value of the wrong type
    """
    pass


class BufferUnderrunException(SerializationException):
    """Raised when a read needs more bytes than the buffer holds.

    Args:
        message: The error message.
        requested: Number of bytes the read needed.
        available: Number of bytes that were left.
    """

    def __init__(self, message: str, requested: int = 0, available: int = 0):
        super().__init__(message)
        self._requested = requested
        self._available = available

    @property
    def requested(self) -> int:
        """Get the number of bytes the failed read needed."""
        return self._requested

    @property
    def available(self) -> int:
        """Get the number of bytes left when the read failed."""
        return self._available


class EncodingPreconditionException(SerializationException):
    """Raised when a value cannot legally occupy the slot it is written to.

    Example:
        - An integer outside the range of its declared width
        - A typed null for a type without a null representation
        - A non-finite Decimal
    """
    pass

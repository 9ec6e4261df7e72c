"""Type registry binding Python kinds and wire type codes to codecs.

The registry is the only place that knows which type code a value travels
under. It is populated once, frozen, and then read concurrently by any
number of encode and decode passes.

Encode lookup is an explicit table keyed by the value's exact Python
type. Several entries may share a Python type when each carries a guard
(``int`` by magnitude, ``datetime`` by awareness); they are tried in
registration order. Values whose exact type has no entry (subclasses) are
matched with ``isinstance`` against all entries, again in registration
order.
"""

import threading
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from graphbinary.exceptions import (
    IllegalArgumentException,
    IllegalStateException,
    UnsupportedTypeException,
)
from graphbinary.logging import get_logger
from graphbinary.serialization.api import FunctionCodec, TypeCodec
from graphbinary.structure.types import (
    CUSTOM_TYPE_MAX,
    CUSTOM_TYPE_MIN,
    DataType,
    is_custom_code,
    type_name,
)

_logger = get_logger("registry")

Kind = Union[type, Tuple[type, ...]]
Guard = Callable[[Any], bool]


class RegistryEntry:
    """One binding of a type code to a codec and the kinds it encodes."""

    __slots__ = ("type_code", "kinds", "codec", "guard", "nullable")

    def __init__(
        self,
        type_code: int,
        kinds: Tuple[type, ...],
        codec: TypeCodec,
        guard: Optional[Guard] = None,
        nullable: bool = True,
    ):
        self.type_code = type_code
        self.kinds = kinds
        self.codec = codec
        self.guard = guard
        self.nullable = nullable

    @property
    def is_custom(self) -> bool:
        return is_custom_code(self.type_code)

    def accepts(self, value: Any) -> bool:
        return self.guard is None or self.guard(value)

    def __repr__(self) -> str:
        kinds = ", ".join(k.__name__ for k in self.kinds)
        return f"RegistryEntry({type_name(self.type_code)}, [{kinds}], {self.codec!r})"


class TypeRegistry:
    """Table of codecs by type code and by Python kind.

    Example:
        >>> registry = TypeRegistry.default()
        >>> registry.register_custom(0xC1, Point, PointCodec())
        >>> registry.freeze()
        >>> registry.resolve_for_encode(Point(1, 2))
        (193, <PointCodec ...>)
    """

    def __init__(self):
        self._by_code: Dict[int, RegistryEntry] = {}
        self._by_type: Dict[type, List[RegistryEntry]] = {}
        self._entries: List[RegistryEntry] = []
        self._frozen = False
        self._lock = threading.Lock()

    @classmethod
    def default(cls) -> "TypeRegistry":
        """Create an unfrozen registry holding the built-in catalogue."""
        from graphbinary.serialization.builtin import get_builtin_entries
        from graphbinary.serialization.composite import get_composite_entries

        registry = cls()
        for entry in get_builtin_entries() + get_composite_entries():
            registry._add(entry)
        _logger.debug("Registered %d built-in types", len(registry._entries))
        return registry

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "TypeRegistry":
        """Forbid further registrations. Lookups are unaffected."""
        with self._lock:
            self._frozen = True
        _logger.debug("Registry frozen with %d types", len(self._entries))
        return self

    def register(
        self,
        type_code: int,
        kind: Kind,
        codec: TypeCodec,
        guard: Optional[Guard] = None,
        nullable: bool = True,
    ) -> None:
        """Bind a type code to a codec and the Python kinds it encodes.

        Args:
            type_code: Wire code, 0..255, not the null marker.
            kind: A type or tuple of types whose instances use this code.
            codec: The body codec.
            guard: Optional predicate narrowing which values of ``kind``
                belong to this code.
            nullable: Whether a typed null may be written for this code.

        Raises:
            IllegalStateException: If the registry is frozen.
            IllegalArgumentException: If the code is invalid or taken, or
                ``kind`` is already bound without a guard.
        """
        kinds = kind if isinstance(kind, tuple) else (kind,)
        if not kinds or not all(isinstance(k, type) for k in kinds):
            raise IllegalArgumentException(f"Kind must be a type or tuple of types: {kind!r}")
        if not isinstance(codec, TypeCodec):
            raise IllegalArgumentException(f"Codec must be a TypeCodec: {codec!r}")
        self._add(RegistryEntry(type_code, kinds, codec, guard, nullable))
        _logger.debug("Registered %s for %s", type_name(type_code), kinds)

    def register_custom(
        self,
        type_code: int,
        kind: Kind,
        codec: Union[TypeCodec, Callable[..., None]],
        read_fn: Optional[Callable[..., Any]] = None,
    ) -> None:
        """Register a user type in the custom code range.

        Custom bodies are always framed with an int32 length by the writer,
        so peers that do not know the type can still skip over it.

        Args:
            type_code: Code within ``CUSTOM_TYPE_MIN..CUSTOM_TYPE_MAX``.
            kind: The Python type(s) encoded under this code.
            codec: A :class:`TypeCodec`, or a write function
                ``(value, buffer, context)`` when ``read_fn`` is given.
            read_fn: Read function ``(buffer, context) -> value``.

        Raises:
            IllegalArgumentException: If the code is outside the custom range
                or the functions are incomplete.
        """
        if not is_custom_code(type_code):
            raise IllegalArgumentException(
                f"Custom type code 0x{type_code:02X} is outside the custom range "
                f"0x{CUSTOM_TYPE_MIN:02X}..0x{CUSTOM_TYPE_MAX:02X}"
            )
        if read_fn is not None:
            if not callable(codec) or not callable(read_fn):
                raise IllegalArgumentException("Custom type write and read functions must be callable")
            codec = FunctionCodec(codec, read_fn)
        self.register(type_code, kind, codec)

    def _add(self, entry: RegistryEntry) -> None:
        code = entry.type_code
        if not isinstance(code, int) or not 0 <= code <= 0xFF:
            raise IllegalArgumentException(f"Type code must be a single byte, got {code!r}")
        if code == DataType.UNSPECIFIED_NULL:
            raise IllegalArgumentException("The null marker code cannot be registered")

        with self._lock:
            if self._frozen:
                raise IllegalStateException(
                    f"Cannot register {type_name(code)}: the registry is frozen"
                )
            if code in self._by_code:
                raise IllegalArgumentException(
                    f"Type code 0x{code:02X} is already registered to "
                    f"{self._by_code[code].codec!r}"
                )
            if entry.guard is None:
                for kind in entry.kinds:
                    for existing in self._by_type.get(kind, ()):
                        if existing.guard is None:
                            raise IllegalArgumentException(
                                f"{kind.__name__} is already encoded as "
                                f"{type_name(existing.type_code)}"
                            )
            self._by_code[code] = entry
            for kind in entry.kinds:
                self._by_type.setdefault(kind, []).append(entry)
            self._entries.append(entry)

    def resolve_for_encode(self, value: Any) -> Tuple[int, TypeCodec]:
        """Find the type code and codec for a non-null value.

        Raises:
            UnsupportedTypeException: If no registered kind matches.
        """
        entry = self.entry_for_value(value)
        return entry.type_code, entry.codec

    def entry_for_value(self, value: Any) -> RegistryEntry:
        value_type = type(value)
        for entry in self._by_type.get(value_type, ()):
            if entry.accepts(value):
                return entry

        for entry in self._entries:
            if isinstance(value, entry.kinds) and entry.accepts(value):
                return entry

        raise UnsupportedTypeException(
            f"No type code registered for {value_type.__module__}.{value_type.__qualname__}",
            value_type=value_type,
        )

    def resolve_for_decode(self, type_code: int) -> TypeCodec:
        """Find the codec for a type code.

        Raises:
            UnsupportedTypeException: If the code is not registered.
        """
        return self.entry_for_code(type_code).codec

    def entry_for_code(self, type_code: int) -> RegistryEntry:
        entry = self._by_code.get(type_code)
        if entry is None:
            raise UnsupportedTypeException(
                f"Unsupported type code {type_name(type_code)}", type_code=type_code
            )
        return entry

    def is_registered(self, type_code: int) -> bool:
        return type_code in self._by_code

    @staticmethod
    def is_custom_code(type_code: int) -> bool:
        """Whether ``type_code`` lies in the custom range."""
        return is_custom_code(type_code)

    def type_codes(self) -> List[int]:
        """All registered codes in ascending order."""
        return sorted(self._by_code)

    def entries(self) -> List[RegistryEntry]:
        """All entries in registration order."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, type_code: object) -> bool:
        return type_code in self._by_code

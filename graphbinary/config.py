"""GraphBinary serialization configuration."""

import importlib
import os
from typing import Any, List, Optional, Union

from graphbinary.exceptions import ConfigurationException
from graphbinary.serialization.api import TypeCodec
from graphbinary.structure.types import CUSTOM_TYPE_MAX, CUSTOM_TYPE_MIN, is_custom_code

DEFAULT_MAX_DEPTH = 128

_ROOT_KEY = "graphbinary"


def _resolve(path: Any, what: str) -> Any:
    """Import the object named by a ``"module:attribute"`` path."""
    if not isinstance(path, str):
        return path
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise ConfigurationException(
            f"{what} must be given as 'module:attribute', got {path!r}"
        )
    try:
        target = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationException(f"Cannot import module for {what}: {module_name}", e) from e
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise ConfigurationException(f"{module_name} has no attribute {attribute}", e) from e
    return target


def _parse_type_code(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationException(f"Invalid type_code: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value, 0)
        except ValueError as e:
            raise ConfigurationException(f"Invalid type_code: {value!r}", e) from e
    raise ConfigurationException(f"Invalid type_code: {value!r}")


class CustomTypeConfig:
    """A user type bound to a code in the custom range.

    Args:
        type_code: Code between ``0xC0`` and ``0xEF``.
        kind: The Python class encoded under this code.
        codec: A :class:`TypeCodec` instance, or a codec class taking no
            arguments.
    """

    def __init__(self, type_code: int, kind: type, codec: Union[TypeCodec, type]):
        self._type_code = type_code
        self._kind = kind
        if isinstance(codec, type):
            if not issubclass(codec, TypeCodec):
                raise ConfigurationException(f"{codec.__name__} is not a TypeCodec")
            codec = codec()
        self._codec = codec
        self._validate()

    def _validate(self) -> None:
        if isinstance(self._type_code, bool) or not isinstance(self._type_code, int):
            raise ConfigurationException(f"type_code must be an int, got {self._type_code!r}")
        if not is_custom_code(self._type_code):
            raise ConfigurationException(
                f"type_code 0x{self._type_code:02X} is outside the custom range "
                f"0x{CUSTOM_TYPE_MIN:02X}..0x{CUSTOM_TYPE_MAX:02X}"
            )
        if not isinstance(self._kind, type):
            raise ConfigurationException(f"kind must be a class, got {self._kind!r}")
        if not isinstance(self._codec, TypeCodec):
            raise ConfigurationException(f"codec must be a TypeCodec, got {self._codec!r}")

    @property
    def type_code(self) -> int:
        return self._type_code

    @property
    def kind(self) -> type:
        return self._kind

    @property
    def codec(self) -> TypeCodec:
        return self._codec

    @classmethod
    def from_dict(cls, data: dict) -> "CustomTypeConfig":
        """Create CustomTypeConfig from a dictionary.

        ``kind`` and ``codec`` are ``"module:attribute"`` import paths;
        ``type_code`` may be an int or a string such as ``"0xC1"``.
        """
        for key in ("type_code", "kind", "codec"):
            if key not in data:
                raise ConfigurationException(f"Custom type is missing '{key}'")
        return cls(
            type_code=_parse_type_code(data["type_code"]),
            kind=_resolve(data["kind"], "kind"),
            codec=_resolve(data["codec"], "codec"),
        )

    def __repr__(self) -> str:
        return (
            f"CustomTypeConfig(type_code=0x{self._type_code:02X}, "
            f"kind={self._kind.__name__}, codec={self._codec!r})"
        )


class SerializationConfig:
    """Configuration of a :class:`~graphbinary.serialization.service.GraphBinarySerializer`.

    Example:
        Programmatic configuration::

            config = SerializationConfig(max_depth=64)
            config.add_custom_type(0xC1, Point, PointCodec())

        YAML configuration::

            config = SerializationConfig.from_yaml("graphbinary.yml")
    """

    def __init__(
        self,
        max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
        skip_unknown_custom_types: bool = False,
        custom_types: Optional[List[CustomTypeConfig]] = None,
    ):
        self._max_depth = max_depth
        self._skip_unknown_custom_types = skip_unknown_custom_types
        self._custom_types: List[CustomTypeConfig] = []
        self._validate()
        for custom in custom_types or []:
            self._add(custom)

    def _validate(self) -> None:
        if self._max_depth is not None:
            if isinstance(self._max_depth, bool) or not isinstance(self._max_depth, int):
                raise ConfigurationException("max_depth must be an int or None")
            if self._max_depth < 1:
                raise ConfigurationException("max_depth must be positive")
        if not isinstance(self._skip_unknown_custom_types, bool):
            raise ConfigurationException("skip_unknown_custom_types must be a bool")

    @property
    def max_depth(self) -> Optional[int]:
        """Get the deepest nesting level accepted, or None for no limit."""
        return self._max_depth

    @max_depth.setter
    def max_depth(self, value: Optional[int]) -> None:
        self._max_depth = value
        self._validate()

    @property
    def skip_unknown_custom_types(self) -> bool:
        """Get whether unregistered custom-range values decode as opaque values."""
        return self._skip_unknown_custom_types

    @skip_unknown_custom_types.setter
    def skip_unknown_custom_types(self, value: bool) -> None:
        self._skip_unknown_custom_types = value
        self._validate()

    @property
    def custom_types(self) -> List[CustomTypeConfig]:
        """Get the configured custom types."""
        return list(self._custom_types)

    def add_custom_type(
        self, type_code: int, kind: type, codec: Union[TypeCodec, type]
    ) -> "SerializationConfig":
        """Bind a user type to a custom code.

        Returns:
            This config, for chaining.

        Raises:
            ConfigurationException: If the code is outside the custom range
                or already configured.
        """
        self._add(CustomTypeConfig(type_code, kind, codec))
        return self

    def _add(self, custom: CustomTypeConfig) -> None:
        if not isinstance(custom, CustomTypeConfig):
            raise ConfigurationException(f"Expected CustomTypeConfig, got {custom!r}")
        for existing in self._custom_types:
            if existing.type_code == custom.type_code:
                raise ConfigurationException(
                    f"type_code 0x{custom.type_code:02X} is configured twice"
                )
        self._custom_types.append(custom)

    @classmethod
    def from_dict(cls, data: dict) -> "SerializationConfig":
        """Create SerializationConfig from a dictionary."""
        if not isinstance(data, dict):
            raise ConfigurationException(f"Configuration must be a mapping, got {type(data).__name__}")
        custom_types = data.get("custom_types") or []
        if not isinstance(custom_types, list):
            raise ConfigurationException("custom_types must be a list")
        return cls(
            max_depth=data.get("max_depth", DEFAULT_MAX_DEPTH),
            skip_unknown_custom_types=data.get("skip_unknown_custom_types", False),
            custom_types=[CustomTypeConfig.from_dict(c) for c in custom_types],
        )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "SerializationConfig":
        """Load configuration from a YAML file.

        Args:
            yaml_path: Path to the YAML configuration file.

        Raises:
            ConfigurationException: If the file cannot be read or parsed.
        """
        yaml = _import_yaml()

        if not os.path.exists(yaml_path):
            raise ConfigurationException(f"Configuration file not found: {yaml_path}")

        try:
            with open(yaml_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationException(f"Failed to parse YAML: {e}", e) from e
        except IOError as e:
            raise ConfigurationException(f"Failed to read configuration file: {e}", e) from e

        return cls._from_document(data)

    @classmethod
    def from_yaml_string(cls, yaml_content: str) -> "SerializationConfig":
        """Load configuration from a YAML string.

        Raises:
            ConfigurationException: If the YAML cannot be parsed.
        """
        yaml = _import_yaml()

        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigurationException(f"Failed to parse YAML: {e}", e) from e

        return cls._from_document(data)

    @classmethod
    def _from_document(cls, data: Any) -> "SerializationConfig":
        if data is None:
            data = {}
        if isinstance(data, dict) and _ROOT_KEY in data:
            data = data[_ROOT_KEY] or {}
        return cls.from_dict(data)

    def __repr__(self) -> str:
        return (
            f"SerializationConfig(max_depth={self._max_depth}, "
            f"skip_unknown_custom_types={self._skip_unknown_custom_types}, "
            f"custom_types={len(self._custom_types)})"
        )


def _import_yaml():
    try:
        import yaml
    except ImportError as e:
        raise ConfigurationException(
            "PyYAML is required for YAML configuration loading. "
            "Install it with: pip install pyyaml",
            e,
        ) from e
    return yaml

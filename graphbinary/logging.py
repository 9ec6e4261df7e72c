"""Logging for the GraphBinary codec.

All components log through children of the ``graphbinary`` logger
(``graphbinary.registry``, ``graphbinary.serializer``). Nothing is
printed until :func:`configure_logging` installs a handler, so
applications embedding the codec keep control of their own logging.

Example:
    >>> import logging
    >>> from graphbinary.logging import configure_logging, get_logger
    >>> configure_logging(level=logging.DEBUG)
    >>> get_logger("registry").debug("Registry frozen")
"""

import logging
from typing import Optional


GRAPHBINARY_ROOT_LOGGER = "graphbinary"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
HEX_PREVIEW_LIMIT = 32


class GraphBinaryLoggerFactory:
    """Factory for GraphBinary component loggers."""

    _configured: bool = False

    @classmethod
    def get_logger(cls, component: str = "") -> logging.Logger:
        """Get the logger of a component.

        Args:
            component: Component name such as ``"registry"``. Empty
                returns the root ``graphbinary`` logger.

        Returns:
            The component logger.
        """
        if component:
            return logging.getLogger(f"{GRAPHBINARY_ROOT_LOGGER}.{component}")
        return logging.getLogger(GRAPHBINARY_ROOT_LOGGER)

    @classmethod
    def configure(
        cls,
        level: int = logging.INFO,
        format_string: str = DEFAULT_FORMAT,
        handler: Optional[logging.Handler] = None,
    ) -> logging.Logger:
        """Attach a handler to the root ``graphbinary`` logger.

        A handler is only added when the logger has none, so calling this
        twice does not duplicate output.

        Args:
            level: Level applied to the logger and the new handler.
            format_string: Format of emitted records.
            handler: Handler to install; a ``StreamHandler`` by default.

        Returns:
            The root ``graphbinary`` logger.
        """
        logger = logging.getLogger(GRAPHBINARY_ROOT_LOGGER)
        logger.setLevel(level)

        if not logger.handlers:
            if handler is None:
                handler = logging.StreamHandler()
            handler.setLevel(level)
            handler.setFormatter(logging.Formatter(format_string))
            logger.addHandler(handler)

        cls._configured = True
        return logger

    @classmethod
    def set_level(cls, level: int, component: str = "") -> None:
        cls.get_logger(component).setLevel(level)

    @classmethod
    def set_enabled(cls, enabled: bool) -> None:
        """Switch all GraphBinary logging on or off."""
        logging.getLogger(GRAPHBINARY_ROOT_LOGGER).disabled = not enabled

    @classmethod
    def is_configured(cls) -> bool:
        return cls._configured


def get_logger(component: str = "") -> logging.Logger:
    """Get the logger of a GraphBinary component."""
    return GraphBinaryLoggerFactory.get_logger(component)


def configure_logging(
    level: int = logging.INFO,
    format_string: str = DEFAULT_FORMAT,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """Configure GraphBinary logging. See :meth:`GraphBinaryLoggerFactory.configure`."""
    return GraphBinaryLoggerFactory.configure(level, format_string, handler)


def set_level(level: int, component: str = "") -> None:
    """Set the level of a component logger, or of the root logger."""
    GraphBinaryLoggerFactory.set_level(level, component)


def hex_preview(data: bytes, limit: int = HEX_PREVIEW_LIMIT) -> str:
    """Render the head of a payload as spaced hex for log messages.

    Args:
        data: The bytes to render.
        limit: Maximum number of bytes shown.

    Returns:
        Hex pairs separated by spaces, suffixed with the number of
        omitted bytes when the payload is longer than ``limit``.

    Example:
        >>> hex_preview(b"\\x07\\x00\\x00")
        '07 00 00'
    """
    shown = " ".join(f"{b:02X}" for b in data[:limit])
    if len(data) > limit:
        return f"{shown} ... (+{len(data) - limit} bytes)"
    return shown

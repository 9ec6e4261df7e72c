"""Shared pytest fixtures for GraphBinary tests."""

import logging

import pytest

from graphbinary.config import SerializationConfig
from graphbinary.logging import GRAPHBINARY_ROOT_LOGGER
from graphbinary.serialization.buffer import Buffer
from graphbinary.serialization.registry import TypeRegistry
from graphbinary.serialization.service import (
    GraphBinaryReader,
    GraphBinarySerializer,
    GraphBinaryWriter,
)


@pytest.fixture
def buffer():
    """Create an empty Buffer."""
    return Buffer()


@pytest.fixture
def registry():
    """Create an unfrozen registry holding the built-in catalogue."""
    return TypeRegistry.default()


@pytest.fixture
def serializer():
    """Create a serializer with the default configuration."""
    return GraphBinarySerializer()


@pytest.fixture
def writer(registry):
    return GraphBinaryWriter(registry)


@pytest.fixture
def reader(registry):
    return GraphBinaryReader(registry)


@pytest.fixture
def skipping_serializer():
    """Create a serializer that passes unknown custom types through."""
    return GraphBinarySerializer(SerializationConfig(skip_unknown_custom_types=True))


@pytest.fixture
def roundtrip(serializer):
    """Return a function encoding then decoding a value."""

    def _roundtrip(value):
        return serializer.to_object(serializer.to_bytes(value))

    return _roundtrip


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore the graphbinary logger after each test."""
    logger = logging.getLogger(GRAPHBINARY_ROOT_LOGGER)
    handlers = list(logger.handlers)
    level = logger.level
    disabled = logger.disabled
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)
    logger.disabled = disabled

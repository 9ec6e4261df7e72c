"""Custom type example for the GraphBinary codec.

This example demonstrates how to:
- Write a TypeCodec for an application type
- Register it in the custom code range through SerializationConfig
- Relay unknown custom values unchanged with skip_unknown_custom_types
"""

import logging

from graphbinary import (
    GraphBinarySerializer,
    SerializationConfig,
    TypeCodec,
    configure_logging,
)

POINT_TYPE_CODE = 0xC1


class Point:
    def __init__(self, x: float, y: float):
        self.x = x
        self.y = y

    def __repr__(self) -> str:
        return f"Point({self.x}, {self.y})"


class PointCodec(TypeCodec[Point]):
    def write(self, value, buffer, context) -> None:
        buffer.write_double(value.x)
        buffer.write_double(value.y)

    def read(self, buffer, context) -> Point:
        return Point(buffer.read_double(), buffer.read_double())


def main():
    configure_logging(level=logging.DEBUG)

    config = SerializationConfig()
    config.add_custom_type(POINT_TYPE_CODE, Point, PointCodec())
    serializer = GraphBinarySerializer(config)

    data = serializer.to_bytes([Point(1.0, 2.0), Point(3.0, 4.0)])
    print(f"encoded: {data.hex(' ')}")
    print(f"decoded: {serializer.to_object(data)}")

    # A peer without PointCodec can still pass the values along
    relay = GraphBinarySerializer(SerializationConfig(skip_unknown_custom_types=True))
    opaque = relay.to_object(data)
    print(f"relay sees: {opaque}")
    assert relay.to_bytes(opaque) == data


if __name__ == "__main__":
    main()

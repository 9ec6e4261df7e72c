"""Basic usage example for the GraphBinary codec.

This example demonstrates how to:
- Encode and decode scalar and collection values
- Select wire widths with the integer wrappers
- Write typed nulls
- Encode graph elements
"""

from datetime import date

from graphbinary import (
    DataType,
    Edge,
    GraphBinarySerializer,
    Long,
    TypedNull,
    Vertex,
    VertexProperty,
)


def show(serializer, value):
    data = serializer.to_bytes(value)
    print(f"{value!r:<45} -> {data.hex(' ')}")
    return serializer.to_object(data)


def main():
    serializer = GraphBinarySerializer()

    # Scalars
    show(serializer, date(2023, 3, 15))
    show(serializer, 42)
    show(serializer, Long(42))
    show(serializer, "graph")

    # Nulls: untyped and typed
    show(serializer, None)
    show(serializer, TypedNull(DataType.LIST))

    # Collections nest freely; composite map keys come back frozen
    decoded = show(serializer, {(1, 2): ["a", None], "b": {3, 4}})
    print(f"decoded keys: {list(decoded)}")

    # Graph elements
    marko = Vertex(1, "person", [VertexProperty(10, "name", "marko")])
    lop = Vertex(3, "software")
    created = Edge(9, "created", marko, lop, {"weight": 0.4})
    edge = show(serializer, created)
    print(f"edge {edge.id}: {edge.out_v.id} -{edge.label}-> {edge.in_v.id}")


if __name__ == "__main__":
    main()

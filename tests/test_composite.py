"""Tests for graphbinary/serialization/composite.py module."""

import pytest

from graphbinary.exceptions import (
    BufferUnderrunException,
    EncodingPreconditionException,
    MalformedValueException,
)
from graphbinary.serialization.buffer import Buffer
from graphbinary.serialization.composite import read_count
from graphbinary.structure.graph import (
    Direction,
    Edge,
    Path,
    Property,
    T,
    Traverser,
    Vertex,
    VertexProperty,
)
from graphbinary.structure.types import DataType, HashableDict, Long


class TestReadCount:
    def test_count(self):
        assert read_count(Buffer(b"\x00\x00\x00\x02\x00\x00")) == 2

    def test_negative(self):
        with pytest.raises(MalformedValueException):
            read_count(Buffer(b"\xff\xff\xff\xff"))

    def test_count_larger_than_data(self):
        with pytest.raises(BufferUnderrunException) as exc_info:
            read_count(Buffer(b"\x7f\xff\xff\xff\x00"))
        assert exc_info.value.available == 1

    def test_pairs(self):
        with pytest.raises(BufferUnderrunException):
            read_count(Buffer(b"\x00\x00\x00\x02\xfe\xfe\xfe"), envelopes_per_item=2)


class TestList:
    def test_layout(self, serializer):
        assert serializer.to_bytes([1, None]) == (
            b"\x09\x00\x00\x00\x00\x02" + b"\x01\x00\x00\x00\x00\x01" + b"\xfe"
        )

    def test_empty(self, serializer):
        assert serializer.to_bytes([]) == b"\x09\x00\x00\x00\x00\x00"
        assert serializer.to_object(b"\x09\x00\x00\x00\x00\x00") == []

    def test_heterogeneous(self, roundtrip):
        value = [1, "two", 3.0, None, [Long(4)], {"five": 5}]
        assert roundtrip(value) == value

    def test_tuple_written_as_list(self, serializer, roundtrip):
        assert serializer.to_bytes((1, 2)) == serializer.to_bytes([1, 2])
        assert roundtrip((1, 2)) == [1, 2]

    def test_negative_count(self, serializer):
        with pytest.raises(MalformedValueException):
            serializer.to_object(b"\x09\x00\xff\xff\xff\xff")

    def test_huge_count_fails_fast(self, serializer):
        with pytest.raises(BufferUnderrunException):
            serializer.to_object(b"\x09\x00\x7f\xff\xff\xff\xfe")


class TestSet:
    def test_roundtrip(self, roundtrip):
        assert roundtrip({1, 2, 3}) == {1, 2, 3}

    def test_equal_sets_encode_identically(self, serializer):
        assert serializer.to_bytes({0, 8}) == serializer.to_bytes({8, 0})
        assert serializer.to_bytes({0, 8}) == (
            b"\x0b\x00\x00\x00\x00\x02"
            + b"\x01\x00\x00\x00\x00\x00"
            + b"\x01\x00\x00\x00\x00\x08"
        )

    def test_order_independent_of_insertion(self, serializer):
        words = ["delta", "alpha", "charlie", "bravo", "echo"]
        forward = set()
        backward = set()
        for word in words:
            forward.add(word)
        for word in reversed(words):
            backward.add(word)
        assert serializer.to_bytes(forward) == serializer.to_bytes(backward)
        assert serializer.to_bytes(frozenset(words)) == serializer.to_bytes(forward)

    def test_nested_set_elements_sorted(self, serializer, roundtrip):
        value = {frozenset({3, 1}), frozenset({2})}
        assert roundtrip(value) == value
        assert serializer.to_bytes(value) == serializer.to_bytes(
            {frozenset({2}), frozenset({1, 3})}
        )

    def test_frozenset(self, roundtrip):
        assert roundtrip(frozenset({"a"})) == {"a"}

    def test_list_elements_are_frozen(self, serializer):
        data = serializer.to_bytes({(1, 2)})
        assert serializer.to_object(data) == {(1, 2)}

    def test_nested_sets_are_frozen(self, serializer):
        inner = b"\x0b\x00\x00\x00\x00\x01\x01\x00\x00\x00\x00\x07"
        data = b"\x0b\x00\x00\x00\x00\x01" + inner
        assert serializer.to_object(data) == {frozenset({7})}


class TestMap:
    def test_layout(self, serializer):
        assert serializer.to_bytes({"a": 1}) == (
            b"\x0a\x00\x00\x00\x00\x01"
            + b"\x03\x00\x00\x00\x00\x01a"
            + b"\x01\x00\x00\x00\x00\x01"
        )

    def test_preserves_order(self, roundtrip):
        value = {"z": 1, "a": 2, "m": 3}
        assert list(roundtrip(value)) == ["z", "a", "m"]

    def test_null_values_and_keys(self, roundtrip):
        assert roundtrip({None: 1, "k": None}) == {None: 1, "k": None}

    def test_composite_keys(self, serializer):
        value = {(1, 2): "list key", frozenset({3}): "set key"}
        result = serializer.to_object(serializer.to_bytes(value))
        assert result == value

    def test_map_key(self, serializer):
        key = HashableDict({"x": 1})
        result = serializer.to_object(serializer.to_bytes({key: "map key"}))
        decoded_key = next(iter(result))
        assert isinstance(decoded_key, HashableDict)
        assert decoded_key == {"x": 1}

    def test_reencode_is_identical(self, serializer):
        value = {(1, (2, 3)): [frozenset({"a"})], HashableDict({"k": (1,)}): None}
        data = serializer.to_bytes(value)
        assert serializer.to_bytes(serializer.to_object(data)) == data

    def test_duplicate_keys_last_wins(self, serializer):
        key = b"\x01\x00\x00\x00\x00\x01"
        data = (
            b"\x0a\x00\x00\x00\x00\x02"
            + key + b"\x03\x00\x00\x00\x00\x01a"
            + key + b"\x03\x00\x00\x00\x00\x01b"
        )
        assert serializer.to_object(data) == {1: "b"}


class TestGraphEntities:
    def test_vertex(self, roundtrip):
        name = VertexProperty(10, "name", "marko", {"since": 2010})
        vertex = Vertex(1, "person", [name])
        result = roundtrip(vertex)
        assert result == vertex
        assert result.label == "person"
        assert result.properties[0].value == "marko"
        assert result.properties[0].properties == {"since": 2010}

    def test_vertex_without_properties(self, serializer, roundtrip):
        result = roundtrip(Vertex(1))
        assert result.label == "vertex"
        assert result.properties is None
        assert serializer.to_bytes(Vertex(1))[-1] == DataType.UNSPECIFIED_NULL

    def test_vertex_field_order(self, serializer):
        assert serializer.to_bytes(Vertex(1, "a")) == (
            b"\x11\x00"
            + b"\x01\x00\x00\x00\x00\x01"
            + b"\x03\x00\x00\x00\x00\x01a"
            + b"\xfe"
        )

    def test_vertex_invalid_properties(self, serializer):
        with pytest.raises(EncodingPreconditionException):
            serializer.to_bytes(Vertex(1, "a", ["not a property"]))
        data = (
            b"\x11\x00"
            + serializer.to_bytes(1)
            + serializer.to_bytes("a")
            + serializer.to_bytes(["not a property"])
        )
        with pytest.raises(MalformedValueException):
            serializer.to_object(data)

    def test_vertex_label_must_be_string(self, serializer):
        data = b"\x11\x00" + b"\x01\x00\x00\x00\x00\x01" + b"\x01\x00\x00\x00\x00\x02" + b"\xfe"
        with pytest.raises(MalformedValueException):
            serializer.to_object(data)

    def test_edge(self, roundtrip):
        edge = Edge(9, "created", Vertex(1, "person"), Vertex(3, "software"), {"weight": 0.4})
        result = roundtrip(edge)
        assert result == edge
        assert result.label == "created"
        assert result.out_v == Vertex(1)
        assert result.out_v.label == "person"
        assert result.in_v.label == "software"
        assert result.properties == {"weight": 0.4}

    def test_edge_out_vertex_first(self, serializer):
        data = serializer.to_bytes(Edge("e", "l", Vertex("o", "x"), Vertex("i", "y")))
        assert data.index(b"o") < data.index(b"i")

    def test_property(self, roundtrip):
        assert roundtrip(Property("weight", 0.5)) == Property("weight", 0.5)

    def test_vertex_property_key(self, roundtrip):
        result = roundtrip(VertexProperty(1, "age", 29))
        assert result.key == "age"
        assert result.value == 29
        assert result.properties is None

    def test_path(self, roundtrip):
        path = Path([{"a"}, set(), {"b", "c"}], [Vertex(1), "x", 3])
        result = roundtrip(path)
        assert result == path
        assert len(result) == 3
        assert result[1] == "x"

    def test_path_length_mismatch(self, serializer):
        with pytest.raises(EncodingPreconditionException):
            serializer.to_bytes(Path([set()], [1, 2]))

    def test_path_labels_must_be_sets(self, serializer):
        with pytest.raises(EncodingPreconditionException):
            serializer.to_bytes(Path([["a"]], [1]))

    def test_path_malformed_on_read(self, serializer):
        labels = serializer.to_bytes([{"a"}])
        objects = serializer.to_bytes([1, 2])
        with pytest.raises(MalformedValueException):
            serializer.to_object(b"\x0e\x00" + labels + objects)

    def test_traverser(self, serializer, roundtrip):
        data = serializer.to_bytes(Traverser("x", 3))
        assert data[:10] == b"\x21\x00" + b"\x00" * 7 + b"\x03"
        assert roundtrip(Traverser("x", 3)) == Traverser("x", 3)

    def test_traverser_negative_bulk(self, serializer):
        with pytest.raises(EncodingPreconditionException):
            serializer.to_bytes(Traverser("x", -1))
        with pytest.raises(MalformedValueException):
            serializer.to_object(b"\x21\x00" + b"\xff" * 8 + b"\xfe")

    @pytest.mark.parametrize("member", list(Direction) + list(T))
    def test_enums(self, roundtrip, member):
        assert roundtrip(member) is member

    def test_direction_layout(self, serializer):
        assert serializer.to_bytes(Direction.OUT) == b"\x18\x00\x03\x00\x00\x00\x00\x03OUT"

    def test_unknown_enum_member(self, serializer):
        with pytest.raises(MalformedValueException):
            serializer.to_object(b"\x20\x00\x03\x00\x00\x00\x00\x04nope")


class TestGraphEntityEncodeChecks:
    @pytest.mark.parametrize("value", [
        Vertex(1, 2),
        Vertex(1, "a", "not a list"),
        Vertex(1, "a", [Property("k", 1)]),
    ])
    def test_vertex(self, serializer, value):
        with pytest.raises(EncodingPreconditionException):
            serializer.to_bytes(value)

    def test_vertex_accepts_tuple_of_properties(self, roundtrip):
        result = roundtrip(Vertex(1, "a", (VertexProperty(2, "k", 1),)))
        assert result.properties == [VertexProperty(2, "k", 1)]

    @pytest.mark.parametrize("value", [
        Edge(1, 5, Vertex(1), Vertex(2)),
        Edge(1, "e", None, Vertex(2)),
        Edge(1, "e", Vertex(1), "v2"),
        Edge(1, "e", Vertex(1, 7), Vertex(2)),
        Edge(1, "e", Vertex(1), Vertex(2, None)),
        Edge(1, "e", Vertex(1), Vertex(2), ["notamap"]),
    ])
    def test_edge(self, serializer, value):
        with pytest.raises(EncodingPreconditionException):
            serializer.to_bytes(value)

    def test_property(self, serializer):
        with pytest.raises(EncodingPreconditionException) as exc_info:
            serializer.to_bytes(Property(5, "x"))
        assert "Property key must be str" in str(exc_info.value)

    @pytest.mark.parametrize("value", [
        VertexProperty(1, 2, "x"),
        VertexProperty(1, "k", "x", [("since", 2010)]),
    ])
    def test_vertex_property(self, serializer, value):
        with pytest.raises(EncodingPreconditionException):
            serializer.to_bytes(value)

    def test_nested_entity_checked(self, serializer):
        with pytest.raises(EncodingPreconditionException):
            serializer.to_bytes({"k": [Property(None, 1)]})

    def test_valid_entities_still_encode(self, roundtrip):
        edge = Edge(1, "e", Vertex(1), Vertex(2), None)
        assert roundtrip(edge) == edge
        assert roundtrip(Property("k", None)) == Property("k", None)

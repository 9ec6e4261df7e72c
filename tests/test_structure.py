"""Tests for graphbinary/structure modules."""

import pytest

from graphbinary.structure import (
    CUSTOM_TYPE_MAX,
    CUSTOM_TYPE_MIN,
    BigInteger,
    Byte,
    DataType,
    Direction,
    Edge,
    Float32,
    HashableDict,
    Path,
    Property,
    Traverser,
    TypedNull,
    UnknownCustomValue,
    Vertex,
    VertexProperty,
    freeze,
    is_custom_code,
    type_name,
    typed_null,
)


class TestDataType:
    @pytest.mark.parametrize("name,code", [
        ("INT", 0x01),
        ("STRING", 0x03),
        ("DATE", 0x07),
        ("LIST", 0x09),
        ("MAP", 0x0A),
        ("VERTEX", 0x11),
        ("BOOLEAN", 0x27),
        ("UNSPECIFIED_NULL", 0xFE),
    ])
    def test_codes(self, name, code):
        assert DataType[name] == code

    def test_codes_are_unique(self):
        codes = [member.value for member in DataType]
        assert len(codes) == len(set(codes))

    def test_no_builtin_code_in_custom_range(self):
        assert not any(is_custom_code(member) for member in DataType)

    def test_custom_range(self):
        assert (CUSTOM_TYPE_MIN, CUSTOM_TYPE_MAX) == (0xC0, 0xEF)
        assert is_custom_code(0xC0) and is_custom_code(0xEF)
        assert not is_custom_code(0xBF) and not is_custom_code(0xF0)

    @pytest.mark.parametrize("code,name", [
        (0x09, "LIST"),
        (0xC1, "CUSTOM(0xC1)"),
        (0xFF, "0xFF"),
    ])
    def test_type_name(self, code, name):
        assert type_name(code) == name


class TestWrappers:
    def test_behave_as_numbers(self):
        assert Byte(3) + 1 == 4
        assert Float32(0.5) * 2 == 1.0

    def test_float32_is_narrowed(self):
        assert Float32(0.1) == Float32(Float32(0.1))
        assert Float32(0.1) != 0.1
        assert Float32(16777217) == 16777216

    def test_repr(self):
        assert repr(BigInteger(5)) == "BigInteger(5)"
        assert repr(Float32(1.5)) == "Float32(1.5)"

    def test_typed_null(self):
        assert typed_null(DataType.LIST) == TypedNull(0x09)
        assert hash(TypedNull(0x09)) == hash(TypedNull(DataType.LIST))
        assert TypedNull(0x09) != TypedNull(0x0A)
        assert repr(TypedNull(0x09)) == "TypedNull(LIST)"

    def test_unknown_custom_value(self):
        value = UnknownCustomValue(0xC1, bytearray(b"ab"))
        assert value.payload == b"ab"
        assert value == UnknownCustomValue(0xC1, b"ab")
        assert value != UnknownCustomValue(0xC2, b"ab")
        assert "2 bytes" in repr(value)


class TestFreeze:
    def test_containers(self):
        frozen = freeze({"a": [1, {2}], "b": {"c": []}})
        assert isinstance(frozen, HashableDict)
        assert frozen["a"] == (1, frozenset({2}))
        assert frozen["b"] == {"c": ()}
        hash(frozen)

    def test_scalars_untouched(self):
        assert freeze("x") == "x"
        assert freeze(None) is None

    def test_hashable_dict_is_idempotent(self):
        value = HashableDict({"k": 1})
        assert freeze(value) is value
        assert hash(value) == hash(HashableDict({"k": 1}))


class TestGraph:
    def test_element_identity(self):
        assert Vertex(1, "a") == Vertex(1, "b")
        assert Vertex(1) != Vertex(2)
        assert Vertex(1) != Edge(1, "e", Vertex(2), Vertex(3))
        assert hash(Vertex(1, "a")) == hash(Vertex(1, "b"))

    def test_vertex_defaults(self):
        vertex = Vertex(7)
        assert vertex.label == "vertex"
        assert vertex.properties is None
        assert repr(vertex) == "v[7]"

    def test_edge_repr(self):
        assert repr(Edge(9, "knows", Vertex(1), Vertex(2))) == "e[9][1-knows->2]"

    def test_vertex_property(self):
        prop = VertexProperty(1, "name", "marko")
        assert prop.key == prop.label == "name"
        assert prop.value == "marko"

    def test_property_equality(self):
        assert Property("k", 1) == Property("k", 1)
        assert Property("k", 1) != Property("k", 2)
        assert hash(Property("k", [1])) == hash(Property("k", [2]))

    def test_path(self):
        path = Path([{"a"}, set()], ["x", "y"])
        assert len(path) == 2
        assert path[0] == "x"
        assert path == Path([{"a"}, set()], ["x", "y"])
        assert path != Path([set(), set()], ["x", "y"])
        hash(Path([{"a"}], [[1]]))

    def test_traverser(self):
        assert Traverser("x").bulk == 1
        assert Traverser("x", 2) == Traverser("x", 2)
        assert Traverser("x", 2) != Traverser("x", 3)

    def test_direction_members(self):
        assert [d.name for d in Direction] == ["OUT", "IN", "BOTH"]

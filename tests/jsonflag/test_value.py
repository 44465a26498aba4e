# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for :class:`Value` and the container codecs behind it."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest
from pydantic import BaseModel, Field

from jsonflag.containers import ValueKind
from jsonflag.discovery import new, recursive
from jsonflag.exceptions import DecodeException, FormatException, OverflowException
from jsonflag.kinds import Float32, Int8, Ref, Uint16
from jsonflag.naming import name
from jsonflag.scalars import to_float32
from jsonflag.value import Value


@dataclass
class Record:
    Foo: str = ""
    Bar: str = ""
    Baz: str = ""


@dataclass
class Empty:
    pass


@dataclass
class Point:
    x: int = 0
    y: int = 0


@dataclass
class Child:
    a: str
    b: int


@dataclass
class Parent:
    child: Child | None = None
    n: Int8 | None = None


@dataclass
class Holder:
    count: int | None = None
    inner: Point | None = None
    tags: dict[str, int] | None = None
    names: list[str] | None = None


class Server(BaseModel):
    host: str = "localhost"
    port: Uint16 = Field(8080, serialization_alias="listenPort")


def by_name(values: list[Value]) -> dict[str, Value]:
    return {name(v.path): v for v in values}


# ---------------------------------------------------------------------------
# Concrete scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_set_selected_fields(self):
        r = Record()
        values = by_name(recursive(r))
        values["Foo"].set("foo value")
        values["Baz"].set("baz value")
        assert r == Record(Foo="foo value", Bar="", Baz="baz value")

    def test_string_list_appends(self):
        ref: Ref[list[str]] = Ref(list[str])
        val = new(ref)
        val.set("z")
        val.set("a")
        assert ref.value == ["z", "a"]
        assert str(val) == '["z","a"]'

    def test_bytes_from_base64(self):
        ref: Ref[bytes] = Ref(bytes)
        val = new(ref)
        val.set("Ag==")
        assert ref.value == b"\x02"
        assert str(val) == "Ag=="

    def test_empty_record_renders_empty(self):
        val = new(Empty())
        assert str(val) == ""


# ---------------------------------------------------------------------------
# Type names and kinds
# ---------------------------------------------------------------------------


class TestTypeName:
    @pytest.mark.parametrize(
        ("hint", "type_name", "kind"),
        [
            (bool, "bool", ValueKind.SCALAR),
            (int, "int", ValueKind.SCALAR),
            (Uint16, "uint16", ValueKind.SCALAR),
            (Float32, "float32", ValueKind.SCALAR),
            (complex, "complex128", ValueKind.SCALAR),
            (str, "string", ValueKind.SCALAR),
            (bytes, "base64", ValueKind.BYTES),
            (list[Int8], "int8 (JSON list)", ValueKind.LIST),
            (list[bytes], "base64 (JSON list)", ValueKind.LIST),
            (list[list[int]], "JSON list", ValueKind.LIST),
            (list[dict[str, int]], "JSON object (JSON list)", ValueKind.LIST),
            (list[Point], "JSON object (JSON list)", ValueKind.LIST),
            (dict[str, int], "JSON object", ValueKind.MAP),
            (Point, "JSON object", ValueKind.RECORD),
        ],
    )
    def test_dispatch(self, hint, type_name, kind):
        val = new(Ref(hint))
        assert val.type_name == type_name
        assert val.kind is kind

    def test_unsupported_kind(self):
        assert new(Ref(set[int])) is None
        assert new(Ref(tuple[int, int])) is None

    def test_bool_flag(self):
        assert new(Ref(bool)).is_bool_flag()
        assert not new(Ref(list[bool])).is_bool_flag()
        assert not new(Ref(str)).is_bool_flag()


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


class TestScalarValues:
    def test_set_and_render(self):
        ref = Ref(Int8, 0)
        val = new(ref)
        assert str(val) == ""
        val.set("-0x10")
        assert ref.value == -16
        assert str(val) == "-16"

    def test_failed_set_leaves_value(self):
        ref = Ref(Int8, 5)
        val = new(ref)
        with pytest.raises(OverflowException):
            val.set("200")
        with pytest.raises(FormatException):
            val.set("")
        assert ref.value == 5

    def test_failed_set_leaves_optional_unset(self):
        p = Parent()
        values = by_name(recursive(p))
        with pytest.raises(OverflowException):
            values["n"].set("300")
        with pytest.raises(FormatException):
            values["n"].set("nope")
        assert p.n is None

    def test_plain_int_is_64_bit(self):
        val = new(Ref(int))
        with pytest.raises(OverflowException):
            val.set("9223372036854775808")

    def test_float32_field(self):
        ref = Ref(Float32, 0.0)
        val = new(ref)
        val.set("0.1")
        assert ref.value == to_float32(0.1)
        assert str(val) == "0.1"

    def test_bool(self):
        ref = Ref(bool, False)
        val = new(ref)
        val.set("t")
        assert ref.value is True
        assert str(val) == "true"

    def test_bytearray_kept(self):
        ref = Ref(bytearray)
        new(ref).set("Ag==")
        assert ref.value == bytearray(b"\x02")
        assert isinstance(ref.value, bytearray)

    @pytest.mark.parametrize(
        ("hint", "value"),
        [(int, -7), (Uint16, 65535), (float, 2.5), (complex, 1 - 2j), (str, "x"), (bytes, b"\x00\xff")],
    )
    def test_render_reparses(self, hint, value):
        ref = Ref(hint, value)
        val = new(ref)
        text = str(val)
        ref.value = None
        val.set(text)
        assert ref.value == value


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------


class TestListValues:
    def test_bool_list(self):
        ref = Ref(list[bool])
        val = new(ref)
        val.set("t")
        val.set("0")
        assert ref.value == [True, False]
        assert str(val) == "[true,false]"

    def test_bytes_list_renders_base64(self):
        ref = Ref(list[bytes])
        new(ref).set("Ag==")
        assert str(new(ref)) == '["Ag=="]'

    def test_complex_list_renders_text(self):
        ref = Ref(list[complex])
        new(ref).set("1+2i")
        assert ref.value == [1 + 2j]
        assert str(new(ref)) == '["(1.0+2.0i)"]'

    def test_non_finite_float_list_renders_empty(self):
        ref = Ref(list[float])
        new(ref).set("nan")
        assert str(new(ref)) == ""

    def test_nested_list(self):
        ref = Ref(list[list[int]])
        val = new(ref)
        val.set("[1,2]")
        val.set("[3]")
        assert ref.value == [[1, 2], [3]]
        assert str(val) == "[[1,2],[3]]"

    def test_record_list(self):
        ref = Ref(list[Point])
        val = new(ref)
        val.set('{"x":1}')
        assert ref.value == [Point(x=1, y=0)]

    def test_failed_element_leaves_list(self):
        ref = Ref(list[Int8], [1])
        val = new(ref)
        with pytest.raises(OverflowException):
            val.set("1000")
        assert ref.value == [1]

    def test_append_does_not_mutate_previous_list(self):
        original = ["a"]
        ref = Ref(list[str], original)
        new(ref).set("b")
        assert original == ["a"]
        assert ref.value == ["a", "b"]


# ---------------------------------------------------------------------------
# Maps and records
# ---------------------------------------------------------------------------


class TestMapAndRecordValues:
    def test_map_replaces(self):
        ref = Ref(dict[str, int])
        val = new(ref)
        assert str(val) == ""
        val.set('{"a":1}')
        val.set('{"b":2}')
        assert ref.value == {"b": 2}
        assert str(val) == '{"b":2}'

    def test_map_bad_document(self):
        ref = Ref(dict[str, int], {"a": 1})
        val = new(ref)
        with pytest.raises(FormatException):
            val.set('{"a":"x"}')
        with pytest.raises(FormatException):
            val.set("[1]")
        assert ref.value == {"a": 1}

    def test_record_root_replaces(self):
        p = Point()
        val = new(p)
        val.set('{"x":1}')
        val.set('{"y":2}')
        assert p == Point(x=0, y=2)
        assert str(val) == '{"x":0,"y":2}'

    def test_record_field_replaces(self):
        ref = Ref(Point)
        new(ref).set('{"x":3,"y":4}')
        assert ref.value == Point(x=3, y=4)

    def test_pydantic_record(self):
        s = Server()
        val = new(s)
        assert str(val) == '{"host":"localhost","listenPort":8080}'
        val.set('{"host":"example.com"}')
        assert s.host == "example.com"
        assert s.port == 8080

    def test_pydantic_width_checked(self):
        s = Server()
        values = by_name(recursive(s))
        with pytest.raises(OverflowException):
            values["port"].set("70000")
        values["port"].set("9090")
        assert s.port == 9090


# ---------------------------------------------------------------------------
# Lazy allocation
# ---------------------------------------------------------------------------


class TestLazyAllocation:
    def test_set_through_nil_record(self):
        p = Parent()
        values = by_name(recursive(p))
        values["child.a"].set("x")
        assert p.child == Child(a="x", b=0)

    def test_get_allocates_scalar(self):
        p = Parent()
        values = by_name(recursive(p))
        assert values["n"].get() == 0
        assert p.n == 0

    def test_nil_ref_allocated(self):
        ref = Ref(Point)
        assert new(ref).get() == Point()
        assert ref.value == Point()

    def test_failed_set_allocates_nothing(self):
        h = Holder()
        values = by_name(recursive(h))
        with pytest.raises(FormatException):
            values["count"].set("nope")
        with pytest.raises(FormatException):
            values["inner.x"].set("nope")
        with pytest.raises(FormatException):
            values["tags"].set("{bad")
        with pytest.raises(FormatException):
            values["inner"].set('{"x": "abc"}')
        assert h == Holder()

    def test_failed_set_through_nil_parent(self):
        p = Parent()
        values = by_name(recursive(p))
        with pytest.raises(FormatException):
            values["child.b"].set("x")
        assert p.child is None
        values["child.b"].set("3")
        assert p.child == Child(a="", b=3)

    def test_list_appends_through_nil_position(self):
        h = Holder()
        values = by_name(recursive(h))
        with pytest.raises(FormatException):
            values["count"].set("1.5")
        values["names"].set("a")
        assert h.names == ["a"]
        assert h.count is None


# ---------------------------------------------------------------------------
# Detached values and overrides
# ---------------------------------------------------------------------------


class TestDetachedValue:
    def test_queries_are_empty(self):
        val = Value()
        assert val.path == []
        assert val.type_name == ""
        assert val.kind is None
        assert val.get() is None
        assert str(val) == ""
        assert not val.is_bool_flag()

    def test_mutations_are_noops(self):
        val = Value()
        val.set("anything")
        val.set_encoder(lambda v: "x")
        val.set_decoder(lambda s: 1)
        assert str(val) == ""


class TestOverrides:
    def test_custom_encoder(self):
        val = new(Ref(int, 5))
        val.set_encoder(lambda v: f"<{v}>")
        assert str(val) == "<5>"

    def test_encoder_bytes_decoded(self):
        val = new(Ref(int, 5))
        val.set_encoder(lambda v: b"five")
        assert str(val) == "five"

    def test_failing_encoder_renders_empty(self):
        def boom(v):
            raise RuntimeError("no")

        val = new(Ref(int, 5))
        val.set_encoder(boom)
        assert str(val) == ""

    def test_custom_decoder(self):
        ref = Ref(int, 0)
        val = new(ref)
        val.set_decoder(lambda s: int(s) * 2)
        val.set("4")
        assert ref.value == 8

    def test_decoder_error_propagates_verbatim(self):
        error = DecodeException("nope", code="CUSTOM")

        def fail(s):
            raise error

        ref = Ref(int, 1)
        val = new(ref)
        val.set_decoder(fail)
        with pytest.raises(DecodeException) as exc_info:
            val.set("2")
        assert exc_info.value is error
        assert ref.value == 1

    def test_clearing_overrides(self):
        ref = Ref(int, 0)
        val = new(ref)
        val.set_decoder(lambda s: 100)
        val.set_decoder(None)
        val.set("3")
        assert ref.value == 3


class TestRepr:
    def test_repr(self):
        values = by_name(recursive(Record()))
        assert repr(values["Foo"]) == "Value(path='Foo', type='string')"

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
"""Type introspection: kinds, width aliases, record fields and zero values.

Width aliases are ``Annotated`` types carrying a :class:`ScalarKind` marker and
a pydantic range constraint, so the same bounds apply to flag text and to JSON
documents decoded into the field::

    @dataclass
    class Limits:
        retries: Int8 = 3
        window: Uint32 = 0
        ratio: Float32 = 0.5
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any, Generic, TypeVar, Union, get_type_hints

from pydantic import BaseModel, Field

T = TypeVar("T")


@dataclass(frozen=True)
class ScalarKind:
    """A primitive kind: its display name, family and bit width."""

    name: str
    family: str
    bits: int = 0

    @property
    def signed(self) -> bool:
        return self.family == "int"

    def bounds(self) -> tuple[int, int]:
        """Inclusive integer range for ``int`` and ``uint`` families."""
        if self.family == "int":
            return -(1 << (self.bits - 1)), (1 << (self.bits - 1)) - 1
        return 0, (1 << self.bits) - 1


BOOL = ScalarKind("bool", "bool")
INT = ScalarKind("int", "int", 64)
INT8 = ScalarKind("int8", "int", 8)
INT16 = ScalarKind("int16", "int", 16)
INT32 = ScalarKind("int32", "int", 32)
INT64 = ScalarKind("int64", "int", 64)
UINT = ScalarKind("uint", "uint", 64)
UINT8 = ScalarKind("uint8", "uint", 8)
UINT16 = ScalarKind("uint16", "uint", 16)
UINT32 = ScalarKind("uint32", "uint", 32)
UINT64 = ScalarKind("uint64", "uint", 64)
FLOAT32 = ScalarKind("float32", "float", 32)
FLOAT64 = ScalarKind("float64", "float", 64)
COMPLEX64 = ScalarKind("complex64", "complex", 64)
COMPLEX128 = ScalarKind("complex128", "complex", 128)
STRING = ScalarKind("string", "string")
BYTES = ScalarKind("base64", "bytes")


def _ranged(kind: ScalarKind) -> Any:
    low, high = kind.bounds()
    return Annotated[int, Field(ge=low, le=high), kind]


Int8 = _ranged(INT8)
Int16 = _ranged(INT16)
Int32 = _ranged(INT32)
Int64 = _ranged(INT64)
Uint = _ranged(UINT)
Uint8 = _ranged(UINT8)
Uint16 = _ranged(UINT16)
Uint32 = _ranged(UINT32)
Uint64 = _ranged(UINT64)
Float32 = Annotated[float, FLOAT32]
Float64 = Annotated[float, FLOAT64]
Complex64 = Annotated[complex, COMPLEX64]
Complex128 = Annotated[complex, COMPLEX128]

_BUILTIN_KINDS: dict[Any, ScalarKind] = {
    bool: BOOL,
    int: INT,
    float: FLOAT64,
    complex: COMPLEX128,
    str: STRING,
    bytes: BYTES,
    bytearray: BYTES,
}


# ---------------------------------------------------------------------------
# Hint unwrapping
# ---------------------------------------------------------------------------


def unwrap_optional(tp: Any) -> tuple[Any, bool]:
    """Unwrap ``Optional[T]``, ``Union[T, None]``, and ``T | None`` (PEP 604).

    Returns a ``(inner_type, was_optional)`` tuple.  If *tp* is not an
    optional wrapper the original type is returned unchanged.
    """
    origin = typing.get_origin(tp)

    if origin is Union or isinstance(tp, types.UnionType):
        args = typing.get_args(tp)
        non_none = [a for a in args if a is not type(None)]
        if len(non_none) == 1 and type(None) in args:
            return non_none[0], True
        return tp, False

    return tp, False


def strip(tp: Any) -> Any:
    """Remove ``Annotated`` and ``NewType`` layers, keeping scalar markers out of the way."""
    while True:
        if typing.get_origin(tp) is Annotated:
            tp = tp.__origin__
            continue
        supertype = getattr(tp, "__supertype__", None)
        if supertype is None:
            return tp
        tp = supertype


def unwrap(tp: Any) -> Any:
    """Return the pointer-unwrapped, annotation-free form of *tp*."""
    inner, _ = unwrap_optional(strip(tp))
    return strip(inner)


def scalar_kind(tp: Any) -> ScalarKind | None:
    """Resolve the primitive kind of *tp*, or ``None`` for non-primitive hints.

    ``NewType`` chains and one optional layer are looked through, so a named
    ``UserId = NewType("UserId", str)`` is a string and ``Int8 | None`` an int8.
    """
    while True:
        if typing.get_origin(tp) is Annotated:
            for meta in tp.__metadata__:
                if isinstance(meta, ScalarKind):
                    return meta
            tp = tp.__origin__
            continue
        supertype = getattr(tp, "__supertype__", None)
        if supertype is not None:
            tp = supertype
            continue
        inner, was_optional = unwrap_optional(tp)
        if was_optional:
            tp = inner
            continue
        try:
            return _BUILTIN_KINDS.get(tp)
        except TypeError:
            return None


def list_element(tp: Any) -> Any | None:
    """Element hint of a ``list[T]`` hint (``Any`` for a bare list), else ``None``."""
    tp = unwrap(tp)
    if tp is list:
        return Any
    if typing.get_origin(tp) is list:
        args = typing.get_args(tp)
        return args[0] if args else Any
    return None


def is_map(tp: Any) -> bool:
    tp = unwrap(tp)
    return tp is dict or typing.get_origin(tp) is dict


def is_record(tp: Any) -> bool:
    """Return ``True`` for dataclass types and pydantic models."""
    tp = unwrap(tp)
    if not isinstance(tp, type) or typing.get_origin(tp) is not None:
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def is_frozen(tp: Any) -> bool:
    tp = unwrap(tp)
    if dataclasses.is_dataclass(tp):
        return bool(tp.__dataclass_params__.frozen)  # type: ignore[attr-defined]
    if is_record(tp) and issubclass(tp, BaseModel):
        return bool(tp.model_config.get("frozen", False))
    return False


# ---------------------------------------------------------------------------
# Record fields
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StructField:
    """One field of a record type: its name, declared hint and textual tags."""

    name: str
    type: Any
    tags: Mapping[str, str] = field(default_factory=dict, compare=False)
    index: int = 0
    exported: bool = True

    def lookup(self, key: str) -> tuple[str, bool]:
        """Return ``(value, present)`` for tag *key*."""
        if key in self.tags:
            return self.tags[key], True
        return "", False

    def tag(self, key: str) -> str:
        return self.tags.get(key, "")


def record_fields(tp: Any) -> list[StructField]:
    """List every field of record type *tp* in declaration order."""
    tp = unwrap(tp)
    try:
        hints = get_type_hints(tp, include_extras=True)
    except Exception:  # pragma: no cover - unresolvable forward references
        hints = {}

    if dataclasses.is_dataclass(tp):
        return [
            StructField(
                name=f.name,
                type=hints.get(f.name, f.type),
                tags={k: v for k, v in f.metadata.items() if isinstance(k, str) and isinstance(v, str)},
                index=i,
                exported=not f.name.startswith("_"),
            )
            for i, f in enumerate(dataclasses.fields(tp))
        ]

    if is_record(tp) and issubclass(tp, BaseModel):
        result: list[StructField] = []
        for i, (name, info) in enumerate(tp.model_fields.items()):
            tags: dict[str, str] = {}
            if isinstance(info.json_schema_extra, dict):
                tags.update({k: v for k, v in info.json_schema_extra.items() if isinstance(v, str)})
            alias = info.serialization_alias or info.alias
            if alias:
                tags["json"] = alias
            if info.description:
                tags.setdefault("description", info.description)
            result.append(
                StructField(
                    name=name,
                    type=hints.get(name, info.annotation),
                    tags=tags,
                    index=i,
                    exported=not name.startswith("_"),
                )
            )
        return result

    return []


# ---------------------------------------------------------------------------
# Zero values
# ---------------------------------------------------------------------------


def zero_value(tp: Any) -> Any:
    """The value a freshly allocated position of hint *tp* holds.

    Optional hints are nil (``None``); records are built with their defaults,
    required fields filled with their own zero values.
    """
    inner, optional = unwrap_optional(strip(tp))
    if optional:
        return None
    return allocate(inner)


def allocate(tp: Any) -> Any:
    """A zero value of the pointer-unwrapped hint *tp*, never ``None`` for supported kinds."""
    kind = scalar_kind(tp)
    tp = unwrap(tp)
    if kind is not None:
        if tp is bytearray:
            return bytearray()
        return _SCALAR_ZEROS[kind.family]
    if list_element(tp) is not None:
        return []
    if is_map(tp):
        return {}
    if is_record(tp):
        return new_record(tp)
    return None


_SCALAR_ZEROS: dict[str, Any] = {
    "bool": False,
    "int": 0,
    "uint": 0,
    "float": 0.0,
    "complex": 0j,
    "string": "",
    "bytes": b"",
}


def new_record(tp: type[T]) -> T:
    """Instantiate record type *tp* with defaults and zero-filled required fields."""
    if dataclasses.is_dataclass(tp):
        hints = _hints(tp)
        kwargs = {
            f.name: zero_value(hints.get(f.name, f.type))
            for f in dataclasses.fields(tp)
            if f.init
            and f.default is dataclasses.MISSING
            and f.default_factory is dataclasses.MISSING  # type: ignore[misc]
        }
        return tp(**kwargs)
    if issubclass(tp, BaseModel):  # type: ignore[arg-type]
        hints = _hints(tp)
        values = {
            name: zero_value(hints.get(name, info.annotation))
            for name, info in tp.model_fields.items()  # type: ignore[attr-defined]
            if info.is_required()
        }
        return tp.model_construct(**values)  # type: ignore[attr-defined, return-value]
    raise TypeError(f"{tp!r} is not a record type")


def _hints(tp: Any) -> dict[str, Any]:
    try:
        return get_type_hints(tp, include_extras=True)
    except Exception:  # pragma: no cover - unresolvable forward references
        return {}


# ---------------------------------------------------------------------------
# Root cell
# ---------------------------------------------------------------------------


class Ref(Generic[T]):
    """A mutable cell that owns a value of a declared type.

    Records are mutable in place and can be bound directly; any other root
    (a number, a list, a map) is bound through a ``Ref``::

        port = Ref(Uint16, 8080)
        count = Ref.of(0)
    """

    __slots__ = ("type", "value")

    def __init__(self, type_: Any, value: T | None = None) -> None:
        self.type = type_
        self.value = value

    @classmethod
    def of(cls, value: T) -> Ref[T]:
        """Create a cell typed after *value*'s runtime class."""
        return cls(type(value), value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ref):
            return NotImplemented
        return self.type == other.type and self.value == other.value

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Ref({self.type!r}, {self.value!r})"

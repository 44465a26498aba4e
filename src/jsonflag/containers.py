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
"""Codec pairs for every bindable kind.

A :class:`Codec` couples a renderer (current value to display text) with a
parser that turns one piece of flag text into the value to install:

- scalars and byte buffers replace the current value;
- lists append exactly one decoded element per call, so a repeated flag
  accumulates its values;
- maps and records are replaced by a freshly decoded JSON document.

Parsers never mutate the current value; they build a new one, so a failed
parse leaves the bound field untouched.
"""

from __future__ import annotations

import enum
import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from jsonflag import json_codec
from jsonflag.kinds import ScalarKind, unwrap_optional
from jsonflag.scalars import json_element, parser_for, renderer_for

# Record renderings that carry nothing worth showing as a default value.
_DEGENERATE = frozenset({"{}", "[]", '""', "0", "false"})


class ValueKind(str, enum.Enum):
    """Codec family of a bound value."""

    SCALAR = "scalar"
    BYTES = "bytes"
    LIST = "list"
    MAP = "map"
    RECORD = "record"


@dataclass(frozen=True)
class Codec:
    """Render/parse pair selected for one kind."""

    type_name: str
    kind: ValueKind
    render: Callable[[Any], str]
    parse: Callable[[str, Any], Any]
    is_bool: bool = False


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


def scalar_codec(kind: ScalarKind, as_bytearray: bool = False) -> Codec:
    parse_text = parser_for(kind)

    def parse(text: str, current: Any) -> Any:
        value = parse_text(text)
        return bytearray(value) if as_bytearray else value

    return Codec(
        type_name=kind.name,
        kind=ValueKind.BYTES if kind.family == "bytes" else ValueKind.SCALAR,
        render=renderer_for(kind),
        parse=parse,
        is_bool=kind.family == "bool",
    )


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------


def scalar_list_codec(kind: ScalarKind) -> Codec:
    """Lists of a primitive kind, byte buffers included."""
    parse_element = parser_for(kind)

    def render(value: Any) -> str:
        if not value:
            return ""
        elements = [None if x is None else json_element(kind, x) for x in value]
        try:
            return json.dumps(elements, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError):
            return ""

    def parse(text: str, current: Any) -> Any:
        element = parse_element(text)
        return [*(current or ()), element]

    return Codec(type_name=f"{kind.name} (JSON list)", kind=ValueKind.LIST, render=render, parse=parse)


def json_list_codec(list_hint: Any, element_hint: Any, type_name: str) -> Codec:
    """Lists of lists, maps or records: one JSON document per element."""
    list_hint, _ = unwrap_optional(list_hint)
    element_hint, _ = unwrap_optional(element_hint)

    def render(value: Any) -> str:
        if not value:
            return ""
        return _encode_or_empty(list_hint, value)

    def parse(text: str, current: Any) -> Any:
        element = json_codec.decode(element_hint, text, kind=type_name)
        return [*(current or ()), element]

    return Codec(type_name=type_name, kind=ValueKind.LIST, render=render, parse=parse)


# ---------------------------------------------------------------------------
# Maps and records
# ---------------------------------------------------------------------------


def map_codec(map_hint: Any) -> Codec:
    map_hint, _ = unwrap_optional(map_hint)

    def render(value: Any) -> str:
        if not value:
            return ""
        return _encode_or_empty(map_hint, value)

    def parse(text: str, current: Any) -> Any:
        return json_codec.decode(map_hint, text, kind="JSON object")

    return Codec(type_name="JSON object", kind=ValueKind.MAP, render=render, parse=parse)


def record_codec(record_hint: Any) -> Codec:
    record_hint, _ = unwrap_optional(record_hint)

    def render(value: Any) -> str:
        text = _encode_or_empty(record_hint, value)
        if text in _DEGENERATE:
            return ""
        return text

    def parse(text: str, current: Any) -> Any:
        return json_codec.decode(record_hint, text, kind="JSON object")

    return Codec(type_name="JSON object", kind=ValueKind.RECORD, render=render, parse=parse)


def _encode_or_empty(hint: Any, value: Any) -> str:
    try:
        return json_codec.encode(hint, value)
    except ValueError:
        return ""

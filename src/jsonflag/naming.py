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
"""Flag names and usage text derived from field paths."""

from __future__ import annotations

from collections.abc import Sequence

from jsonflag.kinds import StructField

FALLBACK_NAME = "input"

_USAGE_TAGS = ("usage", "description", "desc")


def name(path: Sequence[StructField]) -> str:
    """Join the field names along *path* with dots; ``"input"`` for the root."""
    return ".".join(f.name for f in path) or FALLBACK_NAME


def json_name(path: Sequence[StructField]) -> str:
    """Join the JSON names along *path* with dots.

    The ``json`` tag is cut at its first comma; an empty tag falls back to the
    field name and ``"-"`` drops the field from the name.
    """
    parts = [n for n in (_json_field_name(f) for f in path) if n]
    return ".".join(parts) or FALLBACK_NAME


def _json_field_name(field: StructField) -> str:
    tag, present = field.lookup("json")
    if not present:
        return field.name
    tag = tag.split(",", 1)[0]
    if tag == "":
        return field.name
    if tag == "-":
        return ""
    return tag


def usage(path: Sequence[StructField]) -> str:
    """Return the ``usage``, ``description`` or ``desc`` tag of the last field."""
    if not path:
        return ""
    last = path[-1]
    for key in _USAGE_TAGS:
        text = last.tag(key)
        if text:
            return text
    return ""


def json_camel_case(s: str) -> str:
    """``"Foo.FooBar"`` to ``"foo.fooBar"``: lower the first letter of each segment."""
    return ".".join(segment[:1].lower() + segment[1:] for segment in s.split("."))


def snake_case(s: str) -> str:
    """``"Foo.FooBar.FooBarBaz"`` to ``"foo.foo_bar.foo_bar_baz"``.

    A separator goes only between a lowercase letter and an uppercase letter
    followed by another lowercase one, so acronym runs stay together.
    """
    return _separate(s, "_")


def dash_case(s: str) -> str:
    """``"Foo.FooBar"`` to ``"foo.foo-bar"``; underscores also become dashes."""
    return _separate(s, "-").replace("_", "-")


def _separate(s: str, sep: str) -> str:
    out: list[str] = []
    for i, ch in enumerate(s):
        if ch.isupper():
            if 0 < i < len(s) - 1 and s[i - 1].islower() and s[i + 1].islower():
                out.append(sep)
            ch = ch.lower()
        out.append(ch)
    return "".join(out)

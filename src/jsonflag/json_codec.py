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
"""Typed JSON encode/decode backed by :class:`pydantic.TypeAdapter`."""

from __future__ import annotations

import functools
from typing import Any

from pydantic import ConfigDict, PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from jsonflag.exceptions import format_error
from jsonflag.kinds import is_record

_BYTES_AS_BASE64 = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")


def adapter(tp: Any) -> TypeAdapter[Any]:
    """Return an adapter for hint *tp*, cached when the hint is hashable."""
    try:
        hash(tp)
    except TypeError:
        return _build(tp)
    return _cached(tp)


@functools.lru_cache(maxsize=256)
def _cached(tp: Any) -> TypeAdapter[Any]:
    return _build(tp)


def _build(tp: Any) -> TypeAdapter[Any]:
    # Records carry their own configuration; base64 bytes apply to list and map hints.
    if is_record(tp):
        return TypeAdapter(tp)
    return TypeAdapter(tp, config=_BYTES_AS_BASE64)


def encode(tp: Any, value: Any) -> str:
    """Encode *value* of hint *tp* as compact JSON text.

    Raises:
        ValueError: when the value cannot be represented as JSON.
    """
    try:
        return adapter(tp).dump_json(value, by_alias=True).decode("utf-8")
    except (PydanticSchemaGenerationError, PydanticSerializationError) as exc:
        raise ValueError(f"cannot encode {tp!r} as JSON: {exc}") from exc


def decode(tp: Any, text: str, kind: str = "JSON") -> Any:
    """Decode JSON *text* into a fresh value of hint *tp*.

    Raises:
        FormatException: when the text is not valid JSON for *tp*.
    """
    try:
        return adapter(tp).validate_json(text)
    except ValidationError as exc:
        raise format_error(kind, text, _first_error(exc)) from exc


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors(include_url=False)
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid JSON")
    return f"{location}: {message}" if location else message

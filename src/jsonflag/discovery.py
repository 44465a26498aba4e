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
"""Discover flag values in a structure, depth first, under a filter chain."""

from __future__ import annotations

import enum
import functools
import logging
import operator
from collections.abc import Callable, Sequence
from typing import Any

from jsonflag.containers import ValueKind
from jsonflag.kinds import Ref, StructField, is_frozen, is_record, record_fields
from jsonflag.value import Value, new_value, root_hint

logger = logging.getLogger(__name__)


class FilterResult(enum.IntFlag):
    """Two independent decisions: skip the value, and stop descending into it.

    Votes combine with ``|``, so a single skip or no-descend wins.
    """

    INCLUDE_AND_DESCEND = 0b00
    INCLUDE_NO_DESCEND = 0b01
    SKIP_AND_DESCEND = 0b10
    SKIP_NO_DESCEND = 0b11

    @property
    def skip(self) -> bool:
        return bool(self & FilterResult.SKIP_AND_DESCEND)

    @property
    def descend(self) -> bool:
        return not self & FilterResult.INCLUDE_NO_DESCEND


FilterFunc = Callable[[Value], FilterResult]


def filter_value(value: Value | None, *filters: FilterFunc) -> FilterResult:
    """Combine the votes of *filters* for *value*; ``None`` is always skipped."""
    if value is None:
        return FilterResult.SKIP_NO_DESCEND
    return functools.reduce(
        operator.or_,
        (f(value) for f in filters),
        FilterResult.INCLUDE_AND_DESCEND,
    )


def is_mutable_root(base: Any) -> bool:
    """A root is usable when it is a :class:`Ref` or a non-frozen record instance."""
    if base is None:
        return False
    if isinstance(base, Ref):
        return True
    return not isinstance(base, type) and is_record(type(base)) and not is_frozen(type(base))


def new(base: Any) -> Value | None:
    """Return the flag value for *base* itself, or ``None`` if it cannot be bound."""
    if not is_mutable_root(base):
        return None
    return new_value(base)


def recursive(base: Any, *filters: FilterFunc) -> list[Value]:
    """Return flag values for *base* and every exported field within, pre-order.

    Unusable roots, unsupported kinds and private fields are skipped without
    error, so the result may be empty.
    """
    if not is_mutable_root(base):
        logger.debug("cannot bind flags to %r: not a Ref or a mutable record", type(base).__name__)
        return []
    return _walk(base, root_hint(base), (), filters)


def _walk(
    base: Any,
    hint: Any,
    path: tuple[StructField, ...],
    filters: Sequence[FilterFunc],
) -> list[Value]:
    values: list[Value] = []
    value = new_value(base, path)
    decision = filter_value(value, *filters)
    if not decision.skip:
        values.append(value)  # type: ignore[arg-type]
    if not decision.descend or not is_record(hint) or is_frozen(hint):
        return values

    for field in record_fields(hint):
        if not field.exported:
            continue
        values.extend(_walk(base, field.type, (*path, field), filters))
    return values


# ---------------------------------------------------------------------------
# Ready-made filters
# ---------------------------------------------------------------------------


def skip_records(value: Value) -> FilterResult:
    """Leave out record values themselves while still discovering their fields."""
    if value.kind is ValueKind.RECORD:
        return FilterResult.SKIP_AND_DESCEND
    return FilterResult.INCLUDE_AND_DESCEND


def max_depth(depth: int) -> FilterFunc:
    """Stop descending below *depth* fields from the root."""

    def _filter(value: Value) -> FilterResult:
        if len(value.path) >= depth:
            return FilterResult.INCLUDE_NO_DESCEND
        return FilterResult.INCLUDE_AND_DESCEND

    return _filter


def exclude_paths(*names: str) -> FilterFunc:
    """Skip the values at the given dotted field paths and everything below them."""
    excluded = frozenset(names)

    def _filter(value: Value) -> FilterResult:
        if ".".join(f.name for f in value.path) in excluded:
            return FilterResult.SKIP_NO_DESCEND
        return FilterResult.INCLUDE_AND_DESCEND

    return _filter

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
"""Flag values bound to positions inside a caller-owned structure.

Usage::

    @dataclass
    class Input:
        foo: str = ""
        port: Uint16 = 8080

    i = Input()
    for val in recursive(i):
        print(name(val.path), val.type_name, str(val))
    val.set("9090")
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Sequence
from typing import Any

from jsonflag.containers import (
    Codec,
    ValueKind,
    json_list_codec,
    map_codec,
    record_codec,
    scalar_codec,
    scalar_list_codec,
)
from jsonflag.kinds import (
    Ref,
    StructField,
    allocate,
    is_map,
    is_record,
    list_element,
    scalar_kind,
    unwrap,
)

logger = logging.getLogger(__name__)

Encoder = Callable[[Any], "str | bytes"]
Decoder = Callable[[str], Any]


class Value:
    """A flag value: one addressable position inside a bound structure.

    The value holds the root it was discovered from and the chain of record
    fields leading to its position, never a copy of the data.  Reading or
    setting through a ``None`` position allocates a zero value there first.

    A ``Value()`` built without a root is detached: every query answers an
    empty result and :meth:`set` does nothing.
    """

    def __init__(
        self,
        base: Any = None,
        path: Sequence[StructField] = (),
        codec: Codec | None = None,
    ) -> None:
        self._base = base
        self._path: tuple[StructField, ...] = tuple(path)
        self._codec = codec
        self._encoder: Encoder | None = None
        self._decoder: Decoder | None = None

    # -- queries -------------------------------------------------------------

    @property
    def path(self) -> list[StructField]:
        """Record fields from the root to this position; empty for the root."""
        if not self._bound:
            return []
        return list(self._path)

    @property
    def type_name(self) -> str:
        """Human-readable kind, e.g. ``int64``, ``base64`` or ``string (JSON list)``."""
        if not self._bound:
            return ""
        return self._codec.type_name  # type: ignore[union-attr]

    @property
    def kind(self) -> ValueKind | None:
        if not self._bound:
            return None
        return self._codec.kind  # type: ignore[union-attr]

    @property
    def hint(self) -> Any:
        """Declared type hint of this position."""
        if not self._bound:
            return None
        if self._path:
            return self._path[-1].type
        return root_hint(self._base)

    def get(self) -> Any:
        """Return the current value, allocating through ``None`` positions."""
        if not self._bound:
            return None
        _, _, current = self._locate()
        return current

    def is_bool_flag(self) -> bool:
        """``True`` for boolean scalars, which a front end may set without an argument."""
        if not self._bound:
            return False
        return self._codec.is_bool  # type: ignore[union-attr]

    def __str__(self) -> str:
        if not self._bound:
            return ""
        current = self.get()
        if self._encoder is not None:
            try:
                out = self._encoder(current)
            except Exception:
                logger.debug("custom encoder failed for %s", self._dotted(), exc_info=True)
                return ""
            return out.decode("utf-8") if isinstance(out, bytes) else str(out)
        return self._codec.render(current)  # type: ignore[union-attr]

    def __repr__(self) -> str:
        return f"Value(path={self._dotted()!r}, type={self.type_name!r})"

    # -- mutation ------------------------------------------------------------

    def set(self, text: str) -> None:
        """Parse *text* and install the result at this position.

        Lists append one element; every other kind is replaced.  When parsing
        fails the bound value is left unchanged.

        Raises:
            FormatException: *text* does not match the kind's grammar.
            OverflowException: *text* is out of range for the kind's width.
        """
        if not self._bound:
            return
        current = self._peek()
        if self._decoder is not None:
            new = self._decoder(text)
        else:
            new = self._codec.parse(text, current)  # type: ignore[union-attr]
        owner, attr, _ = self._locate()
        self._install(owner, attr, new)

    def set_encoder(self, fn: Encoder | None) -> None:
        """Override rendering with *fn*; an exception from it renders as ``""``."""
        if not self._bound:
            return
        self._encoder = fn

    def set_decoder(self, fn: Decoder | None) -> None:
        """Override parsing with *fn*, which returns the value to install.

        Exceptions raised by *fn* propagate unchanged.
        """
        if not self._bound:
            return
        self._decoder = fn

    # -- internals -----------------------------------------------------------

    @property
    def _bound(self) -> bool:
        return self._base is not None and self._codec is not None

    def _dotted(self) -> str:
        return ".".join(f.name for f in self._path)

    def _peek(self) -> Any:
        """Current value at this position, or ``None`` if any position on the way is unset."""
        current = self._base.value if isinstance(self._base, Ref) else self._base
        for field in self._path:
            if current is None:
                return None
            current = getattr(current, field.name, None)
        return current

    def _locate(self) -> tuple[Any, str | None, Any]:
        """Walk to this position; return ``(owner, attribute, current value)``.

        Intermediate and final ``None`` positions are replaced by zero values.
        ``owner`` is ``None`` only for the root record itself.
        """
        owner: Any
        attr: str | None
        if isinstance(self._base, Ref):
            owner, attr, hint = self._base, "value", self._base.type
            current = self._base.value
        else:
            owner, attr, hint = None, None, type(self._base)
            current = self._base

        for field in self._path:
            if current is None:
                current = allocate(hint)
                setattr(owner, attr, current)  # type: ignore[arg-type]
            owner, attr, hint = current, field.name, field.type
            current = getattr(owner, attr, None)

        if current is None:
            current = allocate(hint)
            if owner is not None:
                setattr(owner, attr, current)  # type: ignore[arg-type]
        return owner, attr, current

    def _install(self, owner: Any, attr: str | None, value: Any) -> None:
        if owner is None:
            _copy_record(value, self._base)
            return
        setattr(owner, attr, value)  # type: ignore[arg-type]


def root_hint(base: Any) -> Any:
    """Declared hint of a root: the cell's type for a :class:`Ref`, else the record's class."""
    if isinstance(base, Ref):
        return base.type
    return type(base)


def _copy_record(src: Any, dst: Any) -> None:
    if dataclasses.is_dataclass(dst):
        names = [f.name for f in dataclasses.fields(dst)]
    else:
        names = list(type(dst).model_fields)
    for name in names:
        setattr(dst, name, getattr(src, name))


# ---------------------------------------------------------------------------
# Kind dispatch
# ---------------------------------------------------------------------------


def select_codec(hint: Any) -> Codec | None:
    """Pick the codec for a declared hint, or ``None`` for unsupported kinds.

    Precedence: primitives and byte buffers, lists of primitives or byte
    buffers, lists of lists, lists of maps or records, maps, records.
    """
    kind = scalar_kind(hint)
    if kind is not None:
        return scalar_codec(kind, as_bytearray=unwrap(hint) is bytearray)

    element = list_element(hint)
    if element is not None:
        element_kind = scalar_kind(element)
        if element_kind is not None:
            return scalar_list_codec(element_kind)
        if list_element(element) is not None:
            return json_list_codec(hint, element, "JSON list")
        if is_map(element) or is_record(element):
            return json_list_codec(hint, element, "JSON object (JSON list)")
        return None

    if is_map(hint):
        return map_codec(hint)
    if is_record(hint):
        return record_codec(hint)
    return None


def new_value(base: Any, path: Sequence[StructField] = ()) -> Value | None:
    """Build the :class:`Value` for the position at *path* under *base*.

    Dispatch only inspects type hints; nothing is allocated until the
    value is read or set.
    """
    hint = path[-1].type if path else root_hint(base)
    codec = select_codec(hint)
    if codec is None:
        return None
    return Value(base, path, codec)

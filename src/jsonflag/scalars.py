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
"""Parse and render functions for primitive kinds.

Parsers raise :class:`~jsonflag.exceptions.FormatException` for text that does
not match the kind's grammar and :class:`~jsonflag.exceptions.OverflowException`
for well formed numbers outside the kind's range.  Renderers never fail and
render the kind's zero value as the empty string.
"""

from __future__ import annotations

import base64
import binascii
import math
import re
import struct
from collections.abc import Callable
from typing import Any

from jsonflag.exceptions import FormatException, OverflowException, format_error, overflow_error
from jsonflag.kinds import COMPLEX128, FLOAT32, FLOAT64, ScalarKind

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_INT_RE = re.compile(
    r"""
    (?P<sign>[+-])?
    (?:
        0[xX](?P<hex>(?:_?[0-9a-fA-F])+)
      | 0[bB](?P<bin>(?:_?[01])+)
      | 0[oO](?P<oct>(?:_?[0-7])+)
      | (?P<legacy>0(?:_?[0-7])*)
      | (?P<dec>[1-9](?:_?[0-9])*)
    )
    """,
    re.VERBOSE,
)

_BASES = (("hex", 16), ("bin", 2), ("oct", 8), ("legacy", 8), ("dec", 10))

_SPECIAL_FLOAT_RE = re.compile(r"[+-]?(?:inf|infinity|nan)", re.IGNORECASE)
_HEX_FLOAT_RE = re.compile(r"[+-]?0[xX]")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_bool(text: str) -> bool:
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise format_error("bool", text)


def parse_int(text: str, kind: ScalarKind) -> int:
    """Parse an integer literal with base prefix detection (``0x``, ``0o``, ``0b``, ``0``)."""
    match = _INT_RE.fullmatch(text)
    if match is None or (match.group("sign") and not kind.signed):
        raise format_error(kind.name, text)
    for group, base in _BASES:
        digits = match.group(group)
        if digits is not None:
            value = int(digits.replace("_", ""), base)
            break
    if match.group("sign") == "-":
        value = -value
    low, high = kind.bounds()
    if not low <= value <= high:
        raise overflow_error(kind.name, text)
    return value


def parse_float(text: str, kind: ScalarKind) -> float:
    """Parse a decimal or hexadecimal float literal at the kind's width."""
    return _parse_float(text, kind.bits, kind.name)


def _parse_float(text: str, bits: int, kind_name: str) -> float:
    if not text or not text.isascii() or any(c.isspace() for c in text):
        raise format_error(kind_name, text)
    hex_literal = _HEX_FLOAT_RE.match(text) is not None
    if hex_literal and "p" not in text.lower():
        raise format_error(kind_name, text, "hexadecimal mantissa requires a 'p' exponent")
    if not hex_literal and "_" in text:
        raise format_error(kind_name, text)
    try:
        if hex_literal:
            value = float.fromhex(text.replace("_", ""))
        else:
            value = float(text)
    except OverflowError as exc:
        raise overflow_error(kind_name, text) from exc
    except ValueError as exc:
        raise format_error(kind_name, text) from exc
    special = _SPECIAL_FLOAT_RE.fullmatch(text) is not None
    if math.isinf(value) and not special:
        raise overflow_error(kind_name, text)
    if bits == 32:
        try:
            value = to_float32(value)
        except OverflowError as exc:
            raise overflow_error(kind_name, text) from exc
        if math.isinf(value) and not special:
            raise overflow_error(kind_name, text)
    return value


def parse_complex(text: str, kind: ScalarKind) -> complex:
    """Parse ``N``, ``Ni``, or ``N±Ni``, optionally parenthesised (``j`` works as ``i``)."""
    bits = kind.bits // 2
    body = text
    if len(body) >= 2 and body[0] == "(" and body[-1] == ")":
        body = body[1:-1]
    if not body:
        raise format_error(kind.name, text)
    if body[-1] not in "ij":
        return complex(_component(body, bits, kind.name, text), 0.0)

    body = body[:-1]
    split = 0
    for i in range(len(body) - 1, 0, -1):
        if body[i] in "+-" and body[i - 1] not in "eEpP+-":
            split = i
            break
    if split == 0:
        return complex(0.0, _component(body, bits, kind.name, text))
    real = _component(body[:split], bits, kind.name, text)
    imag = _component(body[split:], bits, kind.name, text)
    return complex(real, imag)


def _component(part: str, bits: int, kind_name: str, text: str) -> float:
    try:
        return _parse_float(part, bits, kind_name)
    except OverflowException as exc:
        raise overflow_error(kind_name, text) from exc
    except FormatException as exc:
        raise format_error(kind_name, text) from exc


def parse_string(text: str) -> str:
    return text


def parse_bytes(text: str) -> bytes:
    """Decode standard, padded base64."""
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise format_error("base64", text, str(exc)) from exc


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def to_float32(value: float) -> float:
    """Round *value* to the nearest single precision float."""
    return struct.unpack("f", struct.pack("f", value))[0]


def format_float(value: float, bits: int = 64) -> str:
    """Shortest text that reads back as the same float of the given width."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if bits != 32:
        return repr(float(value))
    value = to_float32(value)
    for precision in range(1, 10):
        candidate = f"{value:.{precision}g}"
        if to_float32(float(candidate)) == value:
            return repr(float(candidate))
    return repr(value)  # pragma: no cover - nine digits always round-trip


def format_complex(value: complex, bits: int = 128) -> str:
    """Render as ``(re+imi)``, each part at half the complex width."""
    real = format_float(value.real, bits // 2)
    imag = format_float(value.imag, bits // 2)
    if imag[0] not in "+-":
        imag = "+" + imag
    return f"({real}{imag}i)"


def render_bool(value: Any) -> str:
    return "true" if value else ""


def render_int(value: Any) -> str:
    if not value:
        return ""
    return str(int(value))


def render_float(value: Any, kind: ScalarKind = FLOAT64) -> str:
    if value == 0:
        return ""
    return format_float(value, kind.bits)


def render_complex(value: Any, kind: ScalarKind = COMPLEX128) -> str:
    if value == 0:
        return ""
    return format_complex(complex(value), kind.bits)


def render_string(value: Any) -> str:
    return value or ""


def render_bytes(value: Any) -> str:
    if not value:
        return ""
    return base64.b64encode(bytes(value)).decode("ascii")


# ---------------------------------------------------------------------------
# Lookup by kind
# ---------------------------------------------------------------------------


def parser_for(kind: ScalarKind) -> Callable[[str], Any]:
    """Return the text parser for *kind*."""
    family = kind.family
    if family == "bool":
        return parse_bool
    if family in ("int", "uint"):
        return lambda text: parse_int(text, kind)
    if family == "float":
        return lambda text: parse_float(text, kind)
    if family == "complex":
        return lambda text: parse_complex(text, kind)
    if family == "bytes":
        return parse_bytes
    return parse_string


def renderer_for(kind: ScalarKind) -> Callable[[Any], str]:
    """Return the zero-suppressing renderer for *kind*."""
    family = kind.family
    if family == "bool":
        return render_bool
    if family in ("int", "uint"):
        return render_int
    if family == "float":
        return lambda value: render_float(value, kind)
    if family == "complex":
        return lambda value: render_complex(value, kind)
    if family == "bytes":
        return render_bytes
    return render_string


def json_element(kind: ScalarKind, value: Any) -> Any:
    """Convert one list element of *kind* to a JSON-ready Python value.

    Byte buffers become base64 strings and complex numbers become quoted
    ``(re+imi)`` strings, since JSON has no number form for them.
    """
    family = kind.family
    if family == "bytes":
        return base64.b64encode(bytes(value)).decode("ascii")
    if family == "complex":
        return format_complex(complex(value), kind.bits)
    if kind == FLOAT32:
        return float(format_float(value, 32)) if math.isfinite(value) else value
    return value

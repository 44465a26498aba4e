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
"""Exception hierarchy for jsonflag.

All errors raised while parsing flag text inherit from JsonFlagException,
so a front end can catch a single type. Discovery never raises: an unusable
root or field simply produces fewer values.

Categories:
- FormatException: text does not match the grammar of the target kind
- OverflowException: text is well formed but out of range for the kind's width
- DecodeException: failure reported by a caller-supplied decoder
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class JsonFlagException(Exception):
    """Base exception for all jsonflag errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "FORMAT_INT").
        context: Arbitrary key-value pairs such as the offending text and kind.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Parse Exceptions
# =============================================================================


class FormatException(JsonFlagException, ValueError):
    """Text does not lexically parse as the target kind."""


class OverflowException(JsonFlagException, ValueError):
    """Numeric text parses but exceeds the representable range of the target width."""


class DecodeException(JsonFlagException):
    """Failure reported by a caller-supplied decoder."""


def format_error(kind: str, text: str, reason: str = "invalid syntax") -> FormatException:
    """Build a :class:`FormatException` for *text* that is not a valid *kind*."""
    return FormatException(
        f"parsing {text!r} as {kind}: {reason}",
        code=f"FORMAT_{kind.upper()}",
        context={"kind": kind, "text": text},
    )


def overflow_error(kind: str, text: str) -> OverflowException:
    """Build an :class:`OverflowException` for *text* that does not fit *kind*."""
    return OverflowException(
        f"parsing {text!r} as {kind}: value out of range",
        code=f"RANGE_{kind.upper()}",
        context={"kind": kind, "text": text},
    )

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
"""Outbound port: flag-set interface."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from jsonflag.value import Value


@runtime_checkable
class FlagSetPort(Protocol):
    """Abstract flag set that can host discovered values.

    Any command-line front end (argparse, Click, etc.) must implement this protocol.
    """

    def register(self, value: Value, *, name: str | None = None, usage: str | None = None) -> None: ...

    def register_all(self, values: Iterable[Value]) -> None: ...

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
"""Click-based adapter implementing :class:`FlagSetPort`."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from typing import Any

import click

from jsonflag.containers import ValueKind
from jsonflag.exceptions import JsonFlagException
from jsonflag.kinds import StructField
from jsonflag.naming import json_name
from jsonflag.naming import usage as field_usage
from jsonflag.value import Value

NameFunc = Callable[[Sequence[StructField]], str]

_NON_IDENT_RE = re.compile(r"\W")


class ValueParamType(click.ParamType):
    """Click parameter type that writes each converted string through :meth:`Value.set`."""

    def __init__(self, value: Value) -> None:
        self.value = value
        self.name = value.type_name

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> Any:
        # Flags that were not given arrive as ``False``; only text is applied.
        if isinstance(value, str):
            try:
                self.value.set(value)
            except (JsonFlagException, ValueError) as exc:
                self.fail(str(exc), param, ctx)
        return self.value.get()


def _param_name(flag: str) -> str:
    ident = _NON_IDENT_RE.sub("_", flag)
    return ident if ident.isidentifier() else f"_{ident}"


def _build_click_option(value: Value, flag: str, help_text: str) -> click.Option:
    kwargs: dict[str, Any] = {
        "type": ValueParamType(value),
        "help": help_text or None,
    }
    default = str(value)
    if default:
        kwargs["show_default"] = default

    if value.is_bool_flag():
        kwargs["is_flag"] = True
        kwargs["flag_value"] = "true"
    elif value.kind is ValueKind.LIST:
        kwargs["multiple"] = True

    return click.Option([f"--{flag}", _param_name(flag)], **kwargs)


class ClickAdapter:
    """Flag set backed by `click <https://click.palletsprojects.com>`_.

    Implements the :class:`~jsonflag.ports.outbound.FlagSetPort` protocol.
    Values are written into the bound structure while Click converts the
    command line, before the command callback runs.
    """

    def __init__(self, naming: NameFunc = json_name) -> None:
        self._naming = naming
        self._params: list[click.Parameter] = []

    @property
    def params(self) -> list[click.Parameter]:
        return list(self._params)

    # -- FlagSetPort interface ----------------------------------------------

    def register(self, value: Value, *, name: str | None = None, usage: str | None = None) -> None:
        """Build a :class:`click.Option` for *value*."""
        flag = name or self._naming(value.path)
        help_text = usage if usage is not None else field_usage(value.path)
        self._params.append(_build_click_option(value, flag, help_text))

    def register_all(self, values: Iterable[Value]) -> None:
        for value in values:
            self.register(value)

    # -- commands -----------------------------------------------------------

    def apply(self, command: click.Command) -> click.Command:
        """Append the registered options to an existing *command*."""
        command.params.extend(self._params)
        return command

    def command(self, name: str, callback: Callable[..., Any], help_text: str = "") -> click.Command:
        """Build a :class:`click.Command` carrying the registered options.

        The callback receives the converted values as keyword arguments, but
        the bound structure already holds them.
        """
        return click.Command(
            name=name,
            callback=callback,
            params=list(self._params),
            help=help_text or None,
        )

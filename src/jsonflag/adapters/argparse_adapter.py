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
"""argparse adapter implementing :class:`FlagSetPort`."""

from __future__ import annotations

import argparse
import re
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from jsonflag.containers import ValueKind
from jsonflag.exceptions import JsonFlagException
from jsonflag.kinds import StructField
from jsonflag.naming import json_name
from jsonflag.naming import usage as field_usage
from jsonflag.value import Value

NameFunc = Callable[[Sequence[StructField]], str]

_METAVAR_RE = re.compile(r"\W+")


class _SetValueAction(argparse.Action):
    """Hand each occurrence of the option to :meth:`Value.set`."""

    def __init__(self, option_strings: list[str], dest: str, value: Value, **kwargs: Any) -> None:
        super().__init__(option_strings, dest, **kwargs)
        self.value = value

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Any,
        option_string: str | None = None,
    ) -> None:
        try:
            self.value.set(values)
        except (JsonFlagException, ValueError) as exc:
            raise argparse.ArgumentError(self, str(exc)) from exc


class ArgparseAdapter:
    """Flag set backed by :class:`argparse.ArgumentParser`.

    Values are written into the bound structure while parsing; the returned
    namespace carries nothing of interest.
    """

    def __init__(
        self,
        parser: argparse.ArgumentParser | None = None,
        naming: NameFunc = json_name,
    ) -> None:
        self._parser = parser or argparse.ArgumentParser()
        self._naming = naming

    @property
    def parser(self) -> argparse.ArgumentParser:
        return self._parser

    # -- FlagSetPort interface ----------------------------------------------

    def register(self, value: Value, *, name: str | None = None, usage: str | None = None) -> None:
        flag = name or self._naming(value.path)
        help_text = usage if usage is not None else field_usage(value.path)
        default = str(value)
        if default:
            help_text = f"{help_text} (default: {default})".strip()

        kwargs: dict[str, Any] = {
            "action": _SetValueAction,
            "value": value,
            "dest": flag,
            "default": argparse.SUPPRESS,
            "metavar": _METAVAR_RE.sub("_", value.type_name).strip("_").upper(),
            "help": help_text.replace("%", "%%") or None,
        }
        if value.is_bool_flag():
            kwargs["nargs"] = "?"
            kwargs["const"] = "true"
        elif value.kind is ValueKind.LIST:
            kwargs["help"] = ((kwargs["help"] or "") + " (repeatable)").strip()
        self._parser.add_argument(f"--{flag}", **kwargs)

    def register_all(self, values: Iterable[Value]) -> None:
        for value in values:
            self.register(value)

    def parse(self, args: Sequence[str] | None = None) -> argparse.Namespace:
        """Parse *args*; invalid values exit through :meth:`ArgumentParser.error`."""
        return self._parser.parse_args(args)

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
"""structlog setup for the command-line front ends.

Library modules log through stdlib ``logging`` loggers; this module routes
them through structlog's console or JSON renderer on stderr.  Settings come
from the ``logging`` section of a :class:`~jsonflag.config.Config`::

    logging:
      format: json
      level:
        root: INFO
        jsonflag: DEBUG
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Any

import structlog

from jsonflag.config import Config

_FORMATS = ("console", "json")


@dataclass(frozen=True)
class LogSettings:
    root_level: str = "INFO"
    fmt: str = "console"
    module_levels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Config) -> LogSettings:
        """``logging.level`` is a level name or a mapping with a ``root`` entry."""
        level = config.get("logging.level", "INFO")
        modules: dict[str, str] = {}
        if isinstance(level, dict):
            modules = {name: str(value).upper() for name, value in level.items() if name != "root"}
            level = level.get("root", "INFO")
        fmt = str(config.get("logging.format", "console")).lower()
        if fmt not in _FORMATS:
            raise ValueError(f"unknown log format {fmt!r}; expected one of {', '.join(_FORMATS)}")
        return cls(root_level=str(level).upper(), fmt=fmt, module_levels=modules)


def _level(name: str) -> int:
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


class StructlogAdapter:
    """Logging adapter backed by structlog."""

    def __init__(self) -> None:
        self._settings = LogSettings()

    @property
    def settings(self) -> LogSettings:
        return self._settings

    def configure(self, config: Config) -> None:
        """Apply the ``logging`` section of *config* to structlog and the stdlib root logger."""
        self._settings = LogSettings.from_config(config)

        renderer: Any = (
            structlog.processors.JSONRenderer()
            if self._settings.fmt == "json"
            else structlog.dev.ConsoleRenderer(colors=False)
        )
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.UnicodeDecoder(),
                renderer,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=False,
        )
        # stdout is reserved for command output.
        logging.basicConfig(format="%(message)s", stream=sys.stderr, level=_level(self._settings.root_level), force=True)
        for module, level in self._settings.module_levels.items():
            self.set_level(module, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(_level(level.upper()))


def configure_logging(level: str = "INFO", fmt: str = "console") -> StructlogAdapter:
    """Configure structlog with a root *level* and a ``console`` or ``json`` format."""
    adapter = StructlogAdapter()
    adapter.configure(Config({"logging": {"level": level, "format": fmt}}))
    return adapter

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
"""Flag defaults from YAML/TOML files and environment variables.

Defaults are applied through the same :meth:`Value.set` path as command-line
flags, so they are parsed and range-checked identically::

    values = recursive(options)
    bind_values(values, Config.from_file("simplecurl.yaml", env_prefix="SIMPLECURL"))
"""

from __future__ import annotations

import json
import logging
import os
import re
import tomllib
from collections.abc import Callable, Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from jsonflag.containers import ValueKind
from jsonflag.kinds import StructField
from jsonflag.naming import json_name
from jsonflag.value import Value

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")
_MAX_PLACEHOLDER_DEPTH = 10


class Config:
    """Nested defaults addressed by dotted keys such as ``url.port``.

    Lookup order for :meth:`get`: the environment variable named by
    :meth:`env_key` (only when an ``env_prefix`` is set), then the loaded
    documents.  Strings may reference other keys or environment variables
    with ``${name}`` and ``${name:fallback}``.
    """

    def __init__(self, data: Mapping[str, Any] | None = None, env_prefix: str = "") -> None:
        self._data: dict[str, Any] = dict(data or {})
        self._env_prefix = env_prefix.upper().rstrip("_")
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """Files merged into this configuration, in load order."""
        return list(self._loaded_sources)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    @classmethod
    def from_file(cls, *paths: str | Path, env_prefix: str = "") -> Config:
        """Read and merge ``.yaml``, ``.yml`` or ``.toml`` documents.

        Later files override earlier ones key by key; files that do not
        exist are skipped.
        """
        config = cls(env_prefix=env_prefix)
        for path in map(Path, paths):
            if not path.exists():
                logger.debug("no configuration file at %s", path)
                continue
            config._data = _merge(config._data, _read_document(path))
            config._loaded_sources.append(str(path))
        return config

    def env_key(self, key: str) -> str | None:
        """Environment variable consulted for *key*: ``url.port`` -> ``PREFIX_URL_PORT``."""
        if not self._env_prefix:
            return None
        return f"{self._env_prefix}_{re.sub(r'[.-]', '_', key).upper()}"

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value at dotted *key*, or *default* when absent.

        Raises:
            ValueError: a ``${...}`` reference cannot be resolved or is circular.
        """
        env_key = self.env_key(key)
        if env_key is not None and env_key in os.environ:
            return os.environ[env_key]

        found = self._lookup(key)
        if found is None:
            return default
        if isinstance(found, str):
            return self._interpolate(found, 0)
        return found

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Return the mapping stored under *prefix*, or ``{}``."""
        found = self._lookup(prefix)
        return found if isinstance(found, dict) else {}

    def _lookup(self, key: str) -> Any:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def _interpolate(self, text: str, depth: int) -> str:
        if "${" not in text:
            return text
        if depth > _MAX_PLACEHOLDER_DEPTH:
            raise ValueError(f"Max recursion depth exceeded resolving placeholders in {text!r}; check for cycles")

        def substitute(match: re.Match[str]) -> str:
            ref, sep, fallback = match.group(1).partition(":")
            if ref in os.environ:
                return os.environ[ref]
            found = self._lookup(ref)
            if found is not None:
                return self._interpolate(str(found), depth + 1)
            if sep:
                return fallback
            raise ValueError(f"Cannot resolve placeholder '${{{match.group(1)}}}': not in environment or config")

        return _PLACEHOLDER_RE.sub(substitute, text)


def _read_document(path: Path) -> dict[str, Any]:
    if path.suffix == ".toml":
        return tomllib.loads(path.read_text())
    return yaml.safe_load(path.read_text()) or {}


def _merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """Overlay wins; nested mappings merge key by key."""
    result = dict(base)
    for key, value in overlay.items():
        current = result.get(key)
        result[key] = _merge(current, value) if isinstance(current, dict) and isinstance(value, dict) else value
    return result


# ---------------------------------------------------------------------------
# Applying configuration to flag values
# ---------------------------------------------------------------------------


def bind_values(
    values: Iterable[Value],
    config: Config,
    naming: Callable[[Sequence[StructField]], str] = json_name,
) -> list[str]:
    """Set every value whose key (``naming(value.path)``) is present in *config*.

    Record values given as mappings are left to their fields; list values
    receive one :meth:`Value.set` call per element and so append to the
    elements already present.  Returns the keys that were applied.

    Raises:
        FormatException / OverflowException: a configured value does not parse.
    """
    applied: list[str] = []
    for value in values:
        key = naming(value.path)
        raw = config.get(key)
        if raw is None:
            continue
        if value.kind is ValueKind.RECORD and isinstance(raw, dict):
            continue
        for text in _texts(value, raw):
            value.set(text)
        logger.debug("applied configured value for %s", key)
        applied.append(key)
    return applied


def _texts(value: Value, raw: Any) -> list[str]:
    if value.kind is ValueKind.LIST:
        if isinstance(raw, str) and raw.lstrip().startswith("["):
            raw = json.loads(raw)
        if isinstance(raw, list):
            return [_text(item) for item in raw]
    return [_text(raw)]


def _text(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, (dict, list)):
        return json.dumps(raw, separators=(",", ":"))
    return str(raw)

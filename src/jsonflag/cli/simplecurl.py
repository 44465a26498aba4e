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
"""simplecurl: a tiny HTTP client whose flags come from a dataclass.

Every field of :class:`SimpleCurlConfig` becomes a ``--json.name`` option::

    jsonflag-simplecurl --url.host example.com --url.port 443 --verbose

Defaults may also come from a YAML/TOML file (``--config``) and from
``SIMPLECURL_*`` environment variables; command-line flags win.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import click
import httpx
import structlog

from jsonflag.adapters.click_adapter import ClickAdapter
from jsonflag.config import Config, bind_values
from jsonflag.discovery import recursive, skip_records
from jsonflag.logging import StructlogAdapter

ENV_PREFIX = "SIMPLECURL"

logger = structlog.get_logger(__name__)


@dataclass
class URL:
    scheme: str = field(default="https", metadata={"json": "scheme", "usage": "URL scheme"})
    host: str = field(default="localhost", metadata={"json": "host", "usage": "server host name"})
    port: int = field(default=8080, metadata={"json": "port", "usage": "server port"})
    path: str = field(default="", metadata={"json": "path", "usage": "request path"})


@dataclass
class SimpleCurlConfig:
    url: URL = field(default_factory=URL, metadata={"json": "url"})
    verbose: bool = field(default=False, metadata={"json": "verbose", "usage": "dump the response"})


def request_url(config: SimpleCurlConfig) -> str:
    path = config.url.path
    if path and not path.startswith("/"):
        path = "/" + path
    return f"{config.url.scheme}://{config.url.host}:{config.url.port}{path}"


def dump_response(response: httpx.Response) -> str:
    """Status line, headers and body, in wire order."""
    lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}"]
    lines.extend(f"{key}: {value}" for key, value in response.headers.multi_items())
    return "\r\n".join(lines) + "\r\n\r\n" + response.text


def build_command(
    config: SimpleCurlConfig | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
    env_prefix: str = ENV_PREFIX,
) -> click.Command:
    """Build the ``simplecurl`` command bound to *config*.

    *transport* replaces the network transport of the HTTP client.
    """
    config = config if config is not None else SimpleCurlConfig()
    values = recursive(config, skip_records)

    adapter = ClickAdapter()
    adapter.register_all(values)

    def load_defaults(ctx: click.Context, param: click.Parameter, path: str | None) -> None:
        if path:
            defaults = Config.from_file(path, env_prefix=env_prefix)
        else:
            defaults = Config(env_prefix=env_prefix)
        try:
            StructlogAdapter().configure(defaults)
            applied = bind_values(values, defaults)
        except ValueError as exc:
            raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc
        logger.debug("defaults applied", keys=applied, sources=defaults.loaded_sources)

    def run(**_: Any) -> None:
        url = request_url(config)
        logger.debug("sending request", url=url)
        try:
            with httpx.Client(transport=transport) as client:
                response = client.get(url)
        except httpx.HTTPError as exc:
            raise click.ClickException(f"Doing request error: {exc}") from exc

        if config.verbose:
            click.echo(dump_response(response))

    command = adapter.command("simplecurl", run, help_text="Send a GET request built from flags.")
    command.params.insert(
        0,
        click.Option(
            ["--config", "config_file"],
            type=click.Path(dir_okay=False),
            is_eager=True,
            expose_value=False,
            callback=load_defaults,
            help="YAML or TOML file with default values.",
        ),
    )
    return command


def main() -> None:
    build_command()()

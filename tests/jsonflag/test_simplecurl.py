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
"""Tests for the simplecurl example command."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

from jsonflag.cli.simplecurl import SimpleCurlConfig, URL, build_command, dump_response, request_url


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("SIMPLECURL_URL_HOST", "SIMPLECURL_URL_PORT", "SIMPLECURL_VERBOSE", "SIMPLECURL_LOGGING_LEVEL"):
        monkeypatch.delenv(key, raising=False)


class Recorder:
    def __init__(self, status: int = 200, text: str = "hello") -> None:
        self.requests: list[httpx.Request] = []
        self.status = status
        self.text = text

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, headers={"X-Test": "1"}, text=self.text)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


class TestRequestUrl:
    def test_defaults(self):
        assert request_url(SimpleCurlConfig()) == "https://localhost:8080"

    def test_path_gets_leading_slash(self):
        config = SimpleCurlConfig(url=URL(scheme="http", host="h", port=1, path="api"))
        assert request_url(config) == "http://h:1/api"


class TestSimpleCurl:
    def test_flags_build_request(self):
        recorder = Recorder()
        result = CliRunner().invoke(
            build_command(transport=recorder.transport),
            ["--url.host", "example.com", "--url.port", "9000", "--url.path", "/api"],
        )
        assert result.exit_code == 0, result.output
        request = recorder.requests[0]
        assert request.method == "GET"
        assert str(request.url) == "https://example.com:9000/api"
        assert result.stdout == ""

    def test_verbose_dumps_response(self):
        recorder = Recorder(text="hello body")
        result = CliRunner().invoke(build_command(transport=recorder.transport), ["--verbose"])
        assert result.exit_code == 0, result.output
        assert "HTTP/1.1 200 OK" in result.output
        assert "x-test: 1" in result.output
        assert "hello body" in result.output

    def test_env_defaults(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SIMPLECURL_URL_PORT", "7000")
        recorder = Recorder()
        result = CliRunner().invoke(build_command(transport=recorder.transport), [])
        assert result.exit_code == 0, result.output
        assert recorder.requests[0].url.port == 7000

    def test_flag_beats_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SIMPLECURL_URL_PORT", "7000")
        recorder = Recorder()
        result = CliRunner().invoke(build_command(transport=recorder.transport), ["--url.port", "9000"])
        assert result.exit_code == 0, result.output
        assert recorder.requests[0].url.port == 9000

    def test_config_file(self, tmp_path: Path):
        path = tmp_path / "simplecurl.yaml"
        path.write_text("url:\n  host: file-host\n  scheme: http\nverbose: true\n")
        recorder = Recorder()
        result = CliRunner().invoke(build_command(transport=recorder.transport), ["--config", str(path)])
        assert result.exit_code == 0, result.output
        assert recorder.requests[0].url.host == "file-host"
        assert recorder.requests[0].url.scheme == "http"
        assert "HTTP/1.1 200 OK" in result.output

    def test_bad_env_value(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SIMPLECURL_URL_PORT", "http")
        recorder = Recorder()
        result = CliRunner().invoke(build_command(transport=recorder.transport), [])
        assert result.exit_code == 2
        assert recorder.requests == []

    def test_request_error(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = CliRunner().invoke(build_command(transport=httpx.MockTransport(refuse)), [])
        assert result.exit_code == 1
        assert "Doing request error: connection refused" in result.output

    def test_help(self):
        result = CliRunner().invoke(build_command(), ["--help"])
        assert result.exit_code == 0
        assert "--url.host" in result.output
        assert "(localhost)]" in result.output
        assert "--config" in result.output
        assert "--url " not in result.output


class TestDumpResponse:
    def test_status_headers_body(self):
        response = httpx.Response(404, headers={"Content-Type": "text/plain"}, text="missing")
        dumped = dump_response(response)
        assert dumped.startswith("HTTP/1.1 404 Not Found\r\n")
        assert "content-type: text/plain" in dumped
        assert dumped.endswith("\r\n\r\nmissing")

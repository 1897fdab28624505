"""Tests for routemux.server.access_log and access logging during dispatch."""

import logging
import re
from datetime import UTC, datetime
from typing import Any

import pytest

from routemux.app import RouteMux
from routemux.config import MuxConfig
from routemux.http.request import Request
from routemux.http.response import ASGIResponseWriter, ResponseWrapper
from routemux.server.access_log import LOG_FORMAT, log_access
from routemux.testing import TestClient

LINE = re.compile(r'^(\S+) - - \[([^\]]+)\] "(\S+) (\S+) (\S+)" (\d+) (\d+) "([^"]*)" "([^"]*)"$')


async def _discard(message: Any) -> None:
    return None


async def _no_body() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


class TestLogAccess:
    def test_format_is_fixed(self) -> None:
        assert LOG_FORMAT == '%s - - [%s] "%s %s %s" %d %d "%s" "%s"'

    def test_line(self, caplog: pytest.LogCaptureFixture) -> None:
        scope = {
            "type": "http",
            "method": "GET",
            "path": "/user/42",
            "headers": [(b"referer", b"http://ref/"), (b"user-agent", b"curl/8.5")],
            "client": ("127.0.0.1", 5000),
        }
        request = Request.from_asgi(scope, _no_body)
        writer = ResponseWrapper(ASGIResponseWriter(_discard))
        writer.write(b"user 42")
        logger = logging.getLogger("test.access")

        with caplog.at_level(logging.INFO, logger="test.access"):
            log_access(logger, request, writer, now=datetime(2026, 10, 16, 9, 14, 3, tzinfo=UTC))

        assert caplog.messages == [
            '127.0.0.1:5000 - - [16/Oct/2026:09:14:03 +0000] "GET /user/42 HTTP/1.1" 200 7 '
            '"http://ref/" "curl/8.5"'
        ]


class TestDispatchLogging:
    async def test_one_line_per_request(self, caplog: pytest.LogCaptureFixture) -> None:
        mux = RouteMux()
        mux.get("/hello", lambda w, r: w.write(b"hello"))
        client = TestClient(mux)

        with caplog.at_level(logging.INFO, logger="routemux.access"):
            await client.get("/hello", headers={"User-Agent": "pytest"})
            await client.get("/missing")

        lines = [r.getMessage() for r in caplog.records if r.name == "routemux.access"]
        assert len(lines) == 2

        first = LINE.match(lines[0])
        assert first is not None
        assert first.group(1) == "127.0.0.1:50000"
        assert first.group(3, 4, 5) == ("GET", "/hello", "HTTP/1.1")
        assert first.group(6, 7) == ("200", "5")
        assert first.group(9) == "pytest"

        second = LINE.match(lines[1])
        assert second is not None
        assert second.group(6, 7) == ("404", str(len(b"404 page not found\n")))

    async def test_options_logged_with_status(self, caplog: pytest.LogCaptureFixture) -> None:
        mux = RouteMux()
        with caplog.at_level(logging.INFO, logger="routemux.access"):
            await TestClient(mux).options("/anything")

        line = LINE.match(caplog.records[-1].getMessage())
        assert line is not None
        assert line.group(6, 7) == ("200", "0")

    async def test_options_handler_status_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        mux = RouteMux()
        mux.add_route("OPTIONS", "/api", lambda w, r: w.write_header(204))
        with caplog.at_level(logging.INFO, logger="routemux.access"):
            response = await TestClient(mux).options("/api")

        assert response.status == 204
        line = LINE.match(caplog.records[-1].getMessage())
        assert line is not None
        assert line.group(6) == "204"

    async def test_handler_error_logged_as_500(self, caplog: pytest.LogCaptureFixture) -> None:
        mux = RouteMux()

        def half_done(w, r):
            w.write(b"partial")
            raise RuntimeError("kaboom")

        mux.get("/half", half_done)
        with caplog.at_level(logging.INFO, logger="routemux.access"):
            await TestClient(mux).get("/half")

        lines = [r.getMessage() for r in caplog.records if r.name == "routemux.access"]
        line = LINE.match(lines[-1])
        assert line is not None
        assert line.group(6, 7) == ("500", str(len(b"Internal Server Error\n")))

    async def test_disabled(self, caplog: pytest.LogCaptureFixture) -> None:
        mux = RouteMux(MuxConfig(access_log=False))
        mux.get("/hello", lambda w, r: w.write(b"hello"))

        with caplog.at_level(logging.INFO, logger="routemux.access"):
            await TestClient(mux).get("/hello")

        assert not [r for r in caplog.records if r.name == "routemux.access"]

    async def test_toggle_at_runtime(self, caplog: pytest.LogCaptureFixture) -> None:
        mux = RouteMux()
        mux.logging = False
        mux.get("/hello", lambda w, r: w.write(b"hello"))

        with caplog.at_level(logging.INFO, logger="routemux.access"):
            await TestClient(mux).get("/hello")

        assert not [r for r in caplog.records if r.name == "routemux.access"]

    async def test_custom_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        mux = RouteMux(logger=logging.getLogger("myapp.http"))
        mux.get("/hello", lambda w, r: w.write(b"hello"))

        with caplog.at_level(logging.INFO, logger="myapp.http"):
            await TestClient(mux).get("/hello")

        assert [r.name for r in caplog.records if r.name == "myapp.http"] == ["myapp.http"]

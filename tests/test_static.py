"""Tests for static file serving — routemux.static and RouteMux.static()."""

import os
from datetime import UTC, datetime
from email.utils import format_datetime

import pytest

from routemux.app import RouteMux
from routemux.config import MuxConfig
from routemux.static import clean_join, clean_path
from routemux.testing import TestClient


@pytest.fixture
def static_dir(tmp_path):
    """Create temporary static files for testing."""
    static = tmp_path / "public"
    static.mkdir()

    (static / "style.css").write_text("body { color: red; }")
    (static / "data.bin").write_bytes(b"\x00\x01\x02\x03")
    (static / "index.html").write_text("<h1>Home</h1>")

    docs = static / "docs"
    docs.mkdir()
    (docs / "index.html").write_text("<h1>Docs</h1>")

    empty = static / "empty"
    empty.mkdir()

    (tmp_path / "secret.txt").write_text("do not serve")
    return static


def _mux(static_dir) -> RouteMux:
    mux = RouteMux(MuxConfig(access_log=False))
    mux.static("/files/", static_dir)
    return mux


class TestCleanPath:
    @pytest.mark.parametrize(
        ("raw", "cleaned"),
        [
            ("", "/"),
            ("a/b/c", "/a/b/c"),
            ("/a/./b", "/a/b"),
            ("a/b/../c", "/a/c"),
            ("../../etc/passwd", "/etc/passwd"),
            ("/../..", "/"),
            ("//double//slash/", "/double/slash"),
        ],
    )
    def test_clean_path(self, raw: str, cleaned: str) -> None:
        assert clean_path(raw) == cleaned

    def test_join_cannot_escape(self) -> None:
        joined = clean_join("/srv/public", "/files/../../etc/passwd")
        assert str(joined) == "/srv/public/etc/passwd"

    def test_join_root(self) -> None:
        assert str(clean_join("/srv/public", "..")) == "/srv/public"


class TestStaticRoute:
    def test_registers_get_catch_all(self, static_dir) -> None:
        route = _mux(static_dir).routes[0]
        assert route.method == "GET"
        assert route.template == "/files/(?:.+)"
        assert route.params == ()

    async def test_serves_file(self, static_dir) -> None:
        response = await TestClient(_mux(static_dir)).get("/files/style.css")
        assert response.status == 200
        assert response.text == "body { color: red; }"
        assert "text/css" in (response.header("content-type") or "")
        assert response.header("content-length") == str(len("body { color: red; }"))
        assert response.header("access-control-allow-origin") == "*"
        assert response.header("last-modified")

    async def test_binary_default_content_type(self, static_dir) -> None:
        response = await TestClient(_mux(static_dir)).get("/files/data.bin")
        assert response.body == b"\x00\x01\x02\x03"
        assert response.header("content-type") == "application/octet-stream"

    async def test_directory_index(self, static_dir) -> None:
        response = await TestClient(_mux(static_dir)).get("/files/docs/")
        assert response.status == 200
        assert response.text == "<h1>Docs</h1>"

    async def test_directory_without_index(self, static_dir) -> None:
        response = await TestClient(_mux(static_dir)).get("/files/empty")
        assert response.status == 404

    async def test_missing_file(self, static_dir) -> None:
        response = await TestClient(_mux(static_dir)).get("/files/nope.txt")
        assert response.status == 404

    async def test_prefix_alone_not_matched(self, static_dir) -> None:
        response = await TestClient(_mux(static_dir)).get("/files/")
        assert response.status == 404

    async def test_traversal_stays_inside_directory(self, static_dir) -> None:
        client = TestClient(_mux(static_dir))
        response = await client.get("/files/../secret.txt")
        assert response.status == 404
        assert b"do not serve" not in response.body

        response = await client.get("/files/../../etc/passwd")
        assert response.status == 404

    async def test_traversal_resolves_inside_directory(self, static_dir) -> None:
        response = await TestClient(_mux(static_dir)).get("/files/docs/../style.css")
        assert response.status == 200
        assert response.text == "body { color: red; }"

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="needs symlinks")
    async def test_symlink_escape_refused(self, static_dir) -> None:
        (static_dir / "link.txt").symlink_to(static_dir.parent / "secret.txt")
        response = await TestClient(_mux(static_dir)).get("/files/link.txt")
        assert response.status == 404

    async def test_only_get(self, static_dir) -> None:
        response = await TestClient(_mux(static_dir)).post("/files/style.css")
        assert response.status == 404

    async def test_not_modified(self, static_dir) -> None:
        future = format_datetime(datetime(2100, 1, 1, tzinfo=UTC), usegmt=True)
        response = await TestClient(_mux(static_dir)).get(
            "/files/style.css", headers={"If-Modified-Since": future}
        )
        assert response.status == 304
        assert response.body == b""

    async def test_modified_since_old_date(self, static_dir) -> None:
        past = format_datetime(datetime(2000, 1, 1, tzinfo=UTC), usegmt=True)
        response = await TestClient(_mux(static_dir)).get(
            "/files/style.css", headers={"If-Modified-Since": past}
        )
        assert response.status == 200

    async def test_garbage_if_modified_since(self, static_dir) -> None:
        response = await TestClient(_mux(static_dir)).get(
            "/files/style.css", headers={"If-Modified-Since": "yesterday"}
        )
        assert response.status == 200

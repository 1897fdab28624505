"""Users — a small JSON/XML API on routemux.

Demonstrates path parameters with inline patterns, registration order as
match priority, content negotiation, and a static directory.

Run with any ASGI server, pointing it at ``app:mux``.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from routemux import MuxConfig, RouteMux, serve_formatted
from routemux.http.response import http_error

logging.basicConfig(level=logging.INFO, format="%(message)s")


@dataclass
class User:
    id: int
    name: str


USERS = {1: User(1, "ada"), 2: User(2, "grace")}

mux = RouteMux(MuxConfig(access_control_origin="*"))


@mux.route("/users")
def list_users(w, r):
    serve_formatted(w, r, list(USERS.values()))


@mux.route("/users/me")
def me(w, r):
    serve_formatted(w, r, USERS[1])


@mux.route("/users/:id([0-9]+)")
def show_user(w, r):
    user = USERS.get(int(r.query["id"]))
    if user is None:
        http_error(w, "no such user", 404)
        return
    serve_formatted(w, r, user)


@mux.route("/users/:id([0-9]+)", method="DELETE")
def delete_user(w, r):
    USERS.pop(int(r.query["id"]), None)
    w.write_header(204)


mux.static("/assets/", Path(__file__).parent / "assets")

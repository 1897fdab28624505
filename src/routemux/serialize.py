"""Serialization helpers — write a resource as JSON or XML.

Boundary utilities for handlers, not part of the router itself. A value
that cannot be serialized is reported to the client as a 500 carrying
the error text.

Usage::

    def get_user(w, r):
        user = users[r.query["id"]]
        serve_formatted(w, r, user)
"""

import dataclasses
import json as json_module
from collections.abc import Mapping
from typing import Any
from xml.etree import ElementTree

from routemux.http.request import Request
from routemux.http.response import ResponseWriter, http_error

APPLICATION_JSON = "application/json"
APPLICATION_XML = "application/xml"
TEXT_XML = "text/xml"

XML_CONTENT_TYPE = "text/xml; charset=utf-8"


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def _xml_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _build_element(tag: str, value: Any) -> ElementTree.Element:
    element = ElementTree.Element(tag)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    match value:
        case None:
            pass
        case Mapping():
            for key, item in value.items():
                element.append(_build_element(str(key), item))
        case str() | bytes() | int() | float():
            element.text = value.decode() if isinstance(value, bytes) else _xml_scalar(value)
        case list() | tuple() | set() | frozenset():
            for item in value:
                element.append(_build_element("item", item))
        case _:
            msg = f"xml: unsupported type: {type(value).__name__}"
            raise TypeError(msg)
    return element


def to_xml(value: Any, *, root: str | None = None) -> bytes:
    """Serialize *value* to XML bytes.

    Dataclass instances use their class name as the root element; other
    values use *root* (default ``response``).
    """
    if root is None:
        root = type(value).__name__ if dataclasses.is_dataclass(value) else "response"
    element = _build_element(root, value)
    return ElementTree.tostring(element, encoding="utf-8", xml_declaration=False)


def serve_json(writer: ResponseWriter, value: Any) -> None:
    """Reply with an indented JSON representation of *value*."""
    try:
        content = json_module.dumps(value, indent=2, default=_json_default)
    except (TypeError, ValueError) as exc:
        http_error(writer, str(exc), 500)
        return
    writer.headers.set("Content-Type", APPLICATION_JSON)
    writer.write(content.encode("utf-8"))


def serve_xml(writer: ResponseWriter, value: Any, *, root: str | None = None) -> None:
    """Reply with an XML representation of *value*."""
    try:
        content = to_xml(value, root=root)
    except (TypeError, ValueError) as exc:
        http_error(writer, str(exc), 500)
        return
    writer.headers.set("Content-Type", XML_CONTENT_TYPE)
    writer.write(content)


def preferred_format(accept: str | None) -> str:
    """Pick ``APPLICATION_JSON`` or ``APPLICATION_XML`` for an Accept header.

    The first JSON or XML media range listed wins; anything else means JSON.
    """
    for media_range in (accept or "").split(","):
        media_type = media_range.split(";", 1)[0].strip().lower()
        if media_type == APPLICATION_JSON:
            return APPLICATION_JSON
        if media_type in (APPLICATION_XML, TEXT_XML):
            return APPLICATION_XML
    return APPLICATION_JSON


def serve_formatted(writer: ResponseWriter, request: Request, value: Any) -> None:
    """Reply with *value* in the format the client asked for in ``Accept``."""
    if preferred_format(request.headers.get("accept")) == APPLICATION_XML:
        serve_xml(writer, value)
    else:
        serve_json(writer, value)

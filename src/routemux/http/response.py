"""Response writing — the sink handlers write to, and the wrapper that watches it.

Handlers receive an object implementing ``ResponseWriter`` and produce the
response imperatively: set headers, optionally ``write_header(status)``,
then ``write(body)``.

``ASGIResponseWriter`` is the sink bound to an ASGI ``send`` callable.
``ResponseWrapper`` sits in front of it for the lifetime of one request,
records whether anything was produced (``started``, ``size``, ``status``)
and stamps ``Content-Length`` / ``Access-Control-Allow-Origin`` on every
write.
"""

import logging
from typing import Protocol, runtime_checkable

from routemux._internal.asgi import Send
from routemux.http.headers import MutableHeaders

logger = logging.getLogger("routemux.server")


@runtime_checkable
class ResponseWriter(Protocol):
    """The capability set every response sink provides."""

    @property
    def headers(self) -> MutableHeaders: ...

    def write(self, data: bytes) -> int: ...

    def write_header(self, status: int) -> None: ...


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


class ASGIResponseWriter:
    """Response sink that turns writes into ASGI messages.

    The status line and headers are committed on the first body write, or
    when the exchange is flushed if nothing was written. Header changes
    after the commit do not reach the wire. Once a ``Content-Length`` is
    committed, bytes written beyond it are dropped. Messages are sent by
    ``flush()``, once the handler has returned.
    """

    __slots__ = (
        "_body",
        "_committed",
        "_declared",
        "_flushed",
        "_head",
        "_headers",
        "_send",
        "_status",
        "_written",
    )

    def __init__(self, send: Send, *, head: bool = False) -> None:
        self._send = send
        self._head = head
        self._flushed = False
        self.reset()

    def reset(self) -> None:
        """Discard the status, headers and body buffered so far."""
        if self._flushed:
            msg = "Cannot reset a response that has already been sent"
            raise RuntimeError(msg)
        self._headers = MutableHeaders()
        self._committed: MutableHeaders | None = None
        self._declared: int | None = None
        self._status: int | None = None
        self._body: list[bytes] = []
        self._written = 0

    @property
    def headers(self) -> MutableHeaders:
        return self._headers

    @property
    def status(self) -> int | None:
        return self._status

    @property
    def committed(self) -> bool:
        return self._committed is not None

    def write_header(self, status: int) -> None:
        if self._status is not None:
            logger.warning(
                "superfluous write_header(%d): status %d already set", status, self._status
            )
            return
        self._status = status

    def write(self, data: bytes) -> int:
        if self._status is None:
            self._status = 200
        if self._committed is None:
            self._committed = self._headers.copy()
            length = self._committed.get("Content-Length")
            if length is not None and length.isdigit():
                self._declared = int(length)
        if self._declared is not None and self._written + len(data) > self._declared:
            accepted = max(self._declared - self._written, 0)
            logger.warning(
                "write of %d bytes exceeds declared Content-Length %d; dropped %d",
                len(data),
                self._declared,
                len(data) - accepted,
            )
            data = data[:accepted]
        self._written += len(data)
        if data and not self._head and _body_allowed(self._status):
            self._body.append(bytes(data))
        return len(data)

    async def flush(self) -> None:
        """Send the response start and body messages. Idempotent."""
        if self._flushed:
            return
        self._flushed = True
        status = self._status if self._status is not None else 200
        headers = self._committed if self._committed is not None else self._headers
        await self._send(
            {
                "type": "http.response.start",
                "status": status,
                "headers": headers.raw,
            }
        )
        await self._send(
            {
                "type": "http.response.body",
                "body": b"".join(self._body),
            }
        )


class ResponseWrapper:
    """Observes one response exchange and normalises its headers.

    ``started`` flips to True on the first ``write`` or ``write_header``
    and never goes back. The dispatcher uses it to decide whether the
    not-found fallback is needed.
    """

    __slots__ = ("_writer", "allow_origin", "size", "started", "status")

    def __init__(self, writer: ResponseWriter, *, allow_origin: str = "*") -> None:
        self._writer = writer
        self.allow_origin = allow_origin
        self.started = False
        self.size = 0
        self.status = 0

    @property
    def headers(self) -> MutableHeaders:
        return self._writer.headers

    def write(self, data: bytes) -> int:
        self.size = len(data)
        self.started = True
        if self.status == 0:
            # no explicit status: the sink answers 200
            self.status = 200
        self.headers.set("Content-Length", str(self.size))
        self.headers.set("Access-Control-Allow-Origin", self.allow_origin)
        return self._writer.write(data)

    def write_header(self, status: int) -> None:
        # the sink keeps the first status; so does the log
        if self.status == 0:
            self.status = status
        self.started = True
        self.headers.set("Content-Length", "0")
        self.headers.set("Access-Control-Allow-Origin", self.allow_origin)
        self._writer.write_header(status)


def http_error(writer: ResponseWriter, message: str, status: int) -> None:
    """Reply with a plain-text error body (the message plus a newline)."""
    writer.headers.delete("Content-Length")
    writer.headers.set("Content-Type", "text/plain; charset=utf-8")
    writer.headers.set("X-Content-Type-Options", "nosniff")
    writer.write_header(status)
    writer.write(f"{message}\n".encode())


def not_found(writer: ResponseWriter) -> None:
    """Reply with the standard 404 response."""
    http_error(writer, "404 page not found", 404)

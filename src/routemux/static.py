"""Static file serving.

``serve_file`` answers a request with the contents of one file.
``serve_directory`` maps a URL path onto a directory first, cleaning the
path so the request can never resolve outside that directory.

Security: the URL path is normalised lexically (``..`` cannot climb above
``/``) before it is joined to the directory, and the joined path is then
resolved and checked to still be inside the directory, so symlinks cannot
escape it either.
"""

import mimetypes
import posixpath
from datetime import UTC, datetime
from email.utils import format_datetime, parsedate_to_datetime
from pathlib import Path

import anyio

from routemux.http.request import Request
from routemux.http.response import ResponseWriter, not_found


def clean_path(url_path: str) -> str:
    """Return the shortest equivalent of *url_path*, rooted at ``/``.

    ``..`` elements that would climb above the root are dropped::

        clean_path("a/b/../c")            -> "/a/c"
        clean_path("/../../etc/passwd")   -> "/etc/passwd"
    """
    cleaned = posixpath.normpath("/" + url_path)
    # normpath preserves a leading "//"
    return "/" + cleaned.lstrip("/")


def clean_join(directory: str | Path, url_path: str) -> Path:
    """Join a cleaned *url_path* under *directory*."""
    relative = clean_path(url_path).lstrip("/")
    root = Path(directory)
    return root / relative if relative else root


def _not_modified(header: str, last_modified: datetime) -> bool:
    try:
        since = parsedate_to_datetime(header)
    except (TypeError, ValueError):
        return False
    if since.tzinfo is None:
        since = since.replace(tzinfo=UTC)
    return last_modified <= since


async def serve_file(
    writer: ResponseWriter,
    request: Request,
    path: str | Path,
    *,
    index: str = "index.html",
) -> None:
    """Reply with the contents of *path*.

    Directories serve their *index* file. Missing files and anything that
    is not a regular file get the standard 404.
    """
    file_path = anyio.Path(path)
    if await file_path.is_dir():
        file_path = file_path / index
    if not await file_path.is_file():
        not_found(writer)
        return

    stat = await file_path.stat()
    last_modified = datetime.fromtimestamp(int(stat.st_mtime), tz=UTC)

    if_modified_since = request.headers.get("if-modified-since")
    if if_modified_since and _not_modified(if_modified_since, last_modified):
        writer.write_header(304)
        return

    content_type, _ = mimetypes.guess_type(str(file_path))
    writer.headers.set("Content-Type", content_type or "application/octet-stream")
    writer.headers.set("Last-Modified", format_datetime(last_modified, usegmt=True))
    writer.write(await file_path.read_bytes())


async def serve_directory(
    writer: ResponseWriter,
    request: Request,
    directory: str | Path,
    url_path: str,
    *,
    index: str = "index.html",
) -> None:
    """Serve *url_path* from inside *directory*."""
    root = Path(await anyio.Path(directory).resolve())
    target = Path(await anyio.Path(clean_join(root, url_path)).resolve())
    if not target.is_relative_to(root):
        not_found(writer)
        return
    await serve_file(writer, request, target, index=index)

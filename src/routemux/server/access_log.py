"""Access log line, modeled after the nginx/Apache combined log format.

    127.0.0.1:50412 - - [16/Oct/2026:09:14:03 +0000] "GET /user/42 HTTP/1.1" 200 7 "-" "curl/8.5"

The format is fixed so log scrapers can rely on it.
"""

import logging
from datetime import datetime

from routemux.http.request import Request
from routemux.http.response import ResponseWrapper

LOG_FORMAT = '%s - - [%s] "%s %s %s" %d %d "%s" "%s"'

TIME_FORMAT = "%d/%b/%Y:%H:%M:%S %z"


def log_access(
    logger: logging.Logger,
    request: Request,
    writer: ResponseWrapper,
    *,
    now: datetime | None = None,
) -> None:
    """Emit one access-log line for a completed request at INFO."""
    timestamp = (now or datetime.now().astimezone()).strftime(TIME_FORMAT)
    logger.info(
        LOG_FORMAT,
        request.remote_addr,
        timestamp,
        request.method,
        request.path,
        request.protocol,
        writer.status,
        writer.size,
        request.referer,
        request.user_agent,
    )

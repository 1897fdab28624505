"""Router configuration.

MuxConfig is a frozen dataclass, immutable after creation.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MuxConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = MuxConfig(access_log=False, access_control_origin="https://example.com")
    """

    # Access log: one line per request on the ``logger_name`` logger
    access_log: bool = True
    logger_name: str = "routemux.access"

    # Value stamped into Access-Control-Allow-Origin on every write
    access_control_origin: str = "*"

    # Static directories
    static_index: str = "index.html"

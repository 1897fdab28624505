"""routemux exception hierarchy.

Shared across the pattern compiler, the route table, the dispatcher and the
boundary helpers so every module raises and catches the same types.
"""


class RoutemuxError(Exception):
    """Base for all routemux-specific errors."""


class ConfigurationError(RoutemuxError):
    """Raised when the route table is configured incorrectly.

    Registration happens before serving begins, so these surface at
    startup and the process owner decides whether to abort.
    """


class PatternError(ConfigurationError):
    """A route template could not be compiled into a usable pattern."""

    def __init__(self, template: str, reason: str) -> None:
        self.template = template
        self.reason = reason
        super().__init__(f"Invalid route template {template!r}: {reason}")


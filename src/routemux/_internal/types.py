"""Shared type aliases used across routemux modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler, called as handler(writer, request), sync or async
Handler: TypeAlias = Callable[..., Any]

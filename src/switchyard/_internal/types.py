"""Shared type aliases used across switchyard modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route or global handler — receives a Context, returns a response value or None
Handler: TypeAlias = Callable[..., Any]

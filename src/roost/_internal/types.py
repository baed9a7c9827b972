"""Shared type aliases used across roost modules."""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from roost.http.request import Request

# Endpoint handler — receives the immutable request view, returns a serializable value
Handler: TypeAlias = Callable[["Request"], Any]

# Metrics producer — zero-argument callable evaluated on every /metrics request
Producer: TypeAlias = Callable[[], Any]

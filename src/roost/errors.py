"""Roost exception hierarchy.

Shared across the router, metrics registry, request pipeline, and listener
so every module raises and catches the same types.
"""

from dataclasses import dataclass


class RoostError(Exception):
    """Base for all roost-specific errors."""


class ConfigurationError(RoostError):
    """Raised when an endpoint, metric path, or server setting is invalid.

    Raised at registration time, never while serving a request.
    """


class BindError(RoostError):
    """Raised by ``RestServer.start()`` when the listening socket cannot be bound.

    The underlying ``OSError`` is chained as ``__cause__``. The server stays
    stopped after a failed start.
    """

    def __init__(self, host: str, port: int, reason: str = "") -> None:
        self.host = host
        self.port = port
        self.reason = reason
        message = f"Cannot bind {host}:{port}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class HTTPError(RoostError):
    """An error that maps directly to an HTTP status code.

    Handlers raise it to answer with a specific status. The request
    pipeline turns it into an empty-bodied response with that status.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — the handler has nothing to return for this request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)

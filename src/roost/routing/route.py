"""Endpoint frozen dataclass."""

from dataclasses import dataclass

from roost._internal.types import Handler
from roost.http.methods import HttpMethod


@dataclass(frozen=True, slots=True)
class Endpoint:
    """A routable (path, method) pair bound to a handler.

    Identity for matching purposes is the (path, method) pair; the
    handler is compared by reference only when checking for shadowing.
    """

    path: str
    method: HttpMethod
    handler: Handler

    @property
    def key(self) -> tuple[str, HttpMethod]:
        return (self.path, self.method)

    def matches(self, path: str, method: str) -> bool:
        """Exact, case-sensitive match on both path and method."""
        return self.path == path and self.method.value == method

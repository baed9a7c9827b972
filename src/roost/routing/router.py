"""Ordered endpoint table.

Lookup is a linear scan in registration order: the first endpoint whose
path and method both equal the request's wins. Duplicate registrations
are accepted but can never be reached, so they are reported when added.
"""

import logging
import threading
from collections.abc import Iterator

from roost._internal.types import Handler
from roost.errors import ConfigurationError
from roost.http.methods import HttpMethod
from roost.routing.route import Endpoint

logger = logging.getLogger("roost.routing")


class EndpointTable:
    """Append-only list of endpoints with first-match lookup.

    Usage::

        table = EndpointTable()
        table.add("/hello", HttpMethod.GET, lambda request: {"message": "hi"})
        endpoint = table.match("/hello", "GET")

    Thread safety:
        Registration and lookup share a lock so endpoints can be added
        while the listener is already serving.
    """

    __slots__ = ("_endpoints", "_lock")

    def __init__(self) -> None:
        self._endpoints: list[Endpoint] = []
        self._lock = threading.Lock()

    def add(self, path: str, method: HttpMethod | str, handler: Handler) -> Endpoint:
        """Append an endpoint and return it.

        Raises ``ConfigurationError`` for a path without a leading ``/``,
        an unroutable method, or a non-callable handler.
        """
        if not path.startswith("/"):
            msg = f"Endpoint path must start with '/', got {path!r}"
            raise ConfigurationError(msg)
        if not callable(handler):
            msg = f"Handler for {path!r} is not callable: {handler!r}"
            raise ConfigurationError(msg)

        endpoint = Endpoint(path=path, method=HttpMethod.parse(method), handler=handler)
        with self._lock:
            if any(existing.key == endpoint.key for existing in self._endpoints):
                logger.warning(
                    "Endpoint %s %s is already registered; the new handler %r is shadowed",
                    endpoint.method.value,
                    endpoint.path,
                    handler,
                )
            self._endpoints.append(endpoint)
        return endpoint

    def match(self, path: str, method: str) -> Endpoint | None:
        """Return the first endpoint registered for (*path*, *method*), or ``None``."""
        with self._lock:
            for endpoint in self._endpoints:
                if endpoint.matches(path, method):
                    return endpoint
        return None

    @property
    def endpoints(self) -> tuple[Endpoint, ...]:
        """Snapshot of all endpoints in registration order."""
        with self._lock:
            return tuple(self._endpoints)

    def __iter__(self) -> Iterator[Endpoint]:
        return iter(self.endpoints)

    def __len__(self) -> int:
        with self._lock:
            return len(self._endpoints)

"""Immutable HTTP request.

Frozen metadata plus the already-read body. The request is honest about
what it is: received data that doesn't change.
"""

from __future__ import annotations

import json as json_module
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from roost.http.headers import Headers
from roost.http.query import QueryString


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request, as handed to endpoint handlers.

    The listener reads the full body (bounded by ``Content-Length``) before
    dispatch, so body accessors are plain synchronous calls.
    """

    method: str
    path: str
    headers: Headers
    query: QueryString
    body: bytes = b""
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @property
    def url(self) -> str:
        """Request path plus query string."""
        if self.query.raw:
            return f"{self.path}?{self.query.raw}"
        return self.path

    # -- Body access --

    def text(self) -> str:
        """Decode the body as UTF-8."""
        return self.body.decode("utf-8")

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(self.body)

    # -- Factory --

    @classmethod
    def from_target(
        cls,
        method: str,
        target: str,
        *,
        headers: Headers | None = None,
        body: bytes = b"",
        http_version: str = "1.1",
        client: tuple[str, int] | None = None,
    ) -> Request:
        """Create a Request from a request-line target such as ``/a/b?x=1``.

        Absolute-form targets (``http://host/a``) are reduced to their path.
        The method is kept exactly as sent; routing compares it case-sensitively.
        """
        parts = urlsplit(target)
        return cls(
            method=method,
            path=parts.path or "/",
            headers=headers or Headers(),
            query=QueryString(parts.query),
            body=body,
            http_version=http_version,
            client=client,
        )

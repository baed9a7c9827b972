"""Per-connection HTTP parsing on top of ``http.server``.

``BaseHTTPRequestHandler`` reads and validates the request line and
headers; every method, known or not, is then routed to the roost
pipeline, so unroutable methods get the same CORS-decorated 404 as any
other miss. One request per connection: HTTP/1.0 semantics, the
connection is closed after the response.
"""

import logging
import socket
from collections.abc import Callable
from http.server import BaseHTTPRequestHandler
from typing import Any

from roost.http.headers import Headers
from roost.http.request import Request
from roost.http.response import Response
from roost.server.sender import send_response

logger = logging.getLogger("roost.server")

Dispatch = Callable[[Request], Response]
Reject = Callable[[int], Response]


class ConnectionHandler(BaseHTTPRequestHandler):
    """Serves exactly one request on an accepted socket.

    Construction runs the whole exchange (``setup`` → ``handle`` →
    ``finish``), the way ``socketserver`` request handlers do.
    """

    protocol_version = "HTTP/1.0"
    server_version = "roost"

    def __init__(
        self,
        conn: socket.socket,
        client_address: Any,
        *,
        dispatch: Dispatch,
        reject: Reject | None = None,
        timeout: float | None = None,
        max_body_size: int | None = None,
    ) -> None:
        self._dispatch = dispatch
        self._reject = reject or Response.empty
        self.max_body_size = max_body_size
        self.timeout = timeout
        super().__init__(conn, client_address, None)  # type: ignore[arg-type]

    def __getattr__(self, name: str) -> Any:
        # http.server looks up ``do_<METHOD>``; answer every method.
        if name.startswith("do_"):
            return self._serve
        raise AttributeError(name)

    def _serve(self) -> None:
        size = self._body_size()
        if self.max_body_size is not None and size > self.max_body_size:
            # Refused before reading; the body is never buffered.
            logger.warning(
                "413 %s %s: Content-Length %d exceeds %d",
                self.command,
                self.path,
                size,
                self.max_body_size,
            )
            send_response(self, self._reject(413))
            return
        request = Request.from_target(
            self.command,
            self.path,
            headers=Headers(self.headers.items()),
            body=self.rfile.read(size) if size else b"",
            http_version=self.request_version.removeprefix("HTTP/"),
            client=tuple(self.client_address[:2]) if self.client_address else None,
        )
        send_response(self, self._dispatch(request))

    def _body_size(self) -> int:
        """Declared Content-Length; missing, malformed or negative counts as 0."""
        length = self.headers.get("Content-Length")
        if not length:
            return 0
        try:
            return max(int(length), 0)
        except ValueError:
            return 0

    def log_request(self, code: int | str = "-", size: int | str = "-") -> None:
        logger.debug('"%s" %s %s', self.requestline, code, size)

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        logger.info("%s - %s", self.address_string(), format % args)

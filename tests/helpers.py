"""Helpers for live-socket tests."""

import http.client
import socket
from dataclasses import dataclass

from roost.config import ServerConfig


def local_config(**overrides: object) -> ServerConfig:
    """Loopback, ephemeral port, fast stop polling."""
    options: dict[str, object] = {
        "host": "127.0.0.1",
        "port": 0,
        "poll_interval": 0.05,
        "connection_timeout": 5.0,
    }
    options.update(overrides)
    return ServerConfig(**options)  # type: ignore[arg-type]


@dataclass
class WireResponse:
    status: int
    headers: dict[str, str]
    body: bytes


def fetch(
    port: int,
    path: str,
    method: str = "GET",
    *,
    body: bytes | None = None,
    headers: dict[str, str] | None = None,
    timeout: float = 5.0,
) -> WireResponse:
    """Perform one real HTTP request against 127.0.0.1:*port*."""
    conn = http.client.HTTPConnection("127.0.0.1", port, timeout=timeout)
    try:
        conn.request(method, path, body=body, headers=headers or {})
        response = conn.getresponse()
        return WireResponse(
            status=response.status,
            headers={name.lower(): value for name, value in response.getheaders()},
            body=response.read(),
        )
    finally:
        conn.close()


def raw_exchange(port: int, data: bytes, timeout: float = 5.0) -> bytes:
    """Send *data* verbatim and return everything the server writes back."""
    with socket.create_connection(("127.0.0.1", port), timeout=timeout) as sock:
        sock.sendall(data)
        chunks = []
        while chunk := sock.recv(4096):
            chunks.append(chunk)
    return b"".join(chunks)

"""Response sending — writes a roost Response through a request handler.

Status line, headers and body are written in one go after the pipeline
has produced the complete response, so nothing partial ever reaches the
client.
"""

from http.server import BaseHTTPRequestHandler

from roost.http.response import Response


def _body_allowed(status: int, method: str) -> bool:
    """Whether a response to *method* with *status* may carry a body."""
    # RFC: 1xx, 204, and 304 responses and answers to HEAD carry no body.
    if method == "HEAD":
        return False
    return not (100 <= status < 200 or status in {204, 304})


def send_response(handler: BaseHTTPRequestHandler, response: Response) -> None:
    """Translate a roost Response into status line, headers, and body."""
    body = response.body_bytes if _body_allowed(response.status, handler.command) else b""

    handler.send_response(response.status)
    for name, value in response.headers:
        handler.send_header(name, value)
    if response.content_type is not None:
        handler.send_header("Content-Type", response.content_type)
    handler.send_header("Content-Length", str(len(body)))
    handler.send_header("Connection", "close")
    handler.end_headers()

    if body:
        handler.wfile.write(body)
    handler.wfile.flush()

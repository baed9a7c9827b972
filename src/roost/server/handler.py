"""Request pipeline — turns a Request into a Response.

The only component that decides status codes. Pure with respect to the
network: the listener feeds it parsed requests and writes back whatever
it returns, and the test client calls it directly.

Order of operations:

1. ``OPTIONS`` → 200, empty body, no routing lookup.
2. Exact (path, method) lookup; a miss → 404, empty body.
3. Handler call, then JSON serialization. Both happen before anything is
   written, so a failure in either yields a clean 500 with no partial body.
4. CORS headers are added to every outcome.

Requests the listener refuses before dispatch (an oversized body) are
answered with ``error_response`` so they carry the same headers.
"""

import logging

from roost.errors import HTTPError
from roost.http.request import Request
from roost.http.response import Response
from roost.middleware.cors import CORSPolicy
from roost.routing.route import Endpoint
from roost.routing.router import EndpointTable
from roost.serializer import to_json

logger = logging.getLogger("roost.server")


def handle_request(request: Request, *, endpoints: EndpointTable, cors: CORSPolicy) -> Response:
    """Process a single request through the full pipeline."""
    if cors.is_preflight(request):
        return cors.preflight_response()

    endpoint = endpoints.match(request.path, request.method)
    if endpoint is None:
        return error_response(404, cors=cors)

    try:
        response = _invoke_handler(endpoint, request)
    except HTTPError as exc:
        logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)
        response = Response.empty(exc.status)
    except Exception:
        logger.exception("500 %s %s", request.method, request.path)
        response = Response.empty(500)

    return cors.apply(response)


def _invoke_handler(endpoint: Endpoint, request: Request) -> Response:
    """Call the endpoint handler and encode its return value.

    A ``Response`` returned by the handler is passed through untouched;
    anything else is serialized to JSON.
    """
    result = endpoint.handler(request)
    if isinstance(result, Response):
        return result
    return Response.json(to_json(result))


def error_response(status: int, *, cors: CORSPolicy) -> Response:
    """An empty-bodied *status* response with the CORS headers applied."""
    return cors.apply(Response.empty(status))

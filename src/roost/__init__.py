"""Roost — an embeddable REST router with a lazily evaluated metrics tree.

Serves JSON from plain callables, one request at a time, with permissive
CORS on every response.

Basic usage::

    from roost import RestAPI, ServerConfig

    api = RestAPI(ServerConfig(name="europe01", port=8080))
    api.register_metric("players/online", lambda: len(sessions))

    @api.route("/hello")
    def hello(request):
        return {"message": "Hello, World!"}

    api.start()
"""

__version__ = "0.1.0"
__all__ = [
    "BindError",
    "CORSConfig",
    "ConfigurationError",
    "HTTPError",
    "HttpMethod",
    "MetricsRegistry",
    "NotFound",
    "Request",
    "Response",
    "RestAPI",
    "RestServer",
    "RoostError",
    "ServerConfig",
    "to_json",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import roost`` fast while providing a clean top-level API.
    """
    if name == "RestAPI":
        from roost.app import RestAPI

        return RestAPI

    if name == "RestServer":
        from roost.server.listener import RestServer

        return RestServer

    if name == "ServerConfig":
        from roost.config import ServerConfig

        return ServerConfig

    if name == "CORSConfig":
        from roost.middleware.cors import CORSConfig

        return CORSConfig

    if name == "HttpMethod":
        from roost.http.methods import HttpMethod

        return HttpMethod

    if name == "Request":
        from roost.http.request import Request

        return Request

    if name == "Response":
        from roost.http.response import Response

        return Response

    if name == "MetricsRegistry":
        from roost.metrics.registry import MetricsRegistry

        return MetricsRegistry

    if name == "to_json":
        from roost.serializer import to_json

        return to_json

    if name in ("BindError", "ConfigurationError", "HTTPError", "NotFound", "RoostError"):
        from roost import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

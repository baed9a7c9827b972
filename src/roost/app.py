"""RestAPI — a RestServer wired to a metrics registry.

The host constructs one RestAPI, registers its metrics and extra
endpoints, then starts it. Code that needs to add metrics is handed the
instance; there is no process-wide accessor.
"""

from collections.abc import Callable
from types import TracebackType
from typing import Any

from roost._internal.types import Handler, Producer
from roost.config import ServerConfig
from roost.http.methods import HttpMethod
from roost.http.request import Request
from roost.metrics.info import host_info_producer
from roost.metrics.registry import MetricsRegistry
from roost.middleware.cors import CORSConfig
from roost.routing.route import Endpoint
from roost.server.listener import RestServer


class RestAPI:
    """REST API exposing a lazily evaluated metrics tree at ``/metrics``.

    Usage::

        api = RestAPI(ServerConfig(name="europe01", port=8080))
        api.register_metric("uptime", lambda: time.monotonic() - started)
        api.register_metric("enemies/zombies", lambda: len(zombies))
        api.start()

    ``GET /metrics`` then answers::

        {"europe01": {"info": {...}, "uptime": 12.5, "enemies": {"zombies": 3}}}

    A RestAPI that is never started is inert: registration works, no
    socket is opened.
    """

    __slots__ = ("config", "metrics", "server")

    def __init__(
        self,
        config: ServerConfig | None = None,
        *,
        cors: CORSConfig | None = None,
        info_producer: Producer | None = None,
    ) -> None:
        self.config: ServerConfig = config or ServerConfig()
        self.server = RestServer(self.config, cors=cors)
        self.metrics = MetricsRegistry()

        self.server.add_endpoint(self.config.metrics_path, HttpMethod.GET, self._metrics_handler)
        if self.config.info_metric:
            self.metrics.register(
                self.config.info_metric,
                info_producer or host_info_producer(self.config.project, self.config.name),
            )

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def is_running(self) -> bool:
        return self.server.is_running

    # -- Registration --

    def register_metric(self, path: str, producer: Producer) -> None:
        """Register *producer* under the slash-delimited *path*.

        Re-registering a path replaces whatever was there.
        """
        self.metrics.register(path, producer)

    def metric(self, path: str) -> Callable[[Producer], Producer]:
        """Decorator form of ``register_metric``::

            @api.metric("players/online")
            def players_online():
                return len(sessions)
        """

        def decorator(producer: Producer) -> Producer:
            self.register_metric(path, producer)
            return producer

        return decorator

    def add_endpoint(self, path: str, method: HttpMethod | str, handler: Handler) -> Endpoint:
        """Bind *handler* to (*path*, *method*) on the underlying server."""
        return self.server.add_endpoint(path, method, handler)

    def route(
        self, path: str, method: HttpMethod | str = HttpMethod.GET
    ) -> Callable[[Handler], Handler]:
        """Decorator form of ``add_endpoint``."""

        def decorator(handler: Handler) -> Handler:
            self.add_endpoint(path, method, handler)
            return handler

        return decorator

    # -- Metrics --

    def collect(self) -> dict[str, Any]:
        """Evaluate every producer now and wrap the tree under the server name."""
        return {self.config.name: self.metrics.evaluate()}

    def _metrics_handler(self, request: Request) -> dict[str, Any]:
        return self.collect()

    # -- Lifecycle --

    def start(self) -> None:
        self.server.start()

    def stop(self) -> None:
        self.server.stop()

    def __enter__(self) -> "RestAPI":
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()

"""CORS policy.

Every response the server writes carries the same three CORS headers,
whatever the outcome of routing: success, miss, handler error, or
preflight. Preflight ``OPTIONS`` requests are answered here without
consulting the endpoint table.
"""

from dataclasses import dataclass, replace

from roost.http.request import Request
from roost.http.response import Response


@dataclass(frozen=True, slots=True)
class CORSConfig:
    """CORS header values.

    The defaults open the API to any origin for the four routable
    methods plus preflight::

        CORSConfig(allow_headers=("Content-Type", "Authorization"))
    """

    allow_origin: str = "*"
    allow_methods: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
    allow_headers: tuple[str, ...] = ("Content-Type", "Accept", "X-Requested-With")


class CORSPolicy:
    """Unconditional CORS headers plus the preflight short-circuit.

    Usage::

        cors = CORSPolicy()
        if cors.is_preflight(request):
            return cors.preflight_response()
        ...
        return cors.apply(response)
    """

    __slots__ = ("config", "headers")

    def __init__(self, config: CORSConfig | None = None) -> None:
        self.config = config or CORSConfig()
        cfg = self.config
        self.headers: tuple[tuple[str, str], ...] = (
            ("Access-Control-Allow-Origin", cfg.allow_origin),
            ("Access-Control-Allow-Methods", ", ".join(cfg.allow_methods)),
            ("Access-Control-Allow-Headers", ", ".join(cfg.allow_headers)),
        )

    @staticmethod
    def is_preflight(request: Request) -> bool:
        return request.method == "OPTIONS"

    def preflight_response(self) -> Response:
        """200 with an empty body and the CORS headers."""
        return self.apply(Response.empty(200))

    def apply(self, response: Response) -> Response:
        """Return *response* with the CORS headers prepended."""
        return replace(response, headers=(*self.headers, *response.headers))

"""Server configuration.

ServerConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Server configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ServerConfig(name="europe02", port=9090)
    """

    # Listener
    host: str = "0.0.0.0"
    port: int = 8080  # 0 = ephemeral port, see RestServer.port
    backlog: int = 16

    # Identity — ``name`` is the top-level key of the /metrics document
    name: str = "europe01"
    project: str = "roost"

    # Metrics
    metrics_path: str = "/metrics"
    info_metric: str = "info"

    # Timeouts (seconds)
    connection_timeout: float | None = 30.0  # Read timeout on accepted sockets
    poll_interval: float = 0.5  # How often a blocked accept re-checks the stop flag

    # Requests
    max_body_size: int | None = 1024 * 1024  # Larger Content-Length is answered 413; None = no cap

    # Logging
    log_level: str = "info"

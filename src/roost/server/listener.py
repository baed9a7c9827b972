"""RestServer — binds a port and serves requests one at a time.

One accept thread per server, owned by the server. Each accepted
connection is handled to completion on that thread before the next
accept, so requests are strictly sequential: a slow handler delays
every request queued behind it.

Shutdown closes the listening socket. The accept call blocked on it
then fails; the loop tells that expected failure apart from genuine
accept errors by looking at the server state.
"""

import logging
import socket
import threading
from enum import StrEnum
from types import TracebackType

from roost._internal.types import Handler
from roost.config import ServerConfig
from roost.errors import BindError
from roost.http.methods import HttpMethod
from roost.http.request import Request
from roost.http.response import Response
from roost.middleware.cors import CORSConfig, CORSPolicy
from roost.routing.route import Endpoint
from roost.routing.router import EndpointTable
from roost.server.connection import ConnectionHandler
from roost.server.handler import error_response, handle_request

logger = logging.getLogger("roost.server")


class ServerState(StrEnum):
    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"


class RestServer:
    """A minimal REST server.

    Usage::

        server = RestServer(ServerConfig(port=8080))
        server.add_endpoint("/hello", "GET", lambda request: {"message": "Hello, World!"})
        server.start()
        ...
        server.stop()

    Thread safety:
        ``start()`` and ``stop()`` may be called from any thread, including
        concurrently with the accept loop. State transitions are guarded by
        a lock; ``stop()`` unblocks a pending accept by closing the socket
        and joins the accept thread.
    """

    __slots__ = (
        "_bound_port",
        "_cors",
        "_endpoints",
        "_socket",
        "_state",
        "_state_lock",
        "_stop_requested",
        "_thread",
        "config",
    )

    def __init__(
        self,
        config: ServerConfig | None = None,
        *,
        cors: CORSConfig | None = None,
    ) -> None:
        self.config: ServerConfig = config or ServerConfig()
        self._endpoints = EndpointTable()
        self._cors = CORSPolicy(cors)
        self._state = ServerState.STOPPED
        self._state_lock = threading.Lock()
        self._stop_requested = False
        self._socket: socket.socket | None = None
        self._thread: threading.Thread | None = None
        self._bound_port: int | None = None

    # -- Introspection --

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is ServerState.RUNNING

    @property
    def port(self) -> int:
        """The bound port once started (resolves port 0), else the configured one."""
        if self._bound_port is not None:
            return self._bound_port
        return self.config.port

    @property
    def endpoints(self) -> EndpointTable:
        return self._endpoints

    # -- Registration --

    def add_endpoint(self, path: str, method: HttpMethod | str, handler: Handler) -> Endpoint:
        """Bind *handler* to (*path*, *method*).

        Duplicates are accepted; the first registration keeps answering.
        """
        return self._endpoints.add(path, method, handler)

    def dispatch(self, request: Request) -> Response:
        """Run *request* through the pipeline without touching the network."""
        return handle_request(request, endpoints=self._endpoints, cors=self._cors)

    # -- Lifecycle --

    def start(self) -> None:
        """Bind the port and launch the accept loop.

        No-op while already starting or running. Raises ``BindError`` if
        the port cannot be bound; the server then stays stopped. A
        ``stop()`` that arrives while the port is being bound is honored
        once binding finishes: the socket is closed and no loop starts.
        """
        with self._state_lock:
            if self._state is not ServerState.STOPPED:
                return
            self._state = ServerState.STARTING
            self._stop_requested = False

        try:
            sock = self._bind()
        except OSError as exc:
            with self._state_lock:
                self._state = ServerState.STOPPED
                self._stop_requested = False
            logger.error(
                "RestServer failed to bind %s:%d: %s", self.config.host, self.config.port, exc
            )
            raise BindError(self.config.host, self.config.port, str(exc)) from exc

        with self._state_lock:
            if self._stop_requested:
                self._stop_requested = False
                self._state = ServerState.STOPPED
                self._close_listener(sock)
                logger.info("RestServer stopped before it started")
                return
            self._socket = sock
            self._bound_port = sock.getsockname()[1]
            self._thread = threading.Thread(
                target=self._serve_forever,
                args=(sock,),
                name=f"roost-accept-{self._bound_port}",
                daemon=True,
            )
            self._state = ServerState.RUNNING
            self._thread.start()
        logger.info("RestServer started on port %d", self._bound_port)

    def stop(self) -> None:
        """Close the listener and wait for the accept loop to exit.

        No-op if the server is stopped or already stopping. While the
        server is starting, the stop is recorded and ``start()`` carries
        it out as soon as the bind returns.
        """
        with self._state_lock:
            if self._state is ServerState.STARTING:
                self._stop_requested = True
                return
            if self._state is not ServerState.RUNNING:
                return
            self._state = ServerState.STOPPING
            sock, thread = self._socket, self._thread

        logger.info("Stopping RestServer on port %d...", self.port)
        if sock is not None:
            self._close_listener(sock)
        if thread is not None and thread is not threading.current_thread():
            thread.join()

        with self._state_lock:
            self._socket = None
            self._thread = None
            self._state = ServerState.STOPPED

    def __enter__(self) -> "RestServer":
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()

    # -- Internals --

    def _reject(self, status: int) -> Response:
        """Answer for requests refused before dispatch."""
        return error_response(status, cors=self._cors)

    def _bind(self) -> socket.socket:
        cfg = self.config
        sock = socket.create_server((cfg.host, cfg.port), backlog=cfg.backlog)
        # A bounded accept lets the loop notice a stop even on platforms
        # where closing the socket does not wake a blocked accept().
        sock.settimeout(cfg.poll_interval)
        return sock

    @staticmethod
    def _close_listener(sock: socket.socket) -> None:
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # Listening sockets are "not connected" on some platforms.
            pass
        sock.close()

    def _serve_forever(self, sock: socket.socket) -> None:
        """The accept loop. Runs on the server-owned thread."""
        while self._state is ServerState.RUNNING:
            try:
                conn, address = sock.accept()
            except TimeoutError:
                continue
            except OSError as exc:
                if self._state is not ServerState.RUNNING:
                    break
                if sock.fileno() == -1:
                    logger.error("RestServer error: the listener was closed unexpectedly.")
                    self._state = ServerState.STOPPED
                    break
                logger.error("RestServer error: %s", exc)
                continue

            self._process(conn, address)

        logger.info("Server stopped on port %d", self.port)

    def _process(self, conn: socket.socket, address: tuple[str, int]) -> None:
        """Serve one connection inline, then close it."""
        try:
            ConnectionHandler(
                conn,
                address,
                dispatch=self.dispatch,
                reject=self._reject,
                timeout=self.config.connection_timeout,
                max_body_size=self.config.max_body_size,
            )
        except Exception:
            logger.exception("RestServer error while serving %s", address)
        finally:
            try:
                conn.shutdown(socket.SHUT_WR)
            except OSError:
                pass  # Client already went away.
            conn.close()

"""Tests for roost.server.listener — the sequential accept loop over real sockets."""

import json
import logging
import socket
import threading
import time
from unittest.mock import patch

import pytest

from roost.app import RestAPI
from roost.errors import BindError
from roost.http.request import Request
from roost.server.listener import RestServer, ServerState
from tests.helpers import fetch, local_config, raw_exchange


class TestLifecycle:
    def test_initially_stopped(self) -> None:
        server = RestServer(local_config())
        assert server.state is ServerState.STOPPED
        assert server.is_running is False

    def test_start_binds_ephemeral_port(self) -> None:
        with RestServer(local_config()) as server:
            assert server.is_running
            assert server.port != 0

    def test_start_logs_port(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="roost.server"):
            with RestServer(local_config()) as server:
                port = server.port
        assert any(r.getMessage() == f"RestServer started on port {port}" for r in caplog.records)

    def test_double_start_binds_once(self) -> None:
        server = RestServer(local_config())
        with patch("socket.create_server", wraps=socket.create_server) as create:
            server.start()
            thread = server._thread
            server.start()
        try:
            assert create.call_count == 1
            assert server.is_running
            assert server._thread is thread
            accept_threads = [t for t in threading.enumerate() if t.name == f"roost-accept-{server.port}"]
            assert len(accept_threads) == 1
        finally:
            server.stop()

    def test_stop_never_started_is_noop(self) -> None:
        server = RestServer(local_config())
        server.stop()
        server.stop()
        assert server.state is ServerState.STOPPED

    def test_stop_terminates_loop_and_refuses_connections(self) -> None:
        server = RestServer(local_config())
        server.add_endpoint("/ping", "GET", lambda request: "pong")
        server.start()
        port = server.port
        thread = server._thread
        assert fetch(port, "/ping").status == 200

        server.stop()

        assert server.state is ServerState.STOPPED
        assert thread is not None
        assert not thread.is_alive()
        with pytest.raises(OSError):
            fetch(port, "/ping", timeout=1.0)

    def test_stop_is_quiet(self, caplog: pytest.LogCaptureFixture) -> None:
        server = RestServer(local_config())
        server.start()
        with caplog.at_level(logging.INFO, logger="roost.server"):
            server.stop()
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
        assert any("Server stopped on port" in r.getMessage() for r in caplog.records)

    def test_restart_after_stop(self) -> None:
        server = RestServer(local_config())
        server.add_endpoint("/ping", "GET", lambda request: "pong")
        server.start()
        server.stop()
        server.start()
        try:
            assert fetch(server.port, "/ping").body == b'"pong"'
        finally:
            server.stop()

    def test_stop_from_another_thread(self) -> None:
        server = RestServer(local_config())
        server.start()
        stopper = threading.Thread(target=server.stop)
        stopper.start()
        stopper.join(timeout=5)
        assert not stopper.is_alive()
        assert server.state is ServerState.STOPPED

    def test_stop_while_starting_is_honored(self) -> None:
        server = RestServer(local_config())
        bound: list[socket.socket] = []
        original_bind = RestServer._bind

        def bind_then_stop(self: RestServer) -> socket.socket:
            sock = original_bind(self)
            bound.append(sock)
            assert self.state is ServerState.STARTING
            self.stop()
            return sock

        with patch.object(RestServer, "_bind", bind_then_stop):
            server.start()

        assert server.state is ServerState.STOPPED
        assert server._thread is None
        (sock,) = bound
        assert sock.fileno() == -1

    def test_start_after_cancelled_start(self) -> None:
        server = RestServer(local_config())
        server.add_endpoint("/ping", "GET", lambda request: "pong")
        original_bind = RestServer._bind

        def bind_then_stop(self: RestServer) -> socket.socket:
            sock = original_bind(self)
            self.stop()
            return sock

        with patch.object(RestServer, "_bind", bind_then_stop):
            server.start()
        server.start()
        try:
            assert server.is_running
            assert fetch(server.port, "/ping").body == b'"pong"'
        finally:
            server.stop()

    def test_unexpected_listener_close_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        server = RestServer(local_config())
        server.start()
        thread = server._thread
        assert thread is not None and server._socket is not None
        with caplog.at_level(logging.ERROR, logger="roost.server"):
            server._socket.close()
            thread.join(timeout=5)
        assert not thread.is_alive()
        assert server.is_running is False
        assert any("closed unexpectedly" in r.getMessage() for r in caplog.records)


class TestBindError:
    def test_port_in_use(self) -> None:
        with RestServer(local_config()) as first:
            second = RestServer(local_config(port=first.port))
            with pytest.raises(BindError) as exc_info:
                second.start()
            assert isinstance(exc_info.value.__cause__, OSError)
            assert second.state is ServerState.STOPPED
            assert first.is_running


class TestWire:
    def test_metrics(self, running_api: RestAPI) -> None:
        running_api.register_metric("enemies/zombies", lambda: 3)
        response = fetch(running_api.server.port, "/metrics")
        assert response.status == 200
        assert response.headers["content-type"] == "application/json"
        assert json.loads(response.body) == {
            "test01": {"info": {"project": "test"}, "enemies": {"zombies": 3}}
        }

    def test_cors_on_every_outcome(self, running_api: RestAPI) -> None:
        running_api.add_endpoint("/boom", "GET", lambda request: 1 / 0)
        port = running_api.server.port
        for method, path, status in (
            ("GET", "/metrics", 200),
            ("OPTIONS", "/anywhere", 200),
            ("GET", "/missing", 404),
            ("PATCH", "/metrics", 404),
            ("GET", "/boom", 500),
        ):
            response = fetch(port, path, method)
            assert response.status == status
            assert response.headers["access-control-allow-origin"] == "*"
            assert response.headers["access-control-allow-methods"] == "GET, POST, PUT, DELETE, OPTIONS"
            assert (
                response.headers["access-control-allow-headers"]
                == "Content-Type, Accept, X-Requested-With"
            )

    def test_empty_bodies_have_no_content_type(self, running_api: RestAPI) -> None:
        port = running_api.server.port
        for method, path in (("OPTIONS", "/metrics"), ("GET", "/missing")):
            response = fetch(port, path, method)
            assert response.body == b""
            assert "content-type" not in response.headers

    def test_post_body_reaches_handler(self, running_api: RestAPI) -> None:
        running_api.add_endpoint("/echo", "POST", lambda request: request.json())
        response = fetch(
            running_api.server.port,
            "/echo",
            "POST",
            body=b'{"hp": 10}',
            headers={"Content-Type": "application/json"},
        )
        assert json.loads(response.body) == {"hp": 10}

    def test_error_does_not_stop_server(self, running_api: RestAPI) -> None:
        running_api.add_endpoint("/boom", "GET", lambda request: 1 / 0)
        port = running_api.server.port
        failed = fetch(port, "/boom")
        assert failed.status == 500
        assert failed.body == b""
        assert fetch(port, "/metrics").status == 200
        assert running_api.is_running

    def test_requests_are_served_sequentially(self, running_api: RestAPI) -> None:
        release = threading.Event()
        entered = threading.Event()

        def slow(request: Request) -> str:
            entered.set()
            release.wait(timeout=5)
            return "slow"

        running_api.add_endpoint("/slow", "GET", slow)
        running_api.add_endpoint("/fast", "GET", lambda request: "fast")
        port = running_api.server.port
        results: dict[str, bytes] = {}

        def call(path: str) -> None:
            results[path] = fetch(port, path).body

        slow_thread = threading.Thread(target=call, args=("/slow",))
        slow_thread.start()
        assert entered.wait(timeout=5)
        fast_thread = threading.Thread(target=call, args=("/fast",))
        fast_thread.start()

        time.sleep(0.3)
        assert "/fast" not in results

        release.set()
        slow_thread.join(timeout=5)
        fast_thread.join(timeout=5)
        assert results == {"/slow": b'"slow"', "/fast": b'"fast"'}

    def test_silent_client_times_out(self) -> None:
        server = RestServer(local_config(connection_timeout=0.2))
        server.add_endpoint("/ping", "GET", lambda request: "pong")
        with server:
            idle = socket.create_connection(("127.0.0.1", server.port))
            try:
                assert fetch(server.port, "/ping").body == b'"pong"'
            finally:
                idle.close()

    def test_lowercase_method_is_a_miss(self, running_api: RestAPI) -> None:
        port = running_api.server.port
        for method in ("get", "options"):
            response = fetch(port, "/metrics", method)
            assert response.status == 404
            assert response.body == b""
            assert response.headers["access-control-allow-origin"] == "*"

    def test_lowercase_request_line_bytes(self, running_api: RestAPI) -> None:
        data = raw_exchange(running_api.server.port, b"get /metrics HTTP/1.0\r\n\r\n")
        head, _, body = data.partition(b"\r\n\r\n")
        assert head.startswith(b"HTTP/1.0 404")
        assert b"Access-Control-Allow-Origin: *" in head
        assert body == b""

    def test_oversized_body_is_413_with_cors(self, running_api: RestAPI) -> None:
        calls: list[Request] = []
        running_api.add_endpoint("/upload", "POST", calls.append)
        limit = running_api.server.config.max_body_size
        assert limit is not None
        head = f"POST /upload HTTP/1.0\r\nContent-Length: {limit + 1}\r\n\r\n"
        data = raw_exchange(running_api.server.port, head.encode())
        status_and_headers, _, body = data.partition(b"\r\n\r\n")
        assert status_and_headers.startswith(b"HTTP/1.0 413")
        assert b"Access-Control-Allow-Origin: *" in status_and_headers
        assert body == b""
        assert calls == []
        assert fetch(running_api.server.port, "/metrics").status == 200

    def test_body_limit_is_configurable(self) -> None:
        server = RestServer(local_config(max_body_size=8))
        server.add_endpoint("/echo", "POST", lambda request: request.text())
        with server:
            accepted = fetch(server.port, "/echo", "POST", body=b"12345678")
            refused = raw_exchange(
                server.port, b"POST /echo HTTP/1.0\r\nContent-Length: 9\r\n\r\n"
            )
        assert accepted.status == 200
        assert accepted.body == b'"12345678"'
        assert refused.startswith(b"HTTP/1.0 413")

"""``roost serve`` / ``roost run`` — start a RestAPI and block until interrupted."""

import argparse
import logging
import sys
import threading
from dataclasses import replace

from roost.app import RestAPI
from roost.cli._resolve import resolve_app
from roost.config import ServerConfig
from roost.errors import BindError

logger = logging.getLogger("roost.cli")


def configure_logging(level: str) -> None:
    """Route roost's loggers to stderr at *level*."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def serve(args: argparse.Namespace) -> None:
    """Build a bare RestAPI from CLI flags and run it."""
    overrides = {
        key: value
        for key, value in (
            ("host", args.host),
            ("port", args.port),
            ("name", args.name),
            ("project", args.project),
            ("log_level", args.log_level),
        )
        if value is not None
    }
    config = replace(ServerConfig(), **overrides)
    configure_logging(config.log_level)
    run_forever(RestAPI(config))


def run_app(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` to a RestAPI and run it."""
    try:
        api = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    configure_logging(args.log_level or api.config.log_level)
    run_forever(api)


def run_forever(api: RestAPI, stop_event: threading.Event | None = None) -> None:
    """Start *api* and block until Ctrl-C (or *stop_event* is set)."""
    try:
        api.start()
    except BindError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    stop_event = stop_event or threading.Event()
    try:
        while not stop_event.wait(0.5):
            if not api.is_running:
                logger.error("Accept loop exited; shutting down")
                break
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        api.stop()

"""Roost CLI — run a RestAPI from the command line.

Entry point registered as ``roost`` in ``pyproject.toml``::

    [project.scripts]
    roost = "roost.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``roost`` command."""
    parser = argparse.ArgumentParser(
        prog="roost",
        description="Roost — an embeddable REST router with a lazy metrics tree.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- roost serve ------------------------------------------------------
    serve_parser = subparsers.add_parser("serve", help="Serve /metrics with host info only")
    serve_parser.add_argument("--host", default=None, help="Bind host address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    serve_parser.add_argument("--name", default=None, help="Top-level key of the /metrics document")
    serve_parser.add_argument("--project", default=None, help="Project name reported by info")
    serve_parser.add_argument("--log-level", default=None, help="Logging level (default: info)")

    # -- roost run --------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Run a RestAPI from an import string")
    run_parser.add_argument("app", help="Import string (e.g. myapp:api)")
    run_parser.add_argument("--log-level", default=None, help="Logging level (default: info)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from roost.cli._run import serve

        serve(args)
    elif args.command == "run":
        from roost.cli._run import run_app

        run_app(args)

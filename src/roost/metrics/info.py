"""Host introspection for the built-in ``info`` metric.

Collects a flat mapping of process and platform facts. GPU details are
not visible to a headless Python process; they are reported as
``"n/a"`` / ``0`` so the document keeps a stable shape.
"""

import os
import platform
import sys
from collections.abc import Callable
from datetime import datetime
from typing import Any

import psutil

from roost import __version__

UNAVAILABLE = "n/a"


def _cpu_name() -> str:
    return platform.processor() or platform.machine() or UNAVAILABLE


def _ram_megabytes() -> int:
    return psutil.virtual_memory().total // (1024 * 1024)


def collect_host_info(project: str, server_name: str) -> dict[str, Any]:
    """Return the ``info`` payload, read fresh on every call."""
    return {
        "project": project,
        "serverName": server_name,
        "cpuName": _cpu_name(),
        "cpuCores": os.cpu_count() or 0,
        "ramAmount": _ram_megabytes(),
        "gpuName": UNAVAILABLE,
        "gpuMemory": 0,
        "gpuVersion": UNAVAILABLE,
        "os": platform.platform(),
        "unityVersion": platform.python_version(),
        "version": __version__,
        "platform": sys.platform,
        "serverTime": datetime.now(),
    }


def host_info_producer(project: str, server_name: str) -> Callable[[], dict[str, Any]]:
    """Bind *project* and *server_name* into a zero-argument producer."""

    def produce() -> dict[str, Any]:
        return collect_host_info(project, server_name)

    return produce

"""Hierarchical metrics registry.

A registration path such as ``"enemies/zombies"`` walks from the root
branch, creating a branch for every segment but the last, and assigns a
leaf at the last segment. Assignment always replaces what was there:
a leaf replaces a leaf, a leaf replaces a whole branch, and a branch
created on the way replaces a leaf that stood in its place. Nothing is
ever merged.

Evaluation is lazy. Producers run only when the tree is evaluated,
exactly once per evaluation, and their results are never cached.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from roost._internal.types import Producer
from roost.errors import ConfigurationError

logger = logging.getLogger("roost.metrics")

SEPARATOR = "/"


@dataclass(frozen=True, slots=True)
class Leaf:
    """A node whose value is produced on demand."""

    producer: Producer


@dataclass(slots=True)
class Branch:
    """A node grouping named children in insertion order."""

    children: dict[str, "MetricsNode"] = field(default_factory=dict)


MetricsNode: TypeAlias = Leaf | Branch


def split_path(path: str) -> list[str]:
    """Split a metric path into its segments.

    Raises ``ConfigurationError`` for empty paths and empty segments
    (leading, trailing, or doubled separators).
    """
    segments = path.split(SEPARATOR)
    if not path or any(not segment for segment in segments):
        msg = f"Invalid metric path {path!r}: segments must be non-empty"
        raise ConfigurationError(msg)
    return segments


class MetricsRegistry:
    """Tree of metric producers rooted at an always-present branch.

    Usage::

        metrics = MetricsRegistry()
        metrics.register("uptime", lambda: time.monotonic() - started)
        metrics.register("enemies/zombies", lambda: len(zombies))
        metrics.evaluate()
        # {"uptime": 12.5, "enemies": {"zombies": 3}}

    Thread safety:
        Registration and evaluation hold a re-entrant lock, so metrics
        may be added after the server started and a producer may itself
        register further metrics without deadlocking.
    """

    __slots__ = ("_lock", "_root")

    def __init__(self) -> None:
        self._root = Branch()
        self._lock = threading.RLock()

    @property
    def root(self) -> Branch:
        return self._root

    def register(self, path: str, producer: Producer) -> None:
        """Assign ``Leaf(producer)`` at *path*, creating branches on the way."""
        if not callable(producer):
            msg = f"Metric producer for {path!r} is not callable: {producer!r}"
            raise ConfigurationError(msg)
        *parents, name = split_path(path)

        with self._lock:
            branch = self._root
            for segment in parents:
                child = branch.children.get(segment)
                if not isinstance(child, Branch):
                    if child is not None:
                        logger.debug("Metric %r replaced by a branch", segment)
                    child = Branch()
                    branch.children[segment] = child
                branch = child

            if name in branch.children:
                logger.debug("Metric %r overwritten", path)
            branch.children[name] = Leaf(producer)

    def unregister(self, path: str) -> bool:
        """Remove the node at *path*. Returns ``False`` if nothing was there."""
        *parents, name = split_path(path)
        with self._lock:
            branch = self._root
            for segment in parents:
                child = branch.children.get(segment)
                if not isinstance(child, Branch):
                    return False
                branch = child
            return branch.children.pop(name, None) is not None

    def get(self, path: str) -> MetricsNode | None:
        """Return the node at *path*, or ``None``."""
        node: MetricsNode = self._root
        with self._lock:
            for segment in split_path(path):
                if not isinstance(node, Branch) or segment not in node.children:
                    return None
                node = node.children[segment]
        return node

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        try:
            return self.get(path) is not None
        except ConfigurationError:
            return False

    def paths(self) -> list[str]:
        """Every leaf path, depth-first in registration order."""
        result: list[str] = []
        with self._lock:
            self._collect_paths(self._root, (), result)
        return result

    def _collect_paths(self, branch: Branch, prefix: tuple[str, ...], result: list[str]) -> None:
        for name, child in branch.children.items():
            if isinstance(child, Leaf):
                result.append(SEPARATOR.join((*prefix, name)))
            else:
                self._collect_paths(child, (*prefix, name), result)

    def evaluate(self, node: MetricsNode | None = None) -> Any:
        """Evaluate *node* (the root by default).

        A leaf yields its producer's return value; a branch yields a dict
        of child name to evaluated child, in insertion order. Producer
        exceptions propagate to the caller.
        """
        with self._lock:
            return self._evaluate(self._root if node is None else node)

    def _evaluate(self, node: MetricsNode) -> Any:
        match node:
            case Leaf(producer=producer):
                return producer()
            case Branch(children=children):
                # Snapshot so a producer that registers metrics can't mutate
                # the dict we are iterating.
                return {name: self._evaluate(child) for name, child in list(children.items())}
        msg = f"Not a metrics node: {node!r}"
        raise TypeError(msg)

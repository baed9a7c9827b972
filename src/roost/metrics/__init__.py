"""Metrics — a slash-delimited tree of lazily evaluated producers.

Leaves hold zero-argument producers that run on every ``/metrics``
request; branches group them under named keys.
"""

from roost.metrics.registry import Branch, Leaf, MetricsNode, MetricsRegistry

__all__ = ["Branch", "Leaf", "MetricsNode", "MetricsRegistry"]

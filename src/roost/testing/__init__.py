"""Test utilities for roost applications.

Provides an in-process test client::

    from roost.testing import TestClient
"""

from roost.testing.client import TestClient

__all__ = ["TestClient"]

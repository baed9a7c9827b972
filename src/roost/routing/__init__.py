"""Routing — ordered endpoint table with first-match lookup.

Endpoints are registered during setup and matched by exact
(path, method) equality, first registration wins.
"""

from roost.routing.route import Endpoint
from roost.routing.router import EndpointTable

__all__ = ["Endpoint", "EndpointTable"]

"""
Admission strategies for concrete resource kinds.

Each strategy owns the decoding of the object payload it validates and is
served by the generic dispatch handler through the Admitter protocol.
"""

from .quota import NamespaceQuotaAdmitter
from .routegroup import RouteGroupAdmitter, validate_route_group

__all__ = [
    "NamespaceQuotaAdmitter",
    "RouteGroupAdmitter",
    "validate_route_group",
]

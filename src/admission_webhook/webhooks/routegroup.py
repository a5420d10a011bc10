"""
Validating admission strategy for RouteGroup resources.

This strategy decodes the object payload of an admission request as a
zalando.org/v1 RouteGroup and enforces:
- At least one backend, with unique non-empty names
- Type specific backend settings (service, network, lb)
- Backend references that resolve to declared backends
- Routes that have a backend and a single, well-formed path matcher
"""

import logging

from pydantic import ValidationError

from admission_webhook.admission.strategy import AdmissionDecision
from admission_webhook.constants import (
    BACKEND_TYPE_LB,
    BACKEND_TYPE_NETWORK,
    BACKEND_TYPE_SERVICE,
    BACKEND_TYPES,
    OPERATION_DELETE,
)
from admission_webhook.models.review import AdmissionRequest
from admission_webhook.models.routegroup import (
    BackendReference,
    RouteGroup,
    RouteGroupBackend,
    RouteGroupRoute,
)
from admission_webhook.utils.validation import describe_validation_error

logger = logging.getLogger(__name__)


def _validate_backend(backend: RouteGroupBackend) -> list[str]:
    errors = []
    label = backend.name or "<unnamed>"

    if not backend.name:
        errors.append("backend without name")

    if backend.type not in BACKEND_TYPES:
        errors.append(
            f"backend {label}: invalid type {backend.type!r}, "
            f"expected one of {', '.join(sorted(BACKEND_TYPES))}"
        )
    elif backend.type == BACKEND_TYPE_SERVICE:
        if not backend.service_name:
            errors.append(f"backend {label}: service backend without serviceName")
        if backend.service_port is None or backend.service_port <= 0:
            errors.append(f"backend {label}: service backend without valid servicePort")
    elif backend.type == BACKEND_TYPE_NETWORK:
        if not backend.address:
            errors.append(f"backend {label}: network backend without address")
    elif backend.type == BACKEND_TYPE_LB:
        if not backend.endpoints:
            errors.append(f"backend {label}: lb backend without endpoints")

    return errors


def _validate_references(
    references: list[BackendReference], declared: set[str], owner: str
) -> list[str]:
    errors = []
    for ref in references:
        if ref.backend_name not in declared:
            errors.append(f"{owner}: unknown backend {ref.backend_name!r}")
        if ref.weight is not None and ref.weight < 0:
            errors.append(f"{owner}: negative weight for backend {ref.backend_name!r}")
    return errors


def _validate_route(
    route: RouteGroupRoute, index: int, declared: set[str], has_defaults: bool
) -> list[str]:
    owner = f"route {index}"
    errors = _validate_references(route.backends, declared, owner)

    if not route.backends and not has_defaults:
        errors.append(f"{owner}: no backends and no default backends")

    matchers = [
        value
        for value in (route.path, route.path_subtree, route.path_regexp)
        if value is not None
    ]
    if len(matchers) > 1:
        errors.append(f"{owner}: only one of path, pathSubtree, pathRegexp is allowed")

    for field, value in (("path", route.path), ("pathSubtree", route.path_subtree)):
        if value is not None and not value.startswith("/"):
            errors.append(f"{owner}: {field} must start with '/'")

    return errors


def validate_route_group(route_group: RouteGroup) -> list[str]:
    """
    Check a RouteGroup against the routing rules.

    Args:
        route_group: Decoded RouteGroup resource

    Returns:
        All violations found, empty when the RouteGroup is valid
    """
    spec = route_group.spec
    if spec is None:
        return ["route group without spec"]

    errors = []
    if not spec.backends:
        errors.append("route group without backend")

    declared: set[str] = set()
    for backend in spec.backends:
        errors.extend(_validate_backend(backend))
        if not backend.name:
            continue
        if backend.name in declared:
            errors.append(f"duplicate backend name {backend.name!r}")
        declared.add(backend.name)

    errors.extend(
        _validate_references(spec.default_backends, declared, "default backends")
    )

    has_defaults = bool(spec.default_backends)
    for index, route in enumerate(spec.routes):
        errors.extend(_validate_route(route, index, declared, has_defaults))

    return errors


class RouteGroupAdmitter:
    """Admits RouteGroup resources that satisfy the routing rules."""

    name = "routegroup"

    async def admit(self, request: AdmissionRequest) -> AdmissionDecision:
        # Nothing to validate when the object goes away
        if request.operation == OPERATION_DELETE:
            return AdmissionDecision.allow()

        if request.object.is_empty():
            return AdmissionDecision.deny("object payload is empty")

        try:
            route_group = RouteGroup.model_validate_json(request.object.raw)
        except ValidationError as e:
            logger.debug(f"RouteGroup {request.namespace}/{request.name} unparseable: {e}")
            return AdmissionDecision.deny(
                f"could not parse RouteGroup: {describe_validation_error(e, root='object')}",
                reason="Invalid",
            )

        errors = validate_route_group(route_group)
        if errors:
            return AdmissionDecision.deny(
                f"invalid RouteGroup {request.namespace}/{request.name}: "
                + "; ".join(errors),
                reason="Invalid",
            )

        return AdmissionDecision.allow()

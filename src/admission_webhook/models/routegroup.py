"""
Pydantic models for zalando.org/v1 RouteGroup resources.

A RouteGroup describes a set of HTTP routes served by the Skipper ingress,
the hosts they apply to and the backends they forward to. Only the fields
needed for admission validation are modelled; everything else is kept as
extra data.
"""

from pydantic import BaseModel, Field

from admission_webhook.constants import ROUTEGROUP_GROUP, ROUTEGROUP_KIND, ROUTEGROUP_VERSION


class ObjectMeta(BaseModel):
    """Subset of Kubernetes object metadata."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None


class RouteGroupBackend(BaseModel):
    """A named backend routes can forward to."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    name: str = Field("", description="Name referenced by routes")
    type: str = Field("", description="service, shunt, loopback, dynamic, lb or network")
    address: str | None = Field(None, description="Target URL for network backends")
    algorithm: str | None = Field(None, description="Load balancing algorithm")
    endpoints: list[str] = Field(
        default_factory=list, description="Endpoints for lb backends"
    )
    service_name: str | None = Field(None, alias="serviceName")
    service_port: int | None = Field(None, alias="servicePort")


class BackendReference(BaseModel):
    """Reference from a route (or the defaults) to a declared backend."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    backend_name: str = Field("", alias="backendName")
    weight: int | None = Field(None, description="Relative traffic weight")


class RouteGroupRoute(BaseModel):
    """A single route of the group."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    path: str | None = None
    path_subtree: str | None = Field(None, alias="pathSubtree")
    path_regexp: str | None = Field(None, alias="pathRegexp")
    methods: list[str] = Field(default_factory=list)
    predicates: list[str] = Field(default_factory=list)
    filters: list[str] = Field(default_factory=list)
    backends: list[BackendReference] = Field(default_factory=list)


class RouteGroupSpec(BaseModel):
    """Desired routing configuration."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    hosts: list[str] = Field(default_factory=list)
    backends: list[RouteGroupBackend] = Field(default_factory=list)
    default_backends: list[BackendReference] = Field(
        default_factory=list, alias="defaultBackends"
    )
    routes: list[RouteGroupRoute] = Field(default_factory=list)


class RouteGroup(BaseModel):
    """A RouteGroup custom resource."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    api_version: str = Field(
        f"{ROUTEGROUP_GROUP}/{ROUTEGROUP_VERSION}", alias="apiVersion"
    )
    kind: str = ROUTEGROUP_KIND
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: RouteGroupSpec | None = None

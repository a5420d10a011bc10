"""
Constants used throughout the admission webhook.

This module defines all constant values used by the webhook including:
- AdmissionReview protocol identifiers
- Server defaults
- Resource coordinates of the validated custom resources
- Metric result labels
"""

# AdmissionReview envelope identifiers (fixed by the protocol)
ADMISSION_API_VERSION = "admission.k8s.io/v1"
ADMISSION_KIND = "AdmissionReview"
SUPPORTED_API_VERSIONS = frozenset({"admission.k8s.io/v1", "admission.k8s.io/v1beta1"})

# Admission operations as sent by the API server
OPERATION_CREATE = "CREATE"
OPERATION_UPDATE = "UPDATE"
OPERATION_DELETE = "DELETE"
OPERATION_CONNECT = "CONNECT"

# HTTP framing
JSON_CONTENT_TYPE = "application/json"
ADMISSION_METHOD = "POST"

# Status code reported inside a denying AdmissionResponse
DENIED_STATUS_CODE = 403
DENIED_REASON = "Forbidden"

# Server defaults
DEFAULT_WEBHOOK_PORT = 9443
DEFAULT_WEBHOOK_PATH = "/routegroups"
DEFAULT_MAX_BODY_BYTES = 3 * 1024 * 1024
HEALTHZ_PATH = "/healthz"
METRICS_PATH = "/metrics"

# RouteGroup custom resource coordinates
ROUTEGROUP_GROUP = "zalando.org"
ROUTEGROUP_VERSION = "v1"
ROUTEGROUP_PLURAL = "routegroups"
ROUTEGROUP_KIND = "RouteGroup"

# RouteGroup backend types
BACKEND_TYPE_SERVICE = "service"
BACKEND_TYPE_SHUNT = "shunt"
BACKEND_TYPE_LOOPBACK = "loopback"
BACKEND_TYPE_DYNAMIC = "dynamic"
BACKEND_TYPE_LB = "lb"
BACKEND_TYPE_NETWORK = "network"
BACKEND_TYPES = frozenset(
    {
        BACKEND_TYPE_SERVICE,
        BACKEND_TYPE_SHUNT,
        BACKEND_TYPE_LOOPBACK,
        BACKEND_TYPE_DYNAMIC,
        BACKEND_TYPE_LB,
        BACKEND_TYPE_NETWORK,
    }
)

# Metric result labels
RESULT_ALLOWED = "allowed"
RESULT_DENIED = "denied"
RESULT_ERROR = "error"
RESULT_INVALID = "invalid"

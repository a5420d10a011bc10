"""
Admission Webhook - A validating admission webhook server for Kubernetes.

This package provides:
- A generic admission dispatch handler for AdmissionReview requests
- A pluggable admission strategy contract with reference implementations
- A RouteGroup validating strategy and a namespace quota strategy
- Structured logging, Prometheus metrics and OpenTelemetry tracing
"""

__version__ = "0.1.0"

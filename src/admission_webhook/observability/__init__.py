"""
Observability utilities for the admission webhook.

This module provides metrics, tracing and structured logging
capabilities for production monitoring and troubleshooting.
"""

from .logging import WebhookLogger, setup_structured_logging
from .metrics import MetricsCollector, get_metrics_registry, metrics_collector
from .tracing import get_tracer, setup_tracing, shutdown_tracing

__all__ = [
    "MetricsCollector",
    "get_metrics_registry",
    "metrics_collector",
    "WebhookLogger",
    "setup_structured_logging",
    "get_tracer",
    "setup_tracing",
    "shutdown_tracing",
]

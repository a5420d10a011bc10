"""
Prometheus metrics for the admission webhook.

This module provides metrics collection for monitoring admission traffic,
decisions and strategy failures.
"""

import logging
import time
from contextlib import contextmanager

from prometheus_client import CollectorRegistry, Counter, Histogram

from admission_webhook.constants import (
    RESULT_ALLOWED,
    RESULT_DENIED,
    RESULT_ERROR,
    RESULT_INVALID,
)

logger = logging.getLogger(__name__)

# Global metrics registry
_metrics_registry: CollectorRegistry | None = None

# Metrics definitions
ADMISSION_REQUESTS_TOTAL = Counter(
    "admission_webhook_requests_total",
    "Total number of admission requests by outcome",
    ["admitter", "result"],
    registry=None,  # Will be set during initialization
)

ADMISSION_DURATION = Histogram(
    "admission_webhook_request_duration_seconds",
    "Time spent evaluating admission requests",
    ["admitter", "operation"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
    registry=None,
)

STRATEGY_ERRORS_TOTAL = Counter(
    "admission_webhook_strategy_errors_total",
    "Total number of admission strategy failures",
    ["admitter", "error_type"],
    registry=None,
)


def get_metrics_registry() -> CollectorRegistry:
    """Get or create the global metrics registry."""
    global _metrics_registry

    if _metrics_registry is None:
        _metrics_registry = CollectorRegistry()

        for metric in [
            ADMISSION_REQUESTS_TOTAL,
            ADMISSION_DURATION,
            STRATEGY_ERRORS_TOTAL,
        ]:
            _metrics_registry.register(metric)

    return _metrics_registry


class MetricsCollector:
    """Collects and manages metrics for the admission webhook."""

    def __init__(self):
        self.registry = get_metrics_registry()

    @contextmanager
    def track_admission(self, admitter: str, operation: str):
        """
        Context manager timing the evaluation of one admission request.

        Args:
            admitter: Name of the admission strategy
            operation: Admission operation (CREATE, UPDATE, ...)
        """
        start_time = time.time()
        try:
            yield
        finally:
            ADMISSION_DURATION.labels(
                admitter=admitter, operation=operation or "UNKNOWN"
            ).observe(time.time() - start_time)

    def record_decision(self, admitter: str, allowed: bool) -> None:
        """Record an allowed or denied admission."""
        result = RESULT_ALLOWED if allowed else RESULT_DENIED
        ADMISSION_REQUESTS_TOTAL.labels(admitter=admitter, result=result).inc()

    def record_invalid_request(self, admitter: str) -> None:
        """Record a request rejected before reaching the strategy."""
        ADMISSION_REQUESTS_TOTAL.labels(admitter=admitter, result=RESULT_INVALID).inc()

    def record_strategy_error(self, admitter: str, error: Exception) -> None:
        """
        Record a strategy failure.

        The request itself is counted as an error outcome, the failure is
        additionally broken down by exception type.
        """
        ADMISSION_REQUESTS_TOTAL.labels(admitter=admitter, result=RESULT_ERROR).inc()
        STRATEGY_ERRORS_TOTAL.labels(
            admitter=admitter, error_type=type(error).__name__
        ).inc()


# Global metrics collector instance
metrics_collector = MetricsCollector()

"""
Structured logging utilities for the admission webhook.

This module provides correlation ID tracking, structured log formatting,
and admission audit logging. The dispatch handler uses the AdmissionRequest
uid as correlation ID so every log line of one review can be grouped.
"""

import json
import logging
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime

from admission_webhook.constants import HEALTHZ_PATH, METRICS_PATH
from admission_webhook.errors import AdmissionStrategyError

# Context variable for tracking correlation IDs across async operations
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

# Paths that should be filtered from access logs (health probes)
HEALTH_PROBE_PATHS = frozenset({HEALTHZ_PATH, METRICS_PATH})

STRUCTURED_FIELDS = (
    "admitter",
    "uid",
    "resource_kind",
    "resource_name",
    "namespace",
    "operation",
    "user",
    "allowed",
    "duration",
    "error_type",
    "http_status",
    "reason",
)


class HealthProbeFilter(logging.Filter):
    """
    Logging filter that suppresses health probe and metrics endpoint logs.

    These endpoints are hit frequently by Kubernetes probes and monitoring
    systems, generating excessive noise in logs during debugging.
    """

    def __init__(self, suppress_health_logs: bool = True):
        super().__init__()
        self.suppress_health_logs = suppress_health_logs

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.suppress_health_logs:
            return True

        message = record.getMessage()
        return all(path not in message for path in HEALTH_PROBE_PATHS)


class CorrelationIDFilter(logging.Filter):
    """Logging filter that adds correlation ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        current_correlation_id = correlation_id.get()
        if not current_correlation_id:
            current_correlation_id = generate_correlation_id()
            correlation_id.set(current_correlation_id)

        record.correlation_id = current_correlation_id
        return True


class StructuredFormatter(logging.Formatter):
    """
    Structured JSON formatter for logs with correlation ID support.

    Formats log records as structured JSON for better parsing and analysis
    in production monitoring systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", ""),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Extra fields are set as attributes on the record
        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, default=str)


def generate_correlation_id() -> str:
    """Generate a short correlation ID for log lines outside a review."""
    return str(uuid.uuid4())[:8]


def set_correlation_id(corr_id: str) -> str:
    """
    Set the correlation ID for the current context.

    Args:
        corr_id: Correlation ID to set

    Returns:
        The correlation ID that was set
    """
    correlation_id.set(corr_id)
    return corr_id


def get_correlation_id() -> str:
    return correlation_id.get("")


def setup_structured_logging(
    log_level: str = "INFO",
    enable_json_formatting: bool = True,
    correlation_id_enabled: bool = True,
    log_health_probes: bool = False,
) -> None:
    """
    Set up structured logging for the webhook.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_json_formatting: Whether to use JSON formatting
        correlation_id_enabled: Whether to enable correlation ID tracking
        log_health_probes: Whether to log health probe requests (default: False)
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()

    if enable_json_formatting:
        formatter: logging.Formatter = StructuredFormatter()
    elif correlation_id_enabled:
        formatter = logging.Formatter(
            "%(asctime)s - %(correlation_id)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    handler.setFormatter(formatter)

    if correlation_id_enabled:
        handler.addFilter(CorrelationIDFilter())

    if not log_health_probes:
        handler.addFilter(HealthProbeFilter(suppress_health_logs=True))

    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Third-party libraries
    logging.getLogger("kubernetes").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    # Suppress aiohttp access logs which spam with probe requests
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.server").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.web").setLevel(logging.WARNING)


class WebhookLogger:
    """
    Logger for admission events with structured logging support.

    Provides convenient methods for logging the outcome of each review
    with correlation ID tracking and structured data.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def log_admission_decision(
        self,
        admitter: str,
        uid: str,
        resource_kind: str,
        resource_name: str,
        namespace: str,
        operation: str,
        allowed: bool,
        duration: float,
        message: str | None = None,
        user: str = "",
    ) -> None:
        """
        Log the decision rendered for an admission request.

        Allowed requests are logged at INFO, denials at WARNING.
        """
        level = logging.INFO if allowed else logging.WARNING
        verdict = "Admitted" if allowed else "Rejected"
        text = f"{verdict} {operation} {resource_kind} {namespace}/{resource_name}"
        if message:
            text = f"{text}: {message}"

        self.logger.log(
            level,
            text,
            extra={
                "admitter": admitter,
                "uid": uid,
                "resource_kind": resource_kind,
                "resource_name": resource_name,
                "namespace": namespace,
                "operation": operation,
                "user": user,
                "allowed": allowed,
                "duration": duration,
            },
        )

    def log_invalid_request(self, admitter: str, reason: str, http_status: int) -> None:
        """Log a request rejected before reaching the admission strategy."""
        self.logger.warning(
            f"Invalid admission request: {reason}",
            extra={
                "admitter": admitter,
                "http_status": http_status,
                "reason": reason,
            },
        )

    def log_strategy_error(
        self,
        admitter: str,
        uid: str,
        operation: str,
        error: Exception,
    ) -> None:
        """
        Log a failure of the admission strategy.

        Typed AdmissionStrategyError failures are expected and logged without
        a traceback; anything else gets one.
        """
        self.logger.error(
            f"Admission strategy {admitter} failed for {uid}: {error}",
            extra={
                "admitter": admitter,
                "uid": uid,
                "operation": operation,
                "error_type": type(error).__name__,
            },
            exc_info=not isinstance(error, AdmissionStrategyError),
        )

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message with extra data."""
        self.logger.debug(message, extra=kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message with extra data."""
        self.logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message with extra data."""
        self.logger.warning(message, extra=kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        """Log error message with extra data."""
        self.logger.error(message, exc_info=exc_info, extra=kwargs)

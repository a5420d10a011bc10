"""
Unit tests for structured logging.

Covers the JSON formatter, the correlation ID and health probe filters and
the admission audit messages written by WebhookLogger.
"""

import json
import logging
import sys

import pytest

from admission_webhook.errors import AdmissionStrategyError
from admission_webhook.observability.logging import (
    CorrelationIDFilter,
    HealthProbeFilter,
    StructuredFormatter,
    WebhookLogger,
    get_correlation_id,
    set_correlation_id,
    setup_structured_logging,
)


def make_record(message="hello", level=logging.INFO, **extra):
    record = logging.LogRecord("test", level, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestStructuredFormatter:
    def test_formats_json(self):
        record = make_record(
            "Admitted CREATE RouteGroup n1/r1",
            correlation_id="u1",
            admitter="routegroup",
            allowed=True,
            unrelated="dropped",
        )

        data = json.loads(StructuredFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "test"
        assert data["message"] == "Admitted CREATE RouteGroup n1/r1"
        assert data["correlation_id"] == "u1"
        assert data["admitter"] == "routegroup"
        assert data["allowed"] is True
        assert "unrelated" not in data
        assert "timestamp" in data

    def test_includes_exception(self):
        try:
            raise ValueError("broken")
        except ValueError:
            record = logging.LogRecord(
                "test", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )

        data = json.loads(StructuredFormatter().format(record))
        assert "ValueError: broken" in data["exception"]


class TestFilters:
    def test_correlation_id_filter_uses_current_id(self):
        set_correlation_id("705ab4f5")
        record = make_record()

        assert CorrelationIDFilter().filter(record) is True
        assert record.correlation_id == "705ab4f5"
        assert get_correlation_id() == "705ab4f5"

    @pytest.mark.parametrize("path", ["/healthz", "/metrics"])
    def test_health_probe_filter_drops_probe_logs(self, path):
        record = make_record(f'127.0.0.1 "GET {path} HTTP/1.1" 200')
        assert HealthProbeFilter().filter(record) is False

    def test_health_probe_filter_keeps_other_logs(self):
        record = make_record('127.0.0.1 "POST /routegroups HTTP/1.1" 200')
        assert HealthProbeFilter().filter(record) is True

    def test_health_probe_filter_can_be_disabled(self):
        record = make_record('"GET /healthz HTTP/1.1" 200')
        assert HealthProbeFilter(suppress_health_logs=False).filter(record) is True


class TestSetupStructuredLogging:
    def test_installs_single_handler(self, restore_root_logger):
        setup_structured_logging(log_level="DEBUG", enable_json_formatting=True)

        root = restore_root_logger
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)
        assert root.level == logging.DEBUG

    def test_plain_formatting(self, restore_root_logger):
        setup_structured_logging(
            log_level="warning",
            enable_json_formatting=False,
            correlation_id_enabled=False,
            log_health_probes=True,
        )

        handler = restore_root_logger.handlers[0]
        assert not isinstance(handler.formatter, StructuredFormatter)
        assert handler.filters == []
        assert restore_root_logger.level == logging.WARNING


class TestWebhookLogger:
    """Tests for the admission audit log lines."""

    def test_allowed_decision_logs_info(self, caplog):
        caplog.set_level(logging.INFO, logger="test.webhook")

        WebhookLogger("test.webhook").log_admission_decision(
            admitter="routegroup",
            uid="u1",
            resource_kind="RouteGroup",
            resource_name="r1",
            namespace="n1",
            operation="CREATE",
            allowed=True,
            duration=0.01,
            user="alice",
        )

        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert record.getMessage() == "Admitted CREATE RouteGroup n1/r1"
        assert record.uid == "u1"
        assert record.user == "alice"

    def test_denied_decision_logs_warning(self, caplog):
        caplog.set_level(logging.INFO, logger="test.webhook")

        WebhookLogger("test.webhook").log_admission_decision(
            admitter="routegroup",
            uid="u1",
            resource_kind="RouteGroup",
            resource_name="r1",
            namespace="n1",
            operation="UPDATE",
            allowed=False,
            duration=0.01,
            message="route group without backend",
        )

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.getMessage() == (
            "Rejected UPDATE RouteGroup n1/r1: route group without backend"
        )
        assert record.allowed is False

    def test_invalid_request(self, caplog):
        caplog.set_level(logging.INFO, logger="test.webhook")

        WebhookLogger("test.webhook").log_invalid_request(
            "routegroup", "invalid method GET, only POST is allowed", 400
        )

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.http_status == 400

    def test_strategy_error_traceback(self, caplog):
        caplog.set_level(logging.INFO, logger="test.webhook")
        logger = WebhookLogger("test.webhook")

        logger.log_strategy_error("quota", "u1", "CREATE", AdmissionStrategyError("down"))
        logger.log_strategy_error("quota", "u2", "CREATE", RuntimeError("bug"))

        expected, unexpected = caplog.records[-2:]
        assert expected.levelno == logging.ERROR
        assert expected.error_type == "AdmissionStrategyError"
        assert not expected.exc_info
        assert unexpected.error_type == "RuntimeError"
        assert unexpected.exc_info

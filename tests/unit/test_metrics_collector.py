"""
Unit tests for MetricsCollector methods in observability/metrics.py.

Tests the individual methods of MetricsCollector to verify they call the
correct Prometheus metric objects with the correct label values.
"""

from unittest.mock import MagicMock, patch

import pytest

from admission_webhook.observability.metrics import (
    ADMISSION_REQUESTS_TOTAL,
    MetricsCollector,
    get_metrics_registry,
)


@pytest.fixture
def collector():
    """Create a MetricsCollector with the registry init patched out."""
    with patch(
        "admission_webhook.observability.metrics.get_metrics_registry",
        return_value=MagicMock(),
    ):
        return MetricsCollector()


class TestMetricsCollectorDecisions:
    """Test admission outcome counters."""

    @patch("admission_webhook.observability.metrics.ADMISSION_REQUESTS_TOTAL")
    def test_record_decision_allowed(self, mock_requests, collector):
        collector.record_decision("routegroup", allowed=True)
        mock_requests.labels.assert_called_with(admitter="routegroup", result="allowed")
        mock_requests.labels().inc.assert_called_once()

    @patch("admission_webhook.observability.metrics.ADMISSION_REQUESTS_TOTAL")
    def test_record_decision_denied(self, mock_requests, collector):
        collector.record_decision("routegroup", allowed=False)
        mock_requests.labels.assert_called_with(admitter="routegroup", result="denied")

    @patch("admission_webhook.observability.metrics.ADMISSION_REQUESTS_TOTAL")
    def test_record_invalid_request(self, mock_requests, collector):
        collector.record_invalid_request("routegroup")
        mock_requests.labels.assert_called_with(admitter="routegroup", result="invalid")
        mock_requests.labels().inc.assert_called_once()

    @patch("admission_webhook.observability.metrics.STRATEGY_ERRORS_TOTAL")
    @patch("admission_webhook.observability.metrics.ADMISSION_REQUESTS_TOTAL")
    def test_record_strategy_error(self, mock_requests, mock_errors, collector):
        """A strategy error counts as error outcome and by exception type."""
        collector.record_strategy_error("routegroup", TimeoutError("slow"))
        mock_requests.labels.assert_called_with(admitter="routegroup", result="error")
        mock_errors.labels.assert_called_with(
            admitter="routegroup", error_type="TimeoutError"
        )
        mock_errors.labels().inc.assert_called_once()


class TestMetricsCollectorTiming:
    """Test admission duration tracking."""

    @patch("admission_webhook.observability.metrics.ADMISSION_DURATION")
    def test_track_admission_observes_duration(self, mock_duration, collector):
        with collector.track_admission("routegroup", "CREATE"):
            pass

        mock_duration.labels.assert_called_with(admitter="routegroup", operation="CREATE")
        mock_duration.labels().observe.assert_called_once()
        assert mock_duration.labels().observe.call_args[0][0] >= 0

    @patch("admission_webhook.observability.metrics.ADMISSION_DURATION")
    def test_track_admission_observes_on_error(self, mock_duration, collector):
        with pytest.raises(RuntimeError):
            with collector.track_admission("routegroup", ""):
                raise RuntimeError("boom")

        mock_duration.labels.assert_called_with(admitter="routegroup", operation="UNKNOWN")
        mock_duration.labels().observe.assert_called_once()


class TestMetricsRegistry:
    def test_registry_is_shared(self):
        assert get_metrics_registry() is get_metrics_registry()

    def test_counter_is_registered(self):
        ADMISSION_REQUESTS_TOTAL.labels(admitter="registry-test", result="allowed").inc()

        value = get_metrics_registry().get_sample_value(
            "admission_webhook_requests_total",
            {"admitter": "registry-test", "result": "allowed"},
        )
        assert value >= 1

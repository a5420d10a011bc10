"""
Unit tests for wiring the webhook from settings.
"""

from unittest.mock import MagicMock, patch

import pytest
from kubernetes import config

from admission_webhook.admission.strategy import AllowAllAdmitter, ChainAdmitter
from admission_webhook.errors import ConfigurationError
from admission_webhook.main import build_admitter, build_server, main
from admission_webhook.server import WebhookServer
from admission_webhook.settings import Settings
from admission_webhook.webhooks.quota import NamespaceQuotaAdmitter
from admission_webhook.webhooks.routegroup import RouteGroupAdmitter


def make_settings(**overrides) -> Settings:
    return Settings().model_copy(update=overrides)


class TestBuildAdmitter:
    """Tests for strategy selection."""

    def test_allow_all(self):
        admitter = build_admitter(make_settings(admission_strategy="allow-all"))
        assert isinstance(admitter, AllowAllAdmitter)

    def test_routegroup(self):
        admitter = build_admitter(make_settings(admission_strategy="routegroup"))
        assert isinstance(admitter, RouteGroupAdmitter)

    def test_strategy_name_is_case_insensitive(self):
        admitter = build_admitter(make_settings(admission_strategy="Allow-All"))
        assert isinstance(admitter, AllowAllAdmitter)

    def test_unknown_strategy(self):
        with pytest.raises(ConfigurationError) as exc_info:
            build_admitter(make_settings(admission_strategy="deny-everything"))

        assert exc_info.value.setting == "admission_strategy"
        assert "deny-everything" in str(exc_info.value)

    def test_quota_is_chained_after_strategy(self):
        with (
            patch("admission_webhook.webhooks.quota.get_kubernetes_client"),
            patch("admission_webhook.webhooks.quota.client.CustomObjectsApi"),
        ):
            admitter = build_admitter(
                make_settings(
                    admission_strategy="routegroup", max_objects_per_namespace=5
                )
            )

        assert isinstance(admitter, ChainAdmitter)
        strategy, quota = admitter.admitters
        assert isinstance(strategy, RouteGroupAdmitter)
        assert isinstance(quota, NamespaceQuotaAdmitter)
        assert quota.limit == 5

    def test_quota_without_cluster_access(self):
        with patch(
            "admission_webhook.webhooks.quota.get_kubernetes_client",
            side_effect=config.ConfigException("no config"),
        ):
            with pytest.raises(ConfigurationError, match="no config"):
                build_admitter(make_settings(max_objects_per_namespace=1))


class TestBuildServer:
    def test_plain_http_server(self):
        server = build_server(
            make_settings(
                admission_strategy="allow-all",
                webhook_path="/validate",
                webhook_port=8443,
                max_objects_per_namespace=0,
                tls_cert_file="",
                tls_key_file="",
            )
        )

        assert isinstance(server, WebhookServer)
        assert set(server.handlers) == {"/validate"}
        assert server.port == 8443
        assert server.ssl_context is None

    @pytest.mark.parametrize(
        "cert,key", [("/tls/tls.crt", ""), ("", "/tls/tls.key")]
    )
    def test_partial_tls_configuration(self, cert, key):
        with pytest.raises(ConfigurationError, match="WEBHOOK_TLS_CERT_FILE"):
            build_server(
                make_settings(
                    admission_strategy="allow-all",
                    tls_cert_file=cert,
                    tls_key_file=key,
                )
            )

    def test_tls_files_are_loaded(self):
        context = MagicMock()
        with patch(
            "admission_webhook.main.create_ssl_context", return_value=context
        ) as create:
            server = build_server(
                make_settings(
                    admission_strategy="allow-all",
                    max_objects_per_namespace=0,
                    tls_cert_file="/tls/tls.crt",
                    tls_key_file="/tls/tls.key",
                )
            )

        create.assert_called_once_with("/tls/tls.crt", "/tls/tls.key")
        assert server.ssl_context is context


class TestMain:
    def test_configuration_error_exits_with_1(self):
        with (
            patch("admission_webhook.main.setup_structured_logging"),
            patch("admission_webhook.main.setup_tracing"),
            patch("admission_webhook.main.shutdown_tracing") as shutdown,
            patch(
                "admission_webhook.main.build_server",
                side_effect=ConfigurationError("broken"),
            ),
        ):
            assert main() == 1

        shutdown.assert_called_once()

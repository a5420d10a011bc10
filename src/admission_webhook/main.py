#!/usr/bin/env python3
"""
Admission Webhook - Main entry point.

Serves the configured admission strategy over HTTP(S) until interrupted.

Usage:
    python -m admission_webhook.main
    # Or via the console script:
    admission-webhook

Environment Variables:
    WEBHOOK_PORT: Port to listen on (default 9443)
    WEBHOOK_PATH: Path of the admission endpoint (default /routegroups)
    WEBHOOK_TLS_CERT_FILE / WEBHOOK_TLS_KEY_FILE: Serve HTTPS with these files
    ADMISSION_STRATEGY: allow-all or routegroup
    MAX_OBJECTS_PER_NAMESPACE: Enable the namespace quota on CREATE
    LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
"""

import asyncio
import contextlib
import logging
import signal
import sys

from admission_webhook import __version__
from admission_webhook.admission.strategy import (
    Admitter,
    AllowAllAdmitter,
    ChainAdmitter,
)
from admission_webhook.errors import ConfigurationError
from admission_webhook.observability.logging import setup_structured_logging
from admission_webhook.observability.tracing import setup_tracing, shutdown_tracing
from admission_webhook.server import WebhookServer, create_ssl_context
from admission_webhook.settings import Settings, settings as webhook_settings
from admission_webhook.webhooks.quota import NamespaceQuotaAdmitter
from admission_webhook.webhooks.routegroup import RouteGroupAdmitter

logger = logging.getLogger(__name__)

STRATEGIES = {
    "allow-all": AllowAllAdmitter,
    "routegroup": RouteGroupAdmitter,
}


def build_admitter(config: Settings) -> Admitter:
    """
    Build the admission strategy described by the settings.

    Raises:
        ConfigurationError: If the strategy name is unknown
    """
    strategy = STRATEGIES.get(config.admission_strategy.lower())
    if strategy is None:
        raise ConfigurationError(
            f"unknown strategy {config.admission_strategy!r}, "
            f"expected one of {', '.join(sorted(STRATEGIES))}",
            setting="admission_strategy",
        )

    admitter: Admitter = strategy()
    if config.max_objects_per_namespace > 0:
        admitter = ChainAdmitter(
            admitter,
            NamespaceQuotaAdmitter(
                limit=config.max_objects_per_namespace,
                group=config.quota_group,
                version=config.quota_version,
                plural=config.quota_plural,
            ),
        )
    return admitter


def build_server(config: Settings) -> WebhookServer:
    """Build the webhook server described by the settings."""
    ssl_context = None
    if config.tls_enabled:
        ssl_context = create_ssl_context(config.tls_cert_file, config.tls_key_file)
    elif config.tls_cert_file or config.tls_key_file:
        raise ConfigurationError(
            "both WEBHOOK_TLS_CERT_FILE and WEBHOOK_TLS_KEY_FILE must be set"
        )

    return WebhookServer(
        {config.webhook_path: build_admitter(config)},
        port=config.webhook_port,
        host=config.webhook_host,
        ssl_context=ssl_context,
        max_body_bytes=config.max_body_bytes,
    )


async def run(config: Settings) -> None:
    """Run the webhook server until SIGINT or SIGTERM."""
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # add_signal_handler is unavailable on some platforms
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop_event.set)

    async with build_server(config):
        await stop_event.wait()
        logger.info("Shutdown signal received")


def main() -> int:
    setup_structured_logging(
        log_level=webhook_settings.log_level,
        enable_json_formatting=webhook_settings.json_logs,
        correlation_id_enabled=webhook_settings.correlation_ids,
    )
    setup_tracing(
        enabled=webhook_settings.tracing_enabled,
        endpoint=webhook_settings.tracing_endpoint,
        service_name=webhook_settings.tracing_service_name,
        sample_rate=webhook_settings.tracing_sample_rate,
    )

    logger.info(f"Starting admission webhook {__version__}")
    try:
        asyncio.run(run(webhook_settings))
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    finally:
        shutdown_tracing()
    return 0


if __name__ == "__main__":
    sys.exit(main())

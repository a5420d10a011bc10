"""
HTTP(S) server hosting the admission endpoints.

Each configured path is served by its own AdmissionHandler. The server also
exposes a liveness endpoint and the Prometheus metrics of the process.
"""

import logging
import ssl
from collections.abc import Mapping

from aiohttp.web import (
    Application,
    AppRunner,
    Request,
    Response,
    TCPSite,
)
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from admission_webhook.admission.handler import AdmissionHandler
from admission_webhook.admission.strategy import Admitter
from admission_webhook.constants import (
    DEFAULT_MAX_BODY_BYTES,
    DEFAULT_WEBHOOK_PORT,
    HEALTHZ_PATH,
    METRICS_PATH,
)
from admission_webhook.errors import ConfigurationError
from admission_webhook.observability.metrics import get_metrics_registry

logger = logging.getLogger(__name__)


def create_ssl_context(cert_file: str, key_file: str) -> ssl.SSLContext:
    """
    Build a server TLS context from PEM files.

    Raises:
        ConfigurationError: If the certificate or key cannot be loaded
    """
    context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    try:
        context.load_cert_chain(certfile=cert_file, keyfile=key_file)
    except (OSError, ssl.SSLError) as e:
        raise ConfigurationError(
            f"cannot load TLS certificate {cert_file} / key {key_file}: {e}"
        ) from e
    return context


class WebhookServer:
    """HTTP server for admission webhooks."""

    def __init__(
        self,
        admitters: Mapping[str, Admitter],
        port: int = DEFAULT_WEBHOOK_PORT,
        host: str = "0.0.0.0",
        ssl_context: ssl.SSLContext | None = None,
        max_body_bytes: int = DEFAULT_MAX_BODY_BYTES,
    ):
        """
        Initialize webhook server.

        Args:
            admitters: Admission strategy to serve per URL path
            port: Port to listen on
            host: Host interface to bind to
            ssl_context: TLS context, plain HTTP when omitted
            max_body_bytes: Largest accepted request body
        """
        if not admitters:
            raise ConfigurationError("at least one admission endpoint is required")

        self.port = port
        self.host = host
        self.ssl_context = ssl_context
        self.handlers = {
            path: AdmissionHandler(admitter) for path, admitter in admitters.items()
        }
        self.app = Application(client_max_size=max_body_bytes)
        self.runner: AppRunner | None = None
        self.site: TCPSite | None = None
        self._setup_routes()

    def _setup_routes(self) -> None:
        """Set up HTTP routes for the webhook server."""
        for path, handler in self.handlers.items():
            # Every method is routed so the handler can reject non-POST with 400
            self.app.router.add_route("*", path, handler.handle)
        self.app.router.add_get(HEALTHZ_PATH, self._healthz_handler)
        self.app.router.add_get(METRICS_PATH, self._metrics_handler)

    async def _healthz_handler(self, request: Request) -> Response:
        """Handle /healthz endpoint for Kubernetes probes."""
        return Response(text="ok")

    async def _metrics_handler(self, request: Request) -> Response:
        """Handle /metrics endpoint for Prometheus scraping."""
        try:
            metrics_data = generate_latest(get_metrics_registry())
            return Response(body=metrics_data, headers={"Content-Type": CONTENT_TYPE_LATEST})
        except Exception as e:
            logger.error(f"Failed to generate metrics: {e}")
            return Response(
                text=f"Error generating metrics: {type(e).__name__}. Check logs for details.",
                status=500,
            )

    async def start(self) -> None:
        """Start the webhook server."""
        try:
            self.runner = AppRunner(self.app)
            await self.runner.setup()

            self.site = TCPSite(
                self.runner, self.host, self.port, ssl_context=self.ssl_context
            )
            await self.site.start()

            scheme = "https" if self.ssl_context else "http"
            logger.info(f"Webhook server started on {self.host}:{self.port}")
            for path, handler in self.handlers.items():
                logger.info(
                    f"Admission endpoint {handler.name} available at "
                    f"{scheme}://{self.host}:{self.port}{path}"
                )

        except Exception as e:
            logger.error(f"Failed to start webhook server: {e}")
            raise

    async def stop(self) -> None:
        """Stop the webhook server."""
        try:
            if self.site:
                await self.site.stop()
                self.site = None

            if self.runner:
                await self.runner.cleanup()
                self.runner = None

            logger.info("Webhook server stopped")
        except Exception as e:
            logger.error(f"Error stopping webhook server: {e}")

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.stop()

"""Centralized webhook settings using pydantic-settings.

This module provides a single source of truth for all webhook configuration
loaded from environment variables. Uses pydantic for automatic validation,
type coercion, and documentation.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from admission_webhook.constants import (
    DEFAULT_MAX_BODY_BYTES,
    DEFAULT_WEBHOOK_PATH,
    DEFAULT_WEBHOOK_PORT,
    ROUTEGROUP_GROUP,
    ROUTEGROUP_PLURAL,
    ROUTEGROUP_VERSION,
)


class Settings(BaseSettings):
    """Webhook configuration loaded from environment variables.

    All settings have sensible defaults for production use. Override via
    environment variables as documented per field.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    webhook_host: str = Field(
        default="0.0.0.0",
        validation_alias="WEBHOOK_HOST",
        description="Host address to bind the webhook server",
    )
    webhook_port: int = Field(
        default=DEFAULT_WEBHOOK_PORT,
        validation_alias="WEBHOOK_PORT",
        description="Port for the admission webhook server",
    )
    webhook_path: str = Field(
        default=DEFAULT_WEBHOOK_PATH,
        validation_alias="WEBHOOK_PATH",
        description="HTTP path the admission endpoint is served on",
    )
    tls_cert_file: str = Field(
        default="",
        validation_alias="WEBHOOK_TLS_CERT_FILE",
        description="PEM certificate file (empty = serve plain HTTP)",
    )
    tls_key_file: str = Field(
        default="",
        validation_alias="WEBHOOK_TLS_KEY_FILE",
        description="PEM private key file matching the certificate",
    )
    max_body_bytes: int = Field(
        default=DEFAULT_MAX_BODY_BYTES,
        validation_alias="WEBHOOK_MAX_BODY_BYTES",
        description="Maximum accepted AdmissionReview body size in bytes",
    )

    # Admission strategy
    admission_strategy: str = Field(
        default="routegroup",
        validation_alias="ADMISSION_STRATEGY",
        description="Admission strategy to serve (allow-all, routegroup)",
    )
    max_objects_per_namespace: int = Field(
        default=0,
        validation_alias="MAX_OBJECTS_PER_NAMESPACE",
        description="Per-namespace object quota enforced on CREATE (0 = disabled)",
    )
    quota_group: str = Field(
        default=ROUTEGROUP_GROUP,
        validation_alias="QUOTA_GROUP",
        description="API group of the resource counted by the quota strategy",
    )
    quota_version: str = Field(
        default=ROUTEGROUP_VERSION,
        validation_alias="QUOTA_VERSION",
        description="API version of the resource counted by the quota strategy",
    )
    quota_plural: str = Field(
        default=ROUTEGROUP_PLURAL,
        validation_alias="QUOTA_PLURAL",
        description="Plural name of the resource counted by the quota strategy",
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        validation_alias="JSON_LOGS",
        description="Enable JSON formatted logging for structured log aggregation",
    )
    correlation_ids: bool = Field(
        default=True,
        validation_alias="CORRELATION_IDS",
        description="Enable correlation IDs in logs for request tracing",
    )

    # Tracing
    tracing_enabled: bool = Field(
        default=False,
        validation_alias="TRACING_ENABLED",
        description="Enable OpenTelemetry span export",
    )
    tracing_endpoint: str = Field(
        default="http://localhost:4317",
        validation_alias="OTEL_EXPORTER_OTLP_ENDPOINT",
        description="OTLP gRPC collector endpoint",
    )
    tracing_service_name: str = Field(
        default="admission-webhook",
        validation_alias="OTEL_SERVICE_NAME",
        description="Service name reported in traces",
    )
    tracing_sample_rate: float = Field(
        default=1.0,
        validation_alias="TRACING_SAMPLE_RATE",
        description="Sampling ratio for root spans (0.0-1.0)",
    )

    @property
    def tls_enabled(self) -> bool:
        """Serve HTTPS only when both certificate and key are configured."""
        return bool(self.tls_cert_file and self.tls_key_file)


# Global settings instance - initialized once at module import
settings = Settings()

"""
Webhook error hierarchy with categorization and HTTP status mapping.

This module defines the error types used throughout the admission webhook.
Transport errors map to an HTTP error status, strategy errors are turned into
a denying AdmissionResponse by the dispatch handler.
"""


class WebhookError(Exception):
    """
    Base error class for all webhook-related exceptions.

    Provides categorization and the HTTP status to report when the error
    terminates a request.
    """

    def __init__(
        self,
        message: str,
        category: str,
        http_status: int = 500,
        cause: Exception | None = None,
    ):
        """
        Initialize webhook error.

        Args:
            message: Human-readable error description
            category: Error category (transport, internal, strategy, configuration)
            http_status: HTTP status reported when the error ends a request
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.category = category
        self.http_status = http_status
        self.cause = cause


class InvalidRequestError(WebhookError):
    """Request does not satisfy the HTTP preconditions of the endpoint."""

    def __init__(self, message: str):
        super().__init__(message=message, category="transport", http_status=400)


class DecodeError(WebhookError):
    """Body could not be decoded into an AdmissionReview."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(
            message=message, category="transport", http_status=400, cause=cause
        )


class EncodeError(WebhookError):
    """AdmissionReview could not be serialized."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(
            message=message, category="internal", http_status=500, cause=cause
        )


class AdmissionStrategyError(WebhookError):
    """
    An admission strategy could not compute a decision.

    Raised by strategies for internal failures, as opposed to a deliberate
    denial. The dispatch handler reports it as a denied response carrying
    the error message.
    """

    def __init__(
        self,
        message: str,
        admitter: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(
            message=message, category="strategy", http_status=200, cause=cause
        )
        self.admitter = admitter


class ConfigurationError(WebhookError):
    """Invalid webhook configuration."""

    def __init__(self, message: str, setting: str | None = None):
        if setting:
            message = f"Invalid value for setting '{setting}': {message}"
        super().__init__(message=message, category="configuration")
        self.setting = setting

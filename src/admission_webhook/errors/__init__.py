"""
Error handling module for the admission webhook.

This module provides an error hierarchy that separates transport failures
(reported as HTTP errors) from strategy failures (reported as denials).
"""

from .webhook_errors import (
    AdmissionStrategyError,
    ConfigurationError,
    DecodeError,
    EncodeError,
    InvalidRequestError,
    WebhookError,
)

__all__ = [
    "WebhookError",
    "InvalidRequestError",
    "DecodeError",
    "EncodeError",
    "AdmissionStrategyError",
    "ConfigurationError",
]

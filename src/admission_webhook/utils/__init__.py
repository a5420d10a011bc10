"""
Utils package - Helper modules for the admission webhook.

Contains helper modules for:
- Kubernetes client configuration
- Condensing pydantic validation errors into diagnostics
"""

from admission_webhook.utils.validation import describe_validation_error

__all__ = [
    "describe_validation_error",
]

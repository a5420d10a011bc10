"""
Validation utilities for the admission webhook.

Pydantic reports every problem of a document as a structured error list.
Admission diagnostics travel in a single message line, so the helpers here
condense those lists into one readable string.
"""

from pydantic import ValidationError


def describe_validation_error(error: ValidationError, root: str = "body") -> str:
    """
    Condense a pydantic ValidationError into a single diagnostic line.

    Args:
        error: Error raised by model validation
        root: Location label for errors that concern the whole document

    Returns:
        Semicolon separated "location: message" entries
    """
    parts = []
    for detail in error.errors(include_url=False):
        location = ".".join(str(part) for part in detail["loc"]) or root
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)

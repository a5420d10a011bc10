"""
Models package - Pydantic models for type-safe payload handling.

Defines data models for:
- The AdmissionReview envelope (request, response, raw object payload)
- RouteGroup custom resources validated by the RouteGroup admitter
"""

"""
Admission core: review codec, strategy contract and dispatch handler.

The handler is independent of the resource kind under review; all
kind-specific knowledge lives in admission strategies.
"""

from .codec import decode_admission_request, decode_review, encode_review
from .handler import AdmissionHandler
from .strategy import AdmissionDecision, Admitter, AllowAllAdmitter, ChainAdmitter

__all__ = [
    "AdmissionDecision",
    "AdmissionHandler",
    "Admitter",
    "AllowAllAdmitter",
    "ChainAdmitter",
    "decode_admission_request",
    "decode_review",
    "encode_review",
]

"""
Admission strategy contract and reference implementations.

An admission strategy ("admitter") is the single extension point of the
webhook: given a decoded AdmissionRequest it returns an AdmissionDecision,
or raises to signal that no decision could be computed. The dispatch
handler turns a raised error into a denial, so strategies should reserve
exceptions for internal failures and report invalid payloads as denials.

Strategies are shared between concurrent requests. They must only keep
read-only configuration set at construction time, and must offload blocking
work (for example with ``asyncio.to_thread``) instead of stalling the event
loop.
"""

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from admission_webhook.models.review import AdmissionRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdmissionDecision:
    """Outcome of an admission strategy."""

    allowed: bool
    message: str | None = None
    reason: str | None = None
    warnings: tuple[str, ...] = ()

    @classmethod
    def allow(cls, warnings: tuple[str, ...] = ()) -> "AdmissionDecision":
        return cls(allowed=True, warnings=warnings)

    @classmethod
    def deny(cls, message: str, reason: str | None = None) -> "AdmissionDecision":
        return cls(allowed=False, message=message, reason=reason)


@runtime_checkable
class Admitter(Protocol):
    """Protocol for admission strategies."""

    async def admit(self, request: AdmissionRequest) -> AdmissionDecision: ...


class AllowAllAdmitter:
    """Admits every request. Useful for smoke tests and as a safe default."""

    async def admit(self, request: AdmissionRequest) -> AdmissionDecision:
        return AdmissionDecision.allow()


class ChainAdmitter:
    """
    Runs several admitters in order.

    The first denial wins. If every admitter allows, the result is an allow
    carrying the warnings collected along the way. Errors raised by a member
    propagate unchanged.
    """

    def __init__(self, *admitters: Admitter):
        """
        Initialize the chain.

        Args:
            admitters: Strategies to evaluate, in order
        """
        self._admitters = tuple(admitters)

    @property
    def admitters(self) -> tuple[Admitter, ...]:
        return self._admitters

    async def admit(self, request: AdmissionRequest) -> AdmissionDecision:
        warnings: list[str] = []
        for admitter in self._admitters:
            decision = await admitter.admit(request)
            if not decision.allowed:
                logger.debug(
                    f"Request {request.uid} denied by {type(admitter).__name__}"
                )
                return decision
            warnings.extend(decision.warnings)
        return AdmissionDecision.allow(warnings=tuple(warnings))


def admitter_name(admitter: Admitter) -> str:
    """Name used to label logs and metrics for an admitter."""
    return getattr(admitter, "name", None) or type(admitter).__name__

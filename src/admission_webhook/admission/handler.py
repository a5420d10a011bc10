"""
Admission dispatch handler.

Turns one HTTP call from the API server into an admission decision:

1. Only POST requests with a JSON content type are accepted.
2. The body is decoded into an AdmissionReview that must carry a request.
3. The configured admission strategy evaluates the request.
4. The decision is wrapped in a fresh AdmissionReview echoing the request uid.

Precondition failures are answered with 400 and never reach the strategy.
Once preconditions pass the response is always 200 with a well-formed
review: a strategy that raises produces a denial carrying the error message,
so the reason is visible to the user instead of surfacing as a webhook call
failure. Only a failure to encode the response yields 500.
"""

import logging
import time
from typing import cast

from aiohttp import hdrs, web
from opentelemetry.trace import SpanKind, Status as SpanStatus, StatusCode
from pydantic import ValidationError

from admission_webhook.admission.codec import decode_admission_request, encode_review
from admission_webhook.admission.strategy import (
    AdmissionDecision,
    Admitter,
    admitter_name,
)
from admission_webhook.constants import (
    ADMISSION_API_VERSION,
    ADMISSION_KIND,
    ADMISSION_METHOD,
    DENIED_REASON,
    DENIED_STATUS_CODE,
    JSON_CONTENT_TYPE,
    SUPPORTED_API_VERSIONS,
)
from admission_webhook.errors import (
    AdmissionStrategyError,
    EncodeError,
    InvalidRequestError,
    WebhookError,
)
from admission_webhook.models.review import (
    AdmissionRequest,
    AdmissionResponse,
    AdmissionReview,
    Status,
)
from admission_webhook.observability.logging import WebhookLogger, set_correlation_id
from admission_webhook.observability.metrics import metrics_collector
from admission_webhook.observability.tracing import extract_trace_context, get_tracer
from admission_webhook.utils.validation import describe_validation_error

logger = logging.getLogger(__name__)
webhook_logger = WebhookLogger(__name__)


def decision_response(uid: str, decision: AdmissionDecision) -> AdmissionResponse:
    """Build the AdmissionResponse for a decision rendered by a strategy."""
    status = None
    if not decision.allowed:
        status = Status(
            message=decision.message or "request denied",
            reason=decision.reason or DENIED_REASON,
            code=DENIED_STATUS_CODE,
        )
    elif decision.message:
        status = Status(message=decision.message, reason=decision.reason)

    return AdmissionResponse(
        uid=uid,
        allowed=decision.allowed,
        status=status,
        warnings=list(decision.warnings) or None,
    )


def error_response(uid: str, error: Exception) -> AdmissionResponse:
    """Build the denying AdmissionResponse for a failed strategy."""
    return AdmissionResponse(
        uid=uid,
        allowed=False,
        status=Status(message=str(error) or type(error).__name__),
    )


class AdmissionHandler:
    """
    aiohttp request handler serving one admission strategy.

    The strategy is fixed at construction; the handler keeps no other state
    and can serve concurrent requests.
    """

    def __init__(self, admitter: Admitter, name: str | None = None):
        """
        Initialize the handler.

        Args:
            admitter: Strategy deciding on every admitted request
            name: Label used in logs and metrics (defaults to the admitter name)
        """
        self._admitter = admitter
        self._name = name or admitter_name(admitter)
        self._tracer = get_tracer(__name__)

    @property
    def admitter(self) -> Admitter:
        return self._admitter

    @property
    def name(self) -> str:
        return self._name

    async def handle(self, request: web.Request) -> web.Response:
        """Serve one AdmissionReview call."""
        try:
            review = await self._read_review(request)
        except WebhookError as e:
            metrics_collector.record_invalid_request(self._name)
            webhook_logger.log_invalid_request(self._name, e.message, e.http_status)
            return web.Response(status=e.http_status, text=e.message)

        # decode_admission_request rejects reviews without a request
        admission_request = cast(AdmissionRequest, review.request)
        set_correlation_id(admission_request.uid)

        with self._tracer.start_as_current_span(
            "admission.review",
            context=extract_trace_context(request.headers),
            kind=SpanKind.SERVER,
            attributes={
                "admission.admitter": self._name,
                "admission.uid": admission_request.uid,
                "admission.operation": admission_request.operation,
                "k8s.namespace": admission_request.namespace,
                "k8s.resource.name": admission_request.name,
            },
        ) as span:
            response = await self._evaluate(admission_request)
            span.set_attribute("admission.allowed", response.allowed)

            api_version = (
                review.api_version
                if review.api_version in SUPPORTED_API_VERSIONS
                else ADMISSION_API_VERSION
            )
            try:
                body = encode_review(
                    AdmissionReview(
                        api_version=api_version, kind=ADMISSION_KIND, response=response
                    )
                )
            except EncodeError as e:
                logger.error(
                    f"Failed to encode admission response for {admission_request.uid}: {e}"
                )
                span.set_status(SpanStatus(StatusCode.ERROR, str(e)))
                return web.Response(
                    status=e.http_status, text="failed to encode admission response"
                )

        return web.Response(body=body, content_type=JSON_CONTENT_TYPE)

    async def _read_review(self, request: web.Request) -> AdmissionReview:
        """
        Check the HTTP preconditions and decode the body.

        Raises:
            InvalidRequestError: Wrong method, content type or oversized body
            DecodeError: Body is not an AdmissionReview with a request
        """
        if request.method != ADMISSION_METHOD:
            raise InvalidRequestError(
                f"invalid method {request.method}, only POST is allowed"
            )

        content_type = request.headers.get(hdrs.CONTENT_TYPE)
        if not content_type or request.content_type != JSON_CONTENT_TYPE:
            raise InvalidRequestError(
                f"unsupported content type {content_type!r}, "
                f"only {JSON_CONTENT_TYPE} is supported"
            )

        try:
            body = await request.read()
        except web.HTTPRequestEntityTooLarge as e:
            raise InvalidRequestError("request body too large") from e

        return decode_admission_request(body)

    async def _evaluate(self, admission_request: AdmissionRequest) -> AdmissionResponse:
        """Run the strategy and map its outcome to an AdmissionResponse."""
        uid = admission_request.uid
        operation = admission_request.operation
        start_time = time.time()

        with metrics_collector.track_admission(self._name, operation):
            try:
                decision = await self._admitter.admit(admission_request)
                response = self._build_response(uid, decision)
            except Exception as e:
                metrics_collector.record_strategy_error(self._name, e)
                webhook_logger.log_strategy_error(self._name, uid, operation, e)
                return error_response(uid, e)

        metrics_collector.record_decision(self._name, response.allowed)
        webhook_logger.log_admission_decision(
            admitter=self._name,
            uid=uid,
            resource_kind=(
                admission_request.kind.kind if admission_request.kind else "object"
            ),
            resource_name=admission_request.name,
            namespace=admission_request.namespace,
            operation=operation,
            allowed=response.allowed,
            duration=time.time() - start_time,
            message=response.status.message if response.status else None,
            user=(
                admission_request.user_info.username
                if admission_request.user_info
                else ""
            ),
        )
        return response

    def _build_response(self, uid: str, decision: object) -> AdmissionResponse:
        """
        Validate the value returned by the admitter and build its response.

        Raises:
            AdmissionStrategyError: If the admitter broke its contract
        """
        if not isinstance(decision, AdmissionDecision):
            raise AdmissionStrategyError(
                f"admitter returned {type(decision).__name__}, "
                "expected AdmissionDecision",
                admitter=self._name,
            )
        try:
            return decision_response(uid, decision)
        except ValidationError as e:
            raise AdmissionStrategyError(
                "admitter returned an invalid decision: "
                f"{describe_validation_error(e, root='decision')}",
                admitter=self._name,
                cause=e,
            ) from e

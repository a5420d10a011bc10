"""
AdmissionReview codec.

Structural (de)serialization of the review envelope to and from its JSON
wire form. The codec is pure and stateless; it never looks inside the
object payload carried by a request.
"""

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from admission_webhook.errors import DecodeError, EncodeError
from admission_webhook.models.review import AdmissionReview
from admission_webhook.utils.validation import describe_validation_error


def decode_review(data: bytes | str) -> AdmissionReview:
    """
    Decode an AdmissionReview from its JSON wire form.

    Unknown fields are kept as extras. The review must carry a request or a
    response; both must carry their uid.

    Args:
        data: Raw JSON document

    Returns:
        Decoded review envelope

    Raises:
        DecodeError: If the data is not JSON or does not match the envelope shape
    """
    try:
        review = AdmissionReview.model_validate_json(data)
    except ValidationError as e:
        raise DecodeError(
            f"invalid admission review: {describe_validation_error(e)}", cause=e
        ) from e

    if review.request is None and review.response is None:
        raise DecodeError("invalid admission review: no request or response")

    return review


def decode_admission_request(data: bytes | str) -> AdmissionReview:
    """
    Decode an AdmissionReview that must carry a request.

    Raises:
        DecodeError: If decoding fails or the review has no request
    """
    review = decode_review(data)
    if review.request is None:
        raise DecodeError("invalid admission review: missing request")
    return review


def encode_review(review: AdmissionReview) -> bytes:
    """
    Encode an AdmissionReview to compact JSON.

    Optional fields left unset are omitted; the output decodes back to an
    equal envelope.

    Raises:
        EncodeError: If the envelope cannot be serialized
    """
    try:
        return review.model_dump_json(by_alias=True).encode("utf-8")
    except (PydanticSerializationError, ValueError, TypeError) as e:
        raise EncodeError(f"failed to encode admission review: {e}", cause=e) from e

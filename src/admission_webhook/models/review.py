"""
Pydantic models for the admission.k8s.io AdmissionReview envelope.

These models describe the wire format exchanged with the Kubernetes API
server. They are tolerant of unknown fields (kept as extras so they survive
a decode/encode cycle) and strict about the fields the dispatch handler
depends on: the correlation uid and the allowed flag.

The resource under review is carried as an opaque byte payload
(``RawExtension.raw``). On the wire it is an embedded JSON value; only
admission strategies decide how to interpret it.
"""

import json
from typing import Any

from pydantic import (
    BaseModel,
    Field,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    field_serializer,
    field_validator,
    model_serializer,
)

from admission_webhook.constants import ADMISSION_API_VERSION, ADMISSION_KIND


class RawExtension(BaseModel):
    """Serialized bytes of an embedded object, kept in compact JSON form."""

    model_config = {"frozen": True}

    raw: bytes = Field(b"", description="Compact JSON bytes of the object")

    @field_validator("raw")
    @classmethod
    def _compact_json(cls, value: bytes) -> bytes:
        # Stored compact; bytes that are not JSON are kept unchanged
        if not value:
            return value
        try:
            obj = json.loads(value)
        except ValueError:
            return value
        if obj is None:
            return b""
        return json.dumps(obj, separators=(",", ":")).encode("utf-8")

    @classmethod
    def from_object(cls, obj: Any) -> "RawExtension":
        """Build a payload from an already decoded JSON value."""
        if obj is None:
            return cls()
        return cls(raw=json.dumps(obj, separators=(",", ":")).encode("utf-8"))

    @classmethod
    def from_wire(cls, value: Any) -> "RawExtension":
        """
        Capture an embedded wire value.

        Accepts an existing RawExtension, raw bytes, or any decoded JSON
        value (which is re-serialized to its compact form).
        """
        if isinstance(value, RawExtension):
            return value
        if isinstance(value, bytes | bytearray):
            return cls(raw=bytes(value))
        if (
            isinstance(value, dict)
            and len(value) == 1
            and isinstance(value.get("raw"), bytes | bytearray)
        ):
            return cls(raw=bytes(value["raw"]))
        return cls.from_object(value)

    def to_object(self) -> Any:
        """
        Return the embedded JSON value for serialization.

        Raises:
            ValueError: If the payload is not valid JSON
        """
        if not self.raw:
            return None
        return json.loads(self.raw)

    def is_empty(self) -> bool:
        return not self.raw


class _WireModel(BaseModel):
    """Base for envelope models: accepts aliases or field names, keeps extras."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    @model_serializer(mode="wrap")
    def _omit_unset_fields(
        self, handler: SerializerFunctionWrapHandler, info: SerializationInfo
    ) -> dict[str, Any]:
        # Declared optional fields left at None are omitted; extras are kept as-is.
        data = handler(self)
        for name, field in type(self).model_fields.items():
            if getattr(self, name) is None:
                key = field.alias if info.by_alias and field.alias else name
                data.pop(key, None)
        return data


class GroupVersionKind(_WireModel):
    """Fully qualified kind of an object."""

    group: str = ""
    version: str = ""
    kind: str = ""


class GroupVersionResource(_WireModel):
    """Fully qualified resource of an object."""

    group: str = ""
    version: str = ""
    resource: str = ""


class UserInfo(_WireModel):
    """Identity of the user performing the request."""

    username: str = ""
    uid: str | None = None
    groups: list[str] | None = None


class AdmissionRequest(_WireModel):
    """The object and operation under review."""

    uid: str = Field(..., min_length=1, description="Opaque correlation identifier")
    kind: GroupVersionKind | None = None
    resource: GroupVersionResource | None = None
    sub_resource: str | None = Field(None, alias="subResource")
    name: str = Field("", description="Name of the object")
    namespace: str = Field("", description="Namespace of the object")
    operation: str = Field("", description="CREATE, UPDATE, DELETE or CONNECT")
    user_info: UserInfo | None = Field(None, alias="userInfo")
    object: RawExtension = Field(
        default_factory=RawExtension, description="Object as submitted"
    )
    old_object: RawExtension = Field(
        default_factory=RawExtension,
        alias="oldObject",
        description="Existing object for UPDATE and DELETE",
    )
    dry_run: bool | None = Field(None, alias="dryRun")

    @field_validator("object", "old_object", mode="before")
    @classmethod
    def _capture_raw_object(cls, value: Any) -> RawExtension:
        return RawExtension.from_wire(value)

    @field_serializer("object", "old_object")
    def _embed_raw_object(self, value: RawExtension) -> Any:
        return value.to_object()


class Status(_WireModel):
    """Result details of a denied or failed admission."""

    message: str = ""
    reason: str | None = None
    code: int | None = None


class AdmissionResponse(_WireModel):
    """The admission decision returned to the API server."""

    uid: str = Field(..., min_length=1, description="Must equal the uid of the request")
    allowed: bool = Field(..., description="Whether the operation is admitted")
    status: Status | None = None
    warnings: list[str] | None = None


class AdmissionReview(_WireModel):
    """Envelope carrying either a request or a response."""

    api_version: str = Field(ADMISSION_API_VERSION, alias="apiVersion")
    kind: str = ADMISSION_KIND
    request: AdmissionRequest | None = None
    response: AdmissionResponse | None = None

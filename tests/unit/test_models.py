"""
Unit tests for the pydantic models.

Tests the RawExtension payload helpers and the RouteGroup resource model.
"""

import pytest

from admission_webhook.errors import ConfigurationError, WebhookError
from admission_webhook.models.review import AdmissionRequest, RawExtension
from admission_webhook.models.routegroup import RouteGroup
from tests.fixtures.admission_reviews import COMPLETE_ROUTEGROUP


class TestRawExtension:
    def test_from_object_is_compact(self):
        payload = RawExtension.from_object({"a": [1, 2], "b": None})
        assert payload.raw == b'{"a":[1,2],"b":null}'

    def test_from_object_none_is_empty(self):
        assert RawExtension.from_object(None).is_empty()

    def test_raw_bytes_are_stored_compact(self):
        payload = RawExtension(raw=b'{ "a" : [1, 2],\n "b": "x" }')
        assert payload.raw == b'{"a":[1,2],"b":"x"}'
        assert payload == RawExtension.from_object({"a": [1, 2], "b": "x"})

    def test_raw_null_is_empty(self):
        assert RawExtension(raw=b"null").is_empty()

    def test_raw_non_json_is_kept(self):
        assert RawExtension(raw=b"not json").raw == b"not json"

    def test_from_wire_accepts_bytes(self):
        assert RawExtension.from_wire(b'{"a":1}').raw == b'{"a":1}'

    def test_to_object(self):
        assert RawExtension(raw=b'{"a":1}').to_object() == {"a": 1}
        assert RawExtension().to_object() is None

    def test_to_object_rejects_invalid_json(self):
        with pytest.raises(ValueError):
            RawExtension(raw=b"{").to_object()

    def test_request_accepts_decoded_objects(self):
        request = AdmissionRequest(uid="u1", object={"kind": "RouteGroup"})
        assert request.object.raw == b'{"kind":"RouteGroup"}'
        assert request.old_object.is_empty()

    def test_request_accepts_field_names_and_aliases(self):
        by_alias = AdmissionRequest.model_validate(
            {"uid": "u1", "dryRun": True, "subResource": "status"}
        )
        by_name = AdmissionRequest(uid="u1", dry_run=True, sub_resource="status")
        assert by_alias == by_name


class TestRouteGroupModel:
    def test_parses_aliases(self):
        rg = RouteGroup.model_validate(COMPLETE_ROUTEGROUP)

        assert rg.api_version == "zalando.org/v1"
        assert rg.metadata.name == "shop"
        assert rg.metadata.labels == {"application": "shop"}
        assert rg.spec.default_backends[0].backend_name == "shop"
        assert rg.spec.backends[0].service_name == "shop"
        assert rg.spec.backends[0].service_port == 8080
        assert rg.spec.routes[0].path_subtree == "/"
        assert rg.spec.routes[1].backends[1].weight == 20
        assert rg.spec.routes[2].path_regexp == "^/old/.*"

    def test_unknown_fields_are_kept(self):
        rg = RouteGroup.model_validate(
            {"spec": {"backends": [], "tls": [{"hosts": ["a"]}]}, "status": {}}
        )
        assert rg.spec.model_extra == {"tls": [{"hosts": ["a"]}]}
        assert rg.model_extra == {"status": {}}

    def test_spec_is_optional(self):
        assert RouteGroup.model_validate({}).spec is None


class TestErrors:
    def test_configuration_error_names_setting(self):
        error = ConfigurationError("must be positive", setting="webhook_port")

        assert isinstance(error, WebhookError)
        assert error.category == "configuration"
        assert str(error) == "Invalid value for setting 'webhook_port': must be positive"

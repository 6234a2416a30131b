"""Unit tests for the invocation type model."""

import pytest
from pydantic import TypeAdapter, ValidationError

from resource_client.invoke.schemas import (
    S3_COMMANDS,
    ApiResult,
    BytesBody,
    CustomApiPayload,
    DatabaseResult,
    HubSpotApiPayload,
    InvokeFailure,
    InvokePayload,
    InvokeRequest,
    InvokeSuccess,
    JsonBody,
    PostgresPayload,
    ResourceKind,
    S3Payload,
    StorageCommandResult,
    StoragePresignedUrlResult,
    TextBody,
    narrow_api,
    narrow_database,
    narrow_response,
    narrow_storage,
    parse_invoke_response,
)
from resource_client.invoke.exceptions import ResultKindMismatchError


payload_adapter = TypeAdapter(InvokePayload)


class TestResourceKind:
    """Tests for the resource family tags."""

    def test_tag_pairs(self):
        """Test each kind splits into its (type, subtype) pair."""
        pairs = {(kind.resource_type, kind.subtype) for kind in ResourceKind}

        assert pairs == {
            ("database", "postgresql"),
            ("api", "custom"),
            ("api", "hubspot"),
            ("storage", "s3"),
        }

    def test_payload_reports_its_kind(self):
        """Test payloads expose the family they were built for."""
        assert PostgresPayload(sql="SELECT 1").kind is ResourceKind.DATABASE_POSTGRESQL
        assert CustomApiPayload(method="GET", path="/").kind is ResourceKind.API_CUSTOM
        assert HubSpotApiPayload(method="GET", path="/").kind is ResourceKind.API_HUBSPOT
        assert S3Payload(command="ListBuckets").kind is ResourceKind.STORAGE_S3

    def test_storage_command_enumeration(self):
        """Test the S3 command set is closed at ten commands."""
        assert len(S3_COMMANDS) == 10
        assert "GeneratePresignedUrl" in S3_COMMANDS
        assert "GetObject" not in S3_COMMANDS


class TestPayloadSerialization:
    """Tests for the wire shape of payloads."""

    def test_postgres_omits_unset_fields(self):
        """Test unset params and timeout are left off the wire."""
        assert PostgresPayload(sql="SELECT 1").to_wire() == {
            "type": "database",
            "subtype": "postgresql",
            "sql": "SELECT 1",
        }

    def test_postgres_params_keep_types(self):
        """Test positional params survive with their JSON types."""
        payload = PostgresPayload(sql="SELECT $1, $2, $3, $4", params=["a", 1, True, None], timeout_ms=500)

        wire = payload.to_wire()
        assert wire["params"] == ["a", 1, True, None]
        assert wire["timeoutMs"] == 500

    def test_custom_api_camel_case_and_default_timeout(self):
        """Test custom API payloads default to a 30s timeout."""
        payload = CustomApiPayload(
            method="POST",
            path="/v1/items",
            query={"tag": ["a", "b"], "limit": "10"},
            headers={"X-Trace": "1"},
            body=BytesBody(base64="aGk=", content_type="text/plain"),
        )

        wire = payload.to_wire()
        assert wire["timeoutMs"] == 30000
        assert wire["query"] == {"tag": ["a", "b"], "limit": "10"}
        assert wire["body"] == {"type": "bytes", "base64": "aGk=", "contentType": "text/plain"}

    def test_json_null_body_is_preserved(self):
        """Test a JSON null body value is not dropped as unset."""
        payload = CustomApiPayload(method="PUT", path="/x", body=JsonBody(value=None))

        assert payload.to_wire()["body"] == {"type": "json", "value": None}

    def test_s3_params_pass_through_verbatim(self):
        """Test SDK-shaped params keep their capitalized keys."""
        payload = S3Payload(
            command="ListObjectsV2",
            params={"Bucket": "b", "Prefix": "logs/", "MaxKeys": 5},
        )

        assert payload.to_wire() == {
            "type": "storage",
            "subtype": "s3",
            "command": "ListObjectsV2",
            "params": {"Bucket": "b", "Prefix": "logs/", "MaxKeys": 5},
        }

    def test_invoke_request_shape(self):
        """Test the request body nests payload beside invocationKey."""
        request = InvokeRequest(payload=PostgresPayload(sql="SELECT 1"), invocation_key="k1")

        assert request.to_wire() == {
            "payload": {"type": "database", "subtype": "postgresql", "sql": "SELECT 1"},
            "invocationKey": "k1",
        }


class TestTagExclusivity:
    """Tests that payloads only ever carry their own family's fields."""

    @pytest.mark.parametrize(
        "payload",
        [
            PostgresPayload(sql="SELECT 1", params=[1], timeout_ms=10),
            CustomApiPayload(method="GET", path="/", query={"a": "b"}, headers={"h": "v"}, body=TextBody(value="t")),
            HubSpotApiPayload(method="GET", path="/crm/v3/objects/deals", query={"limit": "1"}, body=JsonBody(value={})),
            S3Payload(command="HeadObject", params={"Bucket": "b", "Key": "k"}, timeout_ms=10),
        ],
    )
    def test_wire_fields_are_subset_of_family_fields(self, payload):
        """Test no constructed payload exposes a foreign field."""
        legal = {field.alias or name for name, field in type(payload).model_fields.items()}

        assert set(payload.to_wire()) <= legal

    def test_postgres_rejects_api_fields(self):
        """Test a database payload refuses HTTP fields."""
        with pytest.raises(ValidationError):
            PostgresPayload(sql="SELECT 1", method="GET")

    def test_hubspot_rejects_headers(self):
        """Test HubSpot payloads never accept caller headers."""
        with pytest.raises(ValidationError):
            HubSpotApiPayload(method="GET", path="/", headers={"Authorization": "x"})

    def test_hubspot_rejects_non_json_body(self):
        """Test HubSpot bodies are JSON only."""
        with pytest.raises(ValidationError):
            HubSpotApiPayload(method="POST", path="/", body=TextBody(value="x"))

    def test_union_rejects_mixed_fields(self):
        """Test decoding a payload with another family's field fails."""
        with pytest.raises(ValidationError):
            payload_adapter.validate_python(
                {"type": "database", "subtype": "postgresql", "sql": "x", "command": "ListBuckets"}
            )

    def test_union_dispatches_on_tag_pair(self):
        """Test the (type, subtype) pair selects the variant."""
        custom = payload_adapter.validate_python({"type": "api", "subtype": "custom", "method": "GET", "path": "/"})
        hubspot = payload_adapter.validate_python({"type": "api", "subtype": "hubspot", "method": "GET", "path": "/"})

        assert isinstance(custom, CustomApiPayload)
        assert isinstance(hubspot, HubSpotApiPayload)

    def test_union_rejects_unknown_family(self):
        """Test adding a family needs a new variant, not new data."""
        with pytest.raises(ValidationError):
            payload_adapter.validate_python({"type": "database", "subtype": "mysql", "sql": "SELECT 1"})

    def test_invalid_method_and_command_rejected(self):
        """Test closed enumerations are enforced."""
        with pytest.raises(ValidationError):
            CustomApiPayload(method="HEAD", path="/")
        with pytest.raises(ValidationError):
            S3Payload(command="GetObject", params={})

    def test_payloads_are_immutable(self):
        """Test payloads cannot be mutated after construction."""
        payload = PostgresPayload(sql="SELECT 1")

        with pytest.raises(ValidationError):
            payload.sql = "DROP TABLE users"


class TestEnvelope:
    """Tests for decoding the response envelope."""

    def test_success_has_no_error(self):
        """Test a success envelope exposes result and no error."""
        envelope = parse_invoke_response(
            {"ok": True, "requestId": "r1", "result": {"kind": "database", "rows": [{"id": 1}], "rowsAffected": 1}}
        )

        assert isinstance(envelope, InvokeSuccess)
        assert envelope.request_id == "r1"
        assert envelope.result == DatabaseResult(rows=[{"id": 1}], rows_affected=1)
        assert not hasattr(envelope, "error")

    def test_failure_has_no_result(self):
        """Test a failure envelope exposes error and no result."""
        envelope = parse_invoke_response(
            {"ok": False, "requestId": "r2", "error": {"message": "bad sql"}}
        )

        assert isinstance(envelope, InvokeFailure)
        assert envelope.error.message == "bad sql"
        assert envelope.error.http_status is None
        assert not hasattr(envelope, "result")

    @pytest.mark.parametrize(
        "data",
        [
            {"requestId": "r1", "result": {"kind": "database", "rows": []}},
            {"ok": "true", "requestId": "r1", "result": {"kind": "database", "rows": []}},
            {"ok": True, "requestId": "r1"},
            {"ok": False, "requestId": "r1"},
            {"ok": True, "requestId": "r1", "result": {"kind": "queue"}},
            {"ok": True, "requestId": "r1", "result": {"kind": "storage", "command": "ListBuckets"}},
            ["not", "an", "envelope"],
        ],
    )
    def test_malformed_envelopes_rejected(self, data):
        """Test there is no third envelope state."""
        with pytest.raises(ValidationError):
            parse_invoke_response(data)

    def test_storage_results_split_on_presigned_url(self):
        """Test storage results pick the presigned arm only when a URL is present."""
        command = parse_invoke_response(
            {"ok": True, "requestId": "r", "result": {"kind": "storage", "command": "ListBuckets", "data": {"Buckets": []}}}
        )
        presigned = parse_invoke_response(
            {
                "ok": True,
                "requestId": "r",
                "result": {"kind": "storage", "presignedUrl": "https://x/y", "expiresAt": "2025-01-01T00:00:00Z"},
            }
        )

        assert isinstance(command.result, StorageCommandResult)
        assert command.result.data == {"Buckets": []}
        assert isinstance(presigned.result, StoragePresignedUrlResult)
        assert not hasattr(presigned.result, "data")

    def test_storage_command_data_may_be_null(self):
        """Test an explicit null data is accepted where a missing one is not."""
        envelope = parse_invoke_response(
            {"ok": True, "requestId": "r", "result": {"kind": "storage", "command": "DeleteObject", "data": None}}
        )

        assert isinstance(envelope.result, StorageCommandResult)
        assert envelope.result.data is None

    def test_api_result_bodies(self):
        """Test API result bodies decode into their tagged variant."""
        envelope = parse_invoke_response(
            {"ok": True, "requestId": "r", "result": {"kind": "api", "status": 204, "body": {"type": "text", "value": ""}}}
        )

        assert envelope.result == ApiResult(status=204, body=TextBody(value=""))


class TestNarrowing:
    """Tests for narrowing envelopes to a family."""

    def test_failure_passes_through(self):
        """Test failure envelopes are returned untouched."""
        failure = InvokeFailure(request_id="r", error={"message": "nope", "http_status": 404})

        assert narrow_database(failure) is failure
        assert narrow_storage(failure) is failure

    def test_matching_result_is_retyped(self):
        """Test a matching result comes back in the family's success envelope."""
        envelope = parse_invoke_response(
            {"ok": True, "requestId": "r", "result": {"kind": "api", "status": 200, "body": {"type": "json", "value": [1]}}}
        )

        narrowed = narrow_api(envelope)

        assert isinstance(narrowed, InvokeSuccess[ApiResult])
        assert narrowed.result.status == 200
        assert narrowed.result.body == JsonBody(value=[1])

    def test_mismatched_result_raises(self):
        """Test a result from the wrong family raises with the request id."""
        envelope = parse_invoke_response(
            {"ok": True, "requestId": "r7", "result": {"kind": "database", "rows": []}}
        )

        with pytest.raises(ResultKindMismatchError) as exc_info:
            narrow_response(envelope, ResourceKind.STORAGE_S3)

        assert exc_info.value.request_id == "r7"
        assert exc_info.value.expected == "storage"
        assert exc_info.value.actual == "database"
        assert exc_info.value.code == "RESULT_KIND_MISMATCH"

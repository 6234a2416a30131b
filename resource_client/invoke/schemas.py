"""Pydantic schemas for the resource invocation protocol.

Every resource family the gateway can reach is described here as a closed,
tagged set of models: the payload a caller sends, the result the gateway
returns, and the ``ok``-keyed envelope wrapping that result. All models are
frozen and travel over the wire with camelCase keys.
"""

from enum import Enum
from typing import Annotated, Any, Generic, Literal, TypeVar, Union, get_args

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    model_serializer,
)
from pydantic.alias_generators import to_camel

from .exceptions import ResultKindMismatchError


DEFAULT_API_TIMEOUT_MS = 30000


class ResourceKind(str, Enum):
    """The ``(type, subtype)`` pairs the gateway knows how to invoke."""

    DATABASE_POSTGRESQL = "database/postgresql"
    API_CUSTOM = "api/custom"
    API_HUBSPOT = "api/hubspot"
    STORAGE_S3 = "storage/s3"

    @property
    def resource_type(self) -> str:
        return self.value.split("/", 1)[0]

    @property
    def subtype(self) -> str:
        return self.value.split("/", 1)[1]


HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

S3Command = Literal[
    "ListObjectsV2",
    "HeadObject",
    "GetObjectTagging",
    "PutObjectTagging",
    "DeleteObject",
    "DeleteObjects",
    "CopyObject",
    "ListBuckets",
    "GetBucketLocation",
    "GeneratePresignedUrl",
]

S3_COMMANDS: tuple[str, ...] = get_args(S3Command)

QueryParams = dict[str, Union[str, list[str]]]

DbParam = Union[str, int, float, bool, None]


class WireModel(BaseModel):
    """Immutable model serialized with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump to the JSON-ready wire shape, dropping unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# --- Bodies -----------------------------------------------------------------

class JsonBody(WireModel):
    """JSON request or response body.

    Attributes:
        type: Always "json".
        value: Any JSON value, ``None`` included.
    """

    type: Literal["json"] = "json"
    value: Any = Field(..., description="JSON value")

    @model_serializer
    def serialize_json_body(self) -> dict[str, Any]:
        # A JSON null is a legitimate body and must survive exclude_none.
        return {"type": self.type, "value": self.value}


class TextBody(WireModel):
    """Plain-text body."""

    type: Literal["text"] = "text"
    value: str


class BytesBody(WireModel):
    """Binary body carried as base64.

    Attributes:
        type: Always "bytes".
        base64: Base64-encoded content.
        content_type: MIME type of the decoded content.
    """

    type: Literal["bytes"] = "bytes"
    base64: str
    content_type: str


BodyPayload = Annotated[
    Union[JsonBody, TextBody, BytesBody],
    Field(discriminator="type"),
]


# --- Payloads ---------------------------------------------------------------

class ResourcePayload(WireModel):
    """Base for payload variants. Fields of other variants are rejected."""

    model_config = ConfigDict(extra="forbid")

    @property
    def kind(self) -> ResourceKind:
        """The resource family this payload addresses."""
        return ResourceKind(f"{self.type}/{self.subtype}")


class PostgresPayload(ResourcePayload):
    """Run one SQL statement against a PostgreSQL resource.

    Attributes:
        sql: Statement text; ``$1``-style placeholders bind ``params``.
        params: Positional parameters.
        timeout_ms: Statement timeout; the gateway default applies when unset.
    """

    type: Literal["database"] = "database"
    subtype: Literal["postgresql"] = "postgresql"
    sql: str
    params: list[DbParam] | None = None
    timeout_ms: int | None = None


class CustomApiPayload(ResourcePayload):
    """Call a path on a custom HTTP API resource.

    Attributes:
        method: HTTP method.
        path: Path appended to the resource's configured base URL.
        query: Query parameters; list values repeat the key.
        headers: Extra request headers.
        body: Request body.
        timeout_ms: Upstream call timeout.
    """

    type: Literal["api"] = "api"
    subtype: Literal["custom"] = "custom"
    method: HttpMethod
    path: str
    query: QueryParams | None = None
    headers: dict[str, str] | None = None
    body: BodyPayload | None = None
    timeout_ms: int = DEFAULT_API_TIMEOUT_MS


class HubSpotApiPayload(ResourcePayload):
    """Call the HubSpot API. Authentication is injected by the gateway."""

    type: Literal["api"] = "api"
    subtype: Literal["hubspot"] = "hubspot"
    method: HttpMethod
    path: str
    query: QueryParams | None = None
    body: JsonBody | None = None
    timeout_ms: int = DEFAULT_API_TIMEOUT_MS


class S3Payload(ResourcePayload):
    """Issue one S3 command. ``params`` use the AWS SDK's key names."""

    type: Literal["storage"] = "storage"
    subtype: Literal["s3"] = "s3"
    command: S3Command
    params: dict[str, Any] = Field(default_factory=dict)
    timeout_ms: int | None = None


def _payload_tag(value: Any) -> str | None:
    if isinstance(value, dict):
        kind, subtype = value.get("type"), value.get("subtype")
    else:
        kind, subtype = getattr(value, "type", None), getattr(value, "subtype", None)
    if kind is None or subtype is None:
        return None
    return f"{kind}/{subtype}"


InvokePayload = Annotated[
    Union[
        Annotated[PostgresPayload, Tag(ResourceKind.DATABASE_POSTGRESQL.value)],
        Annotated[CustomApiPayload, Tag(ResourceKind.API_CUSTOM.value)],
        Annotated[HubSpotApiPayload, Tag(ResourceKind.API_HUBSPOT.value)],
        Annotated[S3Payload, Tag(ResourceKind.STORAGE_S3.value)],
    ],
    Discriminator(_payload_tag),
]


class InvokeRequest(WireModel):
    """Body of one POST to the invoke route.

    Attributes:
        payload: Resource-specific payload.
        invocation_key: Caller-chosen label for tracing; opaque to the client.
    """

    model_config = ConfigDict(extra="forbid")

    payload: InvokePayload
    invocation_key: str


# --- Results ----------------------------------------------------------------

class DatabaseResult(WireModel):
    """Rows returned by a database invocation."""

    kind: Literal["database"] = "database"
    rows: list[dict[str, Any]]
    rows_affected: int | None = None


class ApiResult(WireModel):
    """Upstream status and body from an API invocation."""

    kind: Literal["api"] = "api"
    status: int
    body: BodyPayload


class StorageCommandResult(WireModel):
    """Raw SDK output of an S3 command."""

    kind: Literal["storage"] = "storage"
    command: str
    data: Any


class StoragePresignedUrlResult(WireModel):
    """Result of ``GeneratePresignedUrl``.

    Attributes:
        presigned_url: Time-limited URL for direct upload/download.
        expires_at: ISO-8601 expiry timestamp.
    """

    kind: Literal["storage"] = "storage"
    presigned_url: str
    expires_at: str


def _result_tag(value: Any) -> str | None:
    if isinstance(value, dict):
        kind = value.get("kind")
        presigned = "presignedUrl" in value or "presigned_url" in value
    else:
        kind = getattr(value, "kind", None)
        presigned = isinstance(value, StoragePresignedUrlResult)
    if kind == "storage":
        return "storage/presigned-url" if presigned else "storage/command"
    return kind


StorageResult = Annotated[
    Union[
        Annotated[StorageCommandResult, Tag("storage/command")],
        Annotated[StoragePresignedUrlResult, Tag("storage/presigned-url")],
    ],
    Discriminator(_result_tag),
]

InvokeResult = Annotated[
    Union[
        Annotated[DatabaseResult, Tag("database")],
        Annotated[ApiResult, Tag("api")],
        Annotated[StorageCommandResult, Tag("storage/command")],
        Annotated[StoragePresignedUrlResult, Tag("storage/presigned-url")],
    ],
    Discriminator(_result_tag),
]


# --- Envelope ---------------------------------------------------------------

ResultT = TypeVar("ResultT")


class InvokeSuccess(WireModel, Generic[ResultT]):
    """Envelope for a completed invocation.

    Attributes:
        ok: Always True.
        request_id: Gateway-assigned correlation id.
        result: Resource result.
    """

    ok: Literal[True] = True
    request_id: str
    result: ResultT


class InvokeErrorDetail(WireModel):
    """Application-level failure reported by the gateway.

    Attributes:
        message: Human-readable description.
        http_status: Status code of the upstream resource, when it has one.
    """

    message: str
    http_status: int | None = None


class InvokeFailure(WireModel):
    """Envelope for an invocation the gateway processed but could not satisfy."""

    ok: Literal[False] = False
    request_id: str
    error: InvokeErrorDetail


def _envelope_tag(value: Any) -> str | None:
    ok = value.get("ok") if isinstance(value, dict) else getattr(value, "ok", None)
    if ok is True:
        return "success"
    if ok is False:
        return "failure"
    return None


InvokeResponse = Annotated[
    Union[
        Annotated[InvokeSuccess[InvokeResult], Tag("success")],
        Annotated[InvokeFailure, Tag("failure")],
    ],
    Discriminator(_envelope_tag),
]

DatabaseInvokeResponse = Union[InvokeSuccess[DatabaseResult], InvokeFailure]
ApiInvokeResponse = Union[InvokeSuccess[ApiResult], InvokeFailure]
StorageInvokeResponse = Union[InvokeSuccess[StorageResult], InvokeFailure]


_response_adapter: TypeAdapter[Any] = TypeAdapter(InvokeResponse)


def parse_invoke_response(data: Any) -> InvokeSuccess[Any] | InvokeFailure:
    """Decode raw JSON data into an envelope.

    Args:
        data: Parsed JSON body from the gateway.

    Returns:
        InvokeSuccess or InvokeFailure.

    Raises:
        pydantic.ValidationError: If the data is not an envelope.
    """
    return _response_adapter.validate_python(data)


_FAMILY_RESULTS: dict[ResourceKind, tuple[type[BaseModel], ...]] = {
    ResourceKind.DATABASE_POSTGRESQL: (DatabaseResult,),
    ResourceKind.API_CUSTOM: (ApiResult,),
    ResourceKind.API_HUBSPOT: (ApiResult,),
    ResourceKind.STORAGE_S3: (StorageCommandResult, StoragePresignedUrlResult),
}

_FAMILY_SUCCESS: dict[ResourceKind, type[InvokeSuccess[Any]]] = {
    ResourceKind.DATABASE_POSTGRESQL: InvokeSuccess[DatabaseResult],
    ResourceKind.API_CUSTOM: InvokeSuccess[ApiResult],
    ResourceKind.API_HUBSPOT: InvokeSuccess[ApiResult],
    ResourceKind.STORAGE_S3: InvokeSuccess[StorageResult],
}


def narrow_response(
    response: InvokeSuccess[Any] | InvokeFailure,
    kind: ResourceKind,
) -> InvokeSuccess[Any] | InvokeFailure:
    """Narrow an envelope's result to the family it was invoked for.

    Failure envelopes are returned unchanged.

    Args:
        response: Envelope returned by a generic invocation.
        kind: Resource family the payload was built for.

    Returns:
        The envelope, re-typed as the family's success envelope.

    Raises:
        ResultKindMismatchError: If the result belongs to another family.
    """
    if isinstance(response, InvokeFailure):
        return response

    if not isinstance(response.result, _FAMILY_RESULTS[kind]):
        raise ResultKindMismatchError(
            expected=kind.resource_type,
            actual=str(getattr(response.result, "kind", type(response.result).__name__)),
            request_id=response.request_id,
        )

    return _FAMILY_SUCCESS[kind](request_id=response.request_id, result=response.result)


def narrow_database(response: InvokeSuccess[Any] | InvokeFailure) -> DatabaseInvokeResponse:
    return narrow_response(response, ResourceKind.DATABASE_POSTGRESQL)


def narrow_api(response: InvokeSuccess[Any] | InvokeFailure) -> ApiInvokeResponse:
    return narrow_response(response, ResourceKind.API_CUSTOM)


def narrow_storage(response: InvokeSuccess[Any] | InvokeFailure) -> StorageInvokeResponse:
    return narrow_response(response, ResourceKind.STORAGE_S3)

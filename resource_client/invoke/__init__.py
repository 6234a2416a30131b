"""Invoke module - typed resource invocation through the gateway."""

from .schemas import (
    DEFAULT_API_TIMEOUT_MS,
    S3_COMMANDS,
    ApiInvokeResponse,
    ApiResult,
    BodyPayload,
    BytesBody,
    CustomApiPayload,
    DatabaseInvokeResponse,
    DatabaseResult,
    HttpMethod,
    HubSpotApiPayload,
    InvokeErrorDetail,
    InvokeFailure,
    InvokePayload,
    InvokeRequest,
    InvokeResponse,
    InvokeResult,
    InvokeSuccess,
    JsonBody,
    PostgresPayload,
    QueryParams,
    ResourceKind,
    ResourcePayload,
    S3Command,
    S3Payload,
    StorageCommandResult,
    StorageInvokeResponse,
    StoragePresignedUrlResult,
    StorageResult,
    TextBody,
    narrow_api,
    narrow_database,
    narrow_response,
    narrow_storage,
    parse_invoke_response,
)
from .exceptions import ResourceInvokeError, ResultKindMismatchError
from .context import InvocationContext
from .client import ResourceClient


__all__ = [
    # Schemas
    "DEFAULT_API_TIMEOUT_MS",
    "S3_COMMANDS",
    "ApiInvokeResponse",
    "ApiResult",
    "BodyPayload",
    "BytesBody",
    "CustomApiPayload",
    "DatabaseInvokeResponse",
    "DatabaseResult",
    "HttpMethod",
    "HubSpotApiPayload",
    "InvokeErrorDetail",
    "InvokeFailure",
    "InvokePayload",
    "InvokeRequest",
    "InvokeResponse",
    "InvokeResult",
    "InvokeSuccess",
    "JsonBody",
    "PostgresPayload",
    "QueryParams",
    "ResourceKind",
    "ResourcePayload",
    "S3Command",
    "S3Payload",
    "StorageCommandResult",
    "StorageInvokeResponse",
    "StoragePresignedUrlResult",
    "StorageResult",
    "TextBody",
    "narrow_api",
    "narrow_database",
    "narrow_response",
    "narrow_storage",
    "parse_invoke_response",
    # Exceptions
    "ResourceInvokeError",
    "ResultKindMismatchError",
    # Client
    "InvocationContext",
    "ResourceClient",
]

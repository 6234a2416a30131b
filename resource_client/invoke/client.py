"""HTTP dispatcher for invoking resources through the gateway."""

from typing import Any
from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from resource_client.config import Settings, get_settings
from .context import InvocationContext
from .exceptions import ResourceInvokeError
from .schemas import (
    DEFAULT_API_TIMEOUT_MS,
    ApiInvokeResponse,
    BodyPayload,
    CustomApiPayload,
    DatabaseInvokeResponse,
    DbParam,
    HttpMethod,
    HubSpotApiPayload,
    InvokeFailure,
    InvokeRequest,
    InvokeSuccess,
    JsonBody,
    PostgresPayload,
    QueryParams,
    ResourcePayload,
    S3Command,
    S3Payload,
    StorageInvokeResponse,
    narrow_api,
    narrow_database,
    narrow_storage,
    parse_invoke_response,
)


logger = structlog.get_logger("resource_client")

INVOKE_ROUTE = "/internal/apps/v1/{application_id}/resource/{resource_id}/invoke"


def _path_segment(name: str, value: str) -> str:
    if not value:
        raise ValueError(f"{name} must be a non-empty string")
    return quote(value, safe="")


class ResourceClient:
    """Type-safe client for invoking gateway resources.

    The client holds only immutable configuration, so one instance can be
    shared across concurrent tasks. Each call performs exactly one POST; no
    retries are attempted.

    Example:
        client = ResourceClient(base_url="https://api.example.com", major_jwt_token=token)
        response = await client.invoke_postgres(
            app_id, resource_id, "SELECT * FROM users WHERE id = $1", [123], "fetch-user"
        )
        if response.ok:
            rows = response.result.rows
    """

    def __init__(
        self,
        base_url: str,
        major_jwt_token: str,
        http_client: httpx.AsyncClient | None = None,
        service_jwt_header: str = "x-major-jwt",
        user_jwt_header: str = "x-major-user-jwt",
    ):
        """Create a client.

        Args:
            base_url: Gateway base URL; a trailing slash is ignored.
            major_jwt_token: Service JWT identifying this application.
            http_client: Transport to send requests with. When omitted, a
                short-lived client is opened for each call.
            service_jwt_header: Header carrying the service JWT.
            user_jwt_header: Header carrying the forwarded end-user JWT.
        """
        self._base_url = base_url.rstrip("/")
        self._major_jwt_token = major_jwt_token
        self._http_client = http_client
        self._service_jwt_header = service_jwt_header
        self._user_jwt_header = user_jwt_header

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> "ResourceClient":
        """Create a client from application settings."""
        settings = settings or get_settings()
        return cls(
            base_url=settings.MAJOR_API_BASE_URL,
            major_jwt_token=settings.MAJOR_JWT_TOKEN,
            http_client=http_client,
            service_jwt_header=settings.SERVICE_JWT_HEADER,
            user_jwt_header=settings.USER_JWT_HEADER,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def build_invoke_url(self, application_id: str, resource_id: str) -> str:
        """Build the invoke route for one resource.

        Raises:
            ValueError: If either id is empty.
        """
        path = INVOKE_ROUTE.format(
            application_id=_path_segment("application_id", application_id),
            resource_id=_path_segment("resource_id", resource_id),
        )
        return f"{self._base_url}{path}"

    def _headers(self, context: InvocationContext | None) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            self._service_jwt_header: self._major_jwt_token,
        }
        if context is not None and context.user_jwt:
            headers[self._user_jwt_header] = context.user_jwt
        return headers

    async def _post(self, url: str, content: str, headers: dict[str, str]) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(url, content=content, headers=headers)

        # timeout=None: timeouts are enforced by the gateway via timeoutMs
        async with httpx.AsyncClient(timeout=None) as client:
            return await client.post(url, content=content, headers=headers)

    async def invoke(
        self,
        application_id: str,
        resource_id: str,
        payload: ResourcePayload,
        invocation_key: str,
        *,
        context: InvocationContext | None = None,
    ) -> InvokeSuccess[Any] | InvokeFailure:
        """Invoke a resource with any payload type.

        ``ok: false`` envelopes are returned, not raised: the caller must
        check ``response.ok`` before reading ``response.result``.

        Args:
            application_id: Application the resource belongs to.
            resource_id: Resource to invoke.
            payload: Resource-specific payload.
            invocation_key: Tracking key for this invocation.
            context: End-user identity to forward, if any.

        Returns:
            InvokeSuccess or InvokeFailure envelope from the gateway.

        Raises:
            ValueError: If an id is empty.
            ResourceInvokeError: If the round trip could not complete.
        """
        url = self.build_invoke_url(application_id, resource_id)
        log = logger.bind(
            application_id=application_id,
            resource_id=resource_id,
            invocation_key=invocation_key,
            resource_kind=payload.kind.value,
        )

        try:
            content = InvokeRequest(
                payload=payload,
                invocation_key=invocation_key,
            ).model_dump_json(by_alias=True, exclude_none=True)
        except (ValidationError, PydanticSerializationError) as e:
            log.warning("resource_invoke_serialization_failed", error=str(e))
            raise ResourceInvokeError(f"Failed to serialize invocation request: {e}") from e

        log.debug("resource_invoke_started", url=url)

        try:
            response = await self._post(url, content, self._headers(context))
        except Exception as e:
            log.warning("resource_invoke_failed", error=str(e))
            raise ResourceInvokeError(f"Failed to invoke resource: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            log.warning("resource_invoke_failed", http_status=response.status_code, error=str(e))
            raise ResourceInvokeError(
                f"Failed to invoke resource: {e}",
                http_status=response.status_code,
            ) from e

        try:
            envelope = parse_invoke_response(data)
        except ValidationError as e:
            request_id = data.get("requestId") if isinstance(data, dict) else None
            log.warning(
                "resource_invoke_failed",
                http_status=response.status_code,
                request_id=request_id,
                error="malformed envelope",
            )
            raise ResourceInvokeError(
                f"Failed to invoke resource: malformed response envelope: {e}",
                http_status=response.status_code,
                request_id=request_id if isinstance(request_id, str) else None,
            ) from e

        log.info(
            "resource_invoke_completed",
            request_id=envelope.request_id,
            ok=envelope.ok,
            http_status=response.status_code,
        )
        return envelope

    async def invoke_postgres(
        self,
        application_id: str,
        resource_id: str,
        sql: str,
        params: list[DbParam] | None,
        invocation_key: str,
        *,
        timeout_ms: int | None = None,
        context: InvocationContext | None = None,
    ) -> DatabaseInvokeResponse:
        """Run SQL against a PostgreSQL resource.

        Args:
            application_id: Application the resource belongs to.
            resource_id: Database resource.
            sql: Statement to execute.
            params: Optional positional parameters.
            invocation_key: Tracking key for this invocation.
            timeout_ms: Optional statement timeout.
            context: End-user identity to forward, if any.

        Returns:
            Envelope whose success arm carries a DatabaseResult.
        """
        payload = PostgresPayload(sql=sql, params=params, timeout_ms=timeout_ms)
        response = await self.invoke(
            application_id, resource_id, payload, invocation_key, context=context
        )
        return narrow_database(response)

    async def invoke_custom_api(
        self,
        application_id: str,
        resource_id: str,
        method: HttpMethod,
        path: str,
        invocation_key: str,
        *,
        query: QueryParams | None = None,
        headers: dict[str, str] | None = None,
        body: BodyPayload | None = None,
        timeout_ms: int | None = None,
        context: InvocationContext | None = None,
    ) -> ApiInvokeResponse:
        """Call a custom API resource.

        Args:
            application_id: Application the resource belongs to.
            resource_id: API resource.
            method: HTTP method.
            path: Path appended to the resource's base URL.
            invocation_key: Tracking key for this invocation.
            query: Query parameters.
            headers: Extra headers for the upstream request.
            body: Request body.
            timeout_ms: Upstream timeout, 30000 when omitted.
            context: End-user identity to forward, if any.

        Returns:
            Envelope whose success arm carries an ApiResult.
        """
        payload = CustomApiPayload(
            method=method,
            path=path,
            query=query,
            headers=headers,
            body=body,
            timeout_ms=timeout_ms if timeout_ms is not None else DEFAULT_API_TIMEOUT_MS,
        )
        response = await self.invoke(
            application_id, resource_id, payload, invocation_key, context=context
        )
        return narrow_api(response)

    async def invoke_hubspot_api(
        self,
        application_id: str,
        resource_id: str,
        method: HttpMethod,
        path: str,
        invocation_key: str,
        *,
        query: QueryParams | None = None,
        body: JsonBody | None = None,
        timeout_ms: int | None = None,
        context: InvocationContext | None = None,
    ) -> ApiInvokeResponse:
        """Call the HubSpot API through a HubSpot resource.

        HubSpot credentials are injected by the gateway, so no headers are
        accepted here.

        Args:
            application_id: Application the resource belongs to.
            resource_id: HubSpot resource.
            method: HTTP method.
            path: HubSpot API path, e.g. "/crm/v3/objects/deals".
            invocation_key: Tracking key for this invocation.
            query: Query parameters.
            body: JSON request body.
            timeout_ms: Upstream timeout, 30000 when omitted.
            context: End-user identity to forward, if any.
        """
        payload = HubSpotApiPayload(
            method=method,
            path=path,
            query=query,
            body=body,
            timeout_ms=timeout_ms if timeout_ms is not None else DEFAULT_API_TIMEOUT_MS,
        )
        response = await self.invoke(
            application_id, resource_id, payload, invocation_key, context=context
        )
        return narrow_api(response)

    async def invoke_s3(
        self,
        application_id: str,
        resource_id: str,
        command: S3Command,
        params: dict[str, Any],
        invocation_key: str,
        *,
        timeout_ms: int | None = None,
        context: InvocationContext | None = None,
    ) -> StorageInvokeResponse:
        """Issue an S3 command against a storage resource.

        ``params`` are passed through as-is using the AWS SDK's key names
        (``Bucket``, ``Key``, ...).
        """
        payload = S3Payload(command=command, params=params, timeout_ms=timeout_ms)
        response = await self.invoke(
            application_id, resource_id, payload, invocation_key, context=context
        )
        return narrow_storage(response)

"""Current-user lookup against the gateway."""

import httpx
import structlog

from resource_client.config import get_settings
from resource_client.invoke.context import InvocationContext

from .exceptions import CurrentUserLookupError, MissingUserTokenError
from .models import CurrentUserResponse


logger = structlog.get_logger("resource_client.auth")

CURRENT_USER_ROUTE = "/internal/apps/v1/me"


async def get_current_user(
    context: InvocationContext,
    client: httpx.AsyncClient | None = None,
    base_url: str | None = None,
) -> CurrentUserResponse:
    """Fetch the currently authenticated end user.
    
    Args:
        context: Invocation context carrying the end-user JWT.
        client: Shared HTTP client (a short-lived one is used if omitted).
        base_url: Gateway base URL; defaults to MAJOR_API_BASE_URL.
        
    Returns:
        CurrentUserResponse with the user's identity.
        
    Raises:
        MissingUserTokenError: If the context carries no end-user JWT.
        CurrentUserLookupError: If the request fails, the gateway returns a
            non-2xx status, or the body is not a user description.
    """
    settings = get_settings()
    if not context.user_jwt:
        raise MissingUserTokenError(settings.USER_JWT_HEADER)
    
    url = f"{(base_url or settings.MAJOR_API_BASE_URL).rstrip('/')}{CURRENT_USER_ROUTE}"
    headers = {settings.USER_JWT_HEADER: context.user_jwt}
    
    try:
        if client is not None:
            response = await client.get(url, headers=headers)
        else:
            async with httpx.AsyncClient() as owned_client:
                response = await owned_client.get(url, headers=headers)
    except httpx.HTTPError as e:
        logger.warning("current_user_lookup_failed", error=str(e))
        raise CurrentUserLookupError(reason=f"Request failed: {e}") from e

    if response.is_error:
        logger.warning("current_user_lookup_failed", status_code=response.status_code)
        raise CurrentUserLookupError(
            status_code=response.status_code,
            reason=response.reason_phrase,
        )

    try:
        return CurrentUserResponse.model_validate(response.json())
    except ValueError as e:
        logger.warning("current_user_lookup_failed", status_code=response.status_code, error="invalid body")
        raise CurrentUserLookupError(reason=f"Invalid response body: {e}") from e

"""FastAPI dependencies for end-user identity."""

from typing import Annotated

import httpx
from fastapi import Depends, Request

from resource_client.config import get_settings
from resource_client.dependencies import get_http_client
from resource_client.invoke.context import InvocationContext

from .models import User
from .service import get_current_user


async def get_invocation_context(request: Request) -> InvocationContext:
    """Lift the forwarded end-user JWT out of the incoming request.
    
    A missing header yields a context without a user; invocations then
    run under the service identity alone.
    
    Args:
        request: The FastAPI request object.
        
    Returns:
        InvocationContext for passing to ResourceClient calls.
    """
    return InvocationContext.from_headers(request.headers, get_settings().USER_JWT_HEADER)


async def get_authenticated_user(
    context: Annotated[InvocationContext, Depends(get_invocation_context)],
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> User:
    """Resolve the end user behind the incoming request.
    
    Raises:
        MissingUserTokenError: If the request carries no end-user JWT.
        CurrentUserLookupError: If the gateway rejects the JWT.
    """
    response = await get_current_user(context, client=client)
    return response.user

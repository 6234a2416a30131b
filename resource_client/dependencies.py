"""Global dependencies for the application."""

from typing import Annotated

import httpx
from fastapi import Depends, Request

from resource_client.invoke.client import ResourceClient


async def get_http_client(request: Request) -> httpx.AsyncClient:
    """Dependency to get the global shared HTTP client.
    
    This client is initialized in main.py lifespan and shared across requests
    to enable connection pooling (keep-alive).
    
    Args:
        request: The FastAPI request object.
        
    Returns:
        The global httpx.AsyncClient instance.
    """
    return request.app.state.http_client


async def get_resource_client(
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)]
) -> ResourceClient:
    """Dependency returning a ResourceClient bound to the shared HTTP client.

    This is the entry point for FastAPI apps that embed the client: routes
    declare ``Annotated[ResourceClient, Depends(get_resource_client)]`` and
    pair it with ``get_invocation_context`` to forward the end user.
    """
    return ResourceClient.from_settings(http_client=client)

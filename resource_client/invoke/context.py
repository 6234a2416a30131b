"""Explicit per-call context for resource invocations."""

from collections.abc import Mapping

import httpx
from pydantic import BaseModel, ConfigDict, Field


class InvocationContext(BaseModel):
    """Caller identity forwarded alongside an invocation.
    
    Attributes:
        user_jwt: End-user JWT to forward to the gateway, if any.
    """
    
    user_jwt: str | None = Field(None, description="End-user JWT")
    
    model_config = ConfigDict(frozen=True)
    
    @classmethod
    def from_headers(
        cls,
        headers: Mapping[str, str],
        header_name: str = "x-major-user-jwt",
    ) -> "InvocationContext":
        """Build a context from incoming request headers.
        
        Header lookup is case-insensitive. An empty header counts as absent.
        
        Args:
            headers: Incoming request headers.
            header_name: Header carrying the end-user JWT.
            
        Returns:
            InvocationContext with ``user_jwt`` set when the header is present.
        """
        value = httpx.Headers(headers).get(header_name)
        return cls(user_jwt=value or None)

"""Typed client for invoking resources through the gateway."""

from .invoke import (
    InvocationContext,
    InvokeFailure,
    InvokeSuccess,
    ResourceClient,
    ResourceInvokeError,
)

__all__ = [
    "InvocationContext",
    "InvokeFailure",
    "InvokeSuccess",
    "ResourceClient",
    "ResourceInvokeError",
]

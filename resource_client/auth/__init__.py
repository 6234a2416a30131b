"""Auth module - end-user identity and error hierarchy."""

from .exceptions import (
    ResourceClientError,
    AuthenticationError,
    MissingUserTokenError,
    CurrentUserLookupError,
)
from .models import User, CurrentUserResponse
from .service import get_current_user


__all__ = [
    # Exceptions
    "ResourceClientError",
    "AuthenticationError",
    "MissingUserTokenError",
    "CurrentUserLookupError",
    # Models
    "User",
    "CurrentUserResponse",
    # Service
    "get_current_user",
]

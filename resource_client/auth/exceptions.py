"""Custom exceptions for the resource client."""


class ResourceClientError(Exception):
    """Base exception for all resource client errors."""
    
    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class AuthenticationError(ResourceClientError):
    """Raised when the end user cannot be authenticated."""
    pass


class MissingUserTokenError(AuthenticationError):
    """Raised when no end-user JWT accompanies the request."""
    
    def __init__(self, header_name: str):
        super().__init__(
            message=f"No user JWT found. Ensure {header_name} header is present.",
            code="MISSING_USER_TOKEN"
        )
        self.header_name = header_name


class CurrentUserLookupError(ResourceClientError):
    """Raised when the gateway cannot describe the current user.

    Attributes:
        status_code: HTTP status returned by the gateway, None when no
            usable response arrived.
        reason: Reason phrase or failure description.
    """

    def __init__(self, status_code: int | None = None, reason: str = ""):
        detail = f"{status_code} {reason}" if status_code is not None else reason
        super().__init__(
            message=f"Failed to fetch user: {detail}".rstrip(),
            code="CURRENT_USER_LOOKUP_FAILED"
        )
        self.status_code = status_code
        self.reason = reason

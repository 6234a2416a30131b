"""Exceptions raised by the resource dispatcher."""

from resource_client.auth.exceptions import ResourceClientError


class ResourceInvokeError(ResourceClientError):
    """Raised when an invocation round trip cannot complete.
    
    An ``ok: false`` envelope is a completed round trip and is returned as
    data; this error means no envelope could be obtained at all.
    
    Attributes:
        http_status: HTTP status of the gateway response, when one arrived.
        request_id: Gateway-assigned request id, when the body carried one.
    """
    
    def __init__(
        self,
        message: str,
        http_status: int | None = None,
        request_id: str | None = None,
        code: str = "RESOURCE_INVOKE_FAILED",
    ):
        super().__init__(message=message, code=code)
        self.http_status = http_status
        self.request_id = request_id


class ResultKindMismatchError(ResourceInvokeError):
    """Raised when a success envelope carries a result of another family.
    
    Attributes:
        expected: Resource kind the invocation was built for.
        actual: ``kind`` reported by the result.
    """
    
    def __init__(self, expected: str, actual: str, request_id: str | None = None):
        super().__init__(
            message=f"Expected a {expected} result but received kind '{actual}'",
            request_id=request_id,
            code="RESULT_KIND_MISMATCH",
        )
        self.expected = expected
        self.actual = actual

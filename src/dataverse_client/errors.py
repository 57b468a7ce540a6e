"""Exception hierarchy for dataverse-client."""


class DataverseError(Exception):
    """Base exception for all dataverse-client errors."""
    pass


class ValidationError(DataverseError, ValueError):
    """Raised when caller-supplied data violates a metadata model invariant."""
    pass


class PreconditionError(DataverseError):
    """Raised before any network call when a target or address cannot be resolved."""
    pass


class RequestError(DataverseError):
    """Raised when the transport fails or the server reports an error.

    Attributes:
        status_code: HTTP status code, or None if no response was received
        body: Response body text, or None if unavailable
    """

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

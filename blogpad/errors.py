"""
Error taxonomy shared by the API and the editor client.

Each error is an HTTPException so handlers and dependencies can raise it
directly and FastAPI renders it as {"detail": message}.
"""

from fastapi import HTTPException, status


class BlogError(HTTPException):
    """Base class for all blogpad errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(status_code=type(self).status_code, detail=self.message)

    def __str__(self) -> str:
        return f"{self.status_code}: {self.message}"


class ValidationError(BlogError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthError(BlogError):
    """Bad credentials or missing session."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized: Please log in to access this resource."


class NotFoundError(BlogError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(BlogError):
    """Duplicate value for a unique field."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class ServerError(BlogError):
    """Unclassified failure. The underlying cause is logged, never returned."""


_BY_STATUS = {
    cls.status_code: cls
    for cls in (ValidationError, AuthError, NotFoundError, ConflictError)
}


def error_for_status(status_code: int, message: str | None = None) -> BlogError:
    """
    Map an HTTP status back onto the taxonomy.

    Unknown statuses collapse to ServerError, keeping the original code.
    """
    cls = _BY_STATUS.get(status_code)
    if cls is not None:
        return cls(message)
    error = ServerError(message)
    error.status_code = status_code
    return error

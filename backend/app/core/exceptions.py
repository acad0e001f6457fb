"""
Domain error taxonomy.

Services raise these; ``app.main`` renders them as ``{"detail": message}``
with the status code carried by the error class.
"""
from fastapi import status


class AppError(Exception):
    """Base class for all errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidArgument(AppError):
    """Missing or malformed input."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid argument"


class NotFound(AppError):
    """Referenced entity does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(AppError):
    """Uniqueness violation or entity already in the requested state."""
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class Unauthorized(AppError):
    """Bad credentials or rejected token."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class TokenInvalid(Unauthorized):
    """Token signature, format, or purpose is wrong."""
    default_message = "Invalid token"


class TokenExpired(TokenInvalid):
    """Token was valid but its expiry has elapsed."""
    default_message = "Token has expired"


class Forbidden(AppError):
    """Authenticated, but not the owner of the resource."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class TooManyRequests(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many requests. Please try again later."


class DispatchError(AppError):
    """A downstream collaborator (mail, asset storage) failed."""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Downstream service failure"

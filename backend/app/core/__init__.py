"""
Core utilities: security, errors, ownership and rate limiting.
"""
from app.core.exceptions import (
    AppError,
    Conflict,
    DispatchError,
    Forbidden,
    InvalidArgument,
    NotFound,
    TokenExpired,
    TokenInvalid,
    TooManyRequests,
    Unauthorized,
)
from app.core.ownership import ensure_owner, is_owner
from app.core.security import (
    TokenClaims,
    TokenPurpose,
    hash_password,
    issue_token,
    verify_password,
    verify_token,
)

__all__ = [
    "AppError",
    "Conflict",
    "DispatchError",
    "Forbidden",
    "InvalidArgument",
    "NotFound",
    "TokenExpired",
    "TokenInvalid",
    "TooManyRequests",
    "Unauthorized",
    "ensure_owner",
    "is_owner",
    "TokenClaims",
    "TokenPurpose",
    "hash_password",
    "issue_token",
    "verify_password",
    "verify_token",
]

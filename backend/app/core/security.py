"""
Security utilities for password hashing and JWT token management.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings
from app.core.exceptions import TokenExpired, TokenInvalid

# Password hashing context using bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenPurpose(str, Enum):
    """What a signed token may be used for."""
    ACCESS = "access"
    REFRESH = "refresh"
    EMAIL_VERIFY = "email_verify"
    PASSWORD_RESET = "password_reset"


@dataclass(frozen=True)
class TokenClaims:
    """Verified claim set of a token."""
    subject: str
    purpose: TokenPurpose
    expires_at: datetime
    issued_at: Optional[datetime] = None
    token_id: Optional[str] = None


def hash_password(plain_password: str) -> str:
    """
    Hash a plain password using bcrypt.

    Args:
        plain_password: The plain text password to hash

    Returns:
        Hashed password string
    """
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def _secret_for(purpose: TokenPurpose) -> str:
    settings = get_settings()
    if purpose == TokenPurpose.REFRESH:
        return settings.jwt_refresh_secret_key
    return settings.jwt_access_secret_key


def default_ttl(purpose: TokenPurpose) -> timedelta:
    """Configured lifetime for tokens of the given purpose."""
    settings = get_settings()
    minutes = {
        TokenPurpose.ACCESS: settings.jwt_access_token_expire_minutes,
        TokenPurpose.REFRESH: settings.jwt_refresh_token_expire_minutes,
        TokenPurpose.EMAIL_VERIFY: settings.email_verification_expire_minutes,
        TokenPurpose.PASSWORD_RESET: settings.password_reset_expire_minutes,
    }[purpose]
    return timedelta(minutes=minutes)


def issue_token(
    subject: str,
    purpose: TokenPurpose,
    ttl: Optional[timedelta] = None,
) -> str:
    """
    Create a signed, expiring JWT.

    Args:
        subject: Identity ID the token is about
        purpose: What the token may be used for
        ttl: Optional custom lifetime (defaults to the configured one)

    Returns:
        Encoded JWT token string
    """
    settings = get_settings()

    if ttl is None:
        ttl = default_ttl(purpose)

    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(subject),
        "purpose": purpose.value,
        "exp": now + ttl,
        "iat": now,
        # distinct string per issue, so a rotated token never equals its successor
        "jti": uuid.uuid4().hex,
    }

    return jwt.encode(
        payload,
        _secret_for(purpose),
        algorithm=settings.jwt_algorithm,
    )


def verify_token(token: str, purpose: TokenPurpose) -> TokenClaims:
    """
    Decode and validate a JWT issued for ``purpose``.

    Args:
        token: The JWT token string to decode
        purpose: Purpose the caller expects

    Returns:
        Verified TokenClaims

    Raises:
        TokenExpired: If the token's expiry has elapsed
        TokenInvalid: If the signature, format, subject or purpose is wrong
    """
    settings = get_settings()

    if not token:
        raise TokenInvalid("Token is missing")

    try:
        payload = jwt.decode(
            token,
            _secret_for(purpose),
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError:
        raise TokenExpired()
    except JWTError:
        raise TokenInvalid()

    subject = payload.get("sub")
    if not subject:
        raise TokenInvalid("Token has no subject")

    if payload.get("purpose") != purpose.value:
        raise TokenInvalid("Token was not issued for this purpose")

    iat = payload.get("iat")
    return TokenClaims(
        subject=subject,
        purpose=purpose,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        issued_at=datetime.fromtimestamp(iat, tz=timezone.utc) if iat else None,
        token_id=payload.get("jti"),
    )

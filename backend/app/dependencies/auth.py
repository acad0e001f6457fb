"""
Authentication dependencies for route protection.
"""
from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.exceptions import Unauthorized
from app.core.security import TokenPurpose, verify_token
from app.dependencies.services import get_auth_service
from app.models.user import User
from app.services.auth_service import AuthService

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"

bearer_scheme = HTTPBearer(auto_error=False)


def extract_access_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[str]:
    """Bearer header first, then the accessToken cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(ACCESS_TOKEN_COOKIE)


async def get_current_user(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> User:
    """
    Dependency to get the current authenticated user from an access token.

    Token is read from ``Authorization: Bearer <token>`` or the
    ``accessToken`` cookie.

    Raises:
        Unauthorized: Missing token or unknown subject
        TokenInvalid / TokenExpired: Bad or expired token
    """
    token = extract_access_token(request, credentials)
    if not token:
        raise Unauthorized("Unauthorized request")

    claims = verify_token(token, TokenPurpose.ACCESS)

    user = await auth_service.get_user_by_id(claims.subject)
    if user is None:
        raise Unauthorized("Invalid access token")

    return user


async def get_optional_user(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> Optional[User]:
    """Like ``get_current_user`` but anonymous requests yield None."""
    if not extract_access_token(request, credentials):
        return None
    return await get_current_user(request, credentials, auth_service)


# Type aliases for cleaner route signatures
CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[Optional[User], Depends(get_optional_user)]

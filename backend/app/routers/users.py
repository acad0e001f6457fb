"""
Users router: registration, sessions, passwords, account and history.
"""
from typing import Annotated, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Request, Response, UploadFile, status

from app.config import get_settings
from app.core.exceptions import TooManyRequests
from app.core.rate_limit import check_rate_limit
from app.dependencies.auth import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE, CurrentUser, OptionalUser
from app.dependencies.services import get_auth_service, get_user_service
from app.schemas.auth import (
    ChangePasswordRequest,
    EmailVerificationStatus,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    ResendVerificationRequest,
    ResetPasswordRequest,
    TokenRefreshRequest,
)
from app.schemas.user import ChannelProfile, UserResponse, UserUpdate, VideoSummary
from app.services.auth_service import AuthService
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]


def get_client_ip(request: Request) -> str:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _set_session_cookies(response: Response, session: LoginResponse) -> None:
    settings = get_settings()
    cookie_options = {"httponly": True, "secure": settings.cookie_secure, "samesite": "lax"}
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        session.access_token,
        max_age=settings.jwt_access_token_expire_minutes * 60,
        **cookie_options,
    )
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        session.refresh_token,
        max_age=settings.jwt_refresh_token_expire_minutes * 60,
        **cookie_options,
    )


def _clear_session_cookies(response: Response) -> None:
    settings = get_settings()
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(name, httponly=True, secure=settings.cookie_secure, samesite="lax")


# ==================== Registration ====================

@router.post(
    "/register/initial",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
async def register_initial(
    request: Request,
    body: RegisterRequest,
    auth_service: AuthServiceDep,
):
    """
    Create an account and send a verification email.

    - **email**: Valid email address (must be unique)
    - **password**: At least 8 characters with upper, lower, digit and symbol
    - **full_name**: 3-50 letters and spaces

    The account gets a placeholder handle until `/register/complete`.
    """
    settings = get_settings()
    client_ip = get_client_ip(request)
    if not await check_rate_limit(
        client_ip,
        "/users/register",
        limit=settings.register_rate_limit_attempts,
        window_seconds=settings.register_rate_limit_window_seconds,
    ):
        raise TooManyRequests("Too many registration attempts. Please try again later.")

    return await auth_service.register_user(body)


@router.post(
    "/register/complete",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Choose handle and avatar",
)
async def register_complete(
    current_user: CurrentUser,
    auth_service: AuthServiceDep,
    handle: Annotated[str, Form(description="Unique handle: letters, numbers, underscores")],
    avatar: Annotated[Optional[UploadFile], File(description="Avatar image")] = None,
    cover_image: Annotated[Optional[UploadFile], File(description="Optional cover image")] = None,
):
    """Finish account creation. Multipart form with `handle`, `avatar` and optional `cover_image`."""
    return await auth_service.complete_profile(current_user, handle, avatar, cover_image)


# ==================== Email verification ====================

@router.post(
    "/verify-email/{token}",
    response_model=UserResponse,
    summary="Verify email address",
)
async def verify_email(token: str, auth_service: AuthServiceDep):
    return await auth_service.verify_email(token)


@router.post(
    "/resend-verification-email",
    response_model=MessageResponse,
    summary="Re-send the verification email",
)
async def resend_verification_email(body: ResendVerificationRequest, auth_service: AuthServiceDep):
    """Issue a new verification link. Older links stop working."""
    await auth_service.resend_verification(body.email)
    return MessageResponse(message="Verification email sent")


@router.get(
    "/email-verification-status",
    response_model=EmailVerificationStatus,
    summary="Email verification status",
)
async def email_verification_status(current_user: CurrentUser, auth_service: AuthServiceDep):
    return await auth_service.email_verification_status(current_user)


# ==================== Sessions ====================

@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login and get tokens",
)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    auth_service: AuthServiceDep,
):
    """
    Authenticate with handle or email and password.

    Tokens are returned in the body and as HTTP-only `accessToken` /
    `refreshToken` cookies. Protected endpoints accept either the cookie or
    an `Authorization: Bearer` header.

    **Rate limited** per IP, and accounts lock after repeated failures.
    """
    settings = get_settings()
    client_ip = get_client_ip(request)
    if not await check_rate_limit(
        client_ip,
        "/users/login",
        limit=settings.login_rate_limit_attempts,
        window_seconds=settings.login_rate_limit_window_seconds,
    ):
        raise TooManyRequests("Too many login attempts. Please try again later.")

    session = await auth_service.login(body)
    _set_session_cookies(response, session)
    return session


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Logout",
)
async def logout(response: Response, current_user: CurrentUser, auth_service: AuthServiceDep):
    """Revoke the refresh token and clear session cookies."""
    await auth_service.logout(current_user)
    _clear_session_cookies(response)
    return MessageResponse(message="User logged out")


@router.post(
    "/refresh-token",
    response_model=LoginResponse,
    summary="Rotate tokens",
)
async def refresh_token(
    request: Request,
    response: Response,
    auth_service: AuthServiceDep,
    body: Annotated[Optional[TokenRefreshRequest], Body()] = None,
):
    """
    Exchange the current refresh token for a new access/refresh pair.

    The refresh token is read from the body or the `refreshToken` cookie.
    The presented token stops working once it has been exchanged.
    """
    presented = body.refresh_token if body and body.refresh_token else request.cookies.get(REFRESH_TOKEN_COOKIE)
    session = await auth_service.refresh(presented)
    _set_session_cookies(response, session)
    return session


# ==================== Passwords ====================

@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    summary="Request a password reset link",
)
async def forgot_password(body: ForgotPasswordRequest, auth_service: AuthServiceDep):
    await auth_service.forgot_password(body.email)
    return MessageResponse(message="Password reset link sent")


@router.post(
    "/reset-password/{token}",
    response_model=MessageResponse,
    summary="Reset password with a reset token",
)
async def reset_password(token: str, body: ResetPasswordRequest, auth_service: AuthServiceDep):
    await auth_service.reset_password(token, body.new_password)
    return MessageResponse(message="Password reset successfully")


@router.post(
    "/change-password",
    response_model=MessageResponse,
    summary="Change password",
)
async def change_password(body: ChangePasswordRequest, current_user: CurrentUser, auth_service: AuthServiceDep):
    await auth_service.change_password(current_user, body)
    return MessageResponse(message="Password changed successfully")


# ==================== Account ====================

@router.get(
    "/current-user",
    response_model=UserResponse,
    summary="Get current user info",
)
async def current_user_info(current_user: CurrentUser, auth_service: AuthServiceDep):
    """Get information about the currently authenticated user."""
    return await auth_service.get_current_identity(current_user)


@router.patch(
    "/update-account",
    response_model=UserResponse,
    summary="Update email or display name",
)
async def update_account(body: UserUpdate, current_user: CurrentUser, auth_service: AuthServiceDep):
    return await auth_service.update_account_details(current_user, body)


@router.patch(
    "/avatar",
    response_model=UserResponse,
    summary="Replace avatar",
)
async def update_avatar(
    current_user: CurrentUser,
    auth_service: AuthServiceDep,
    avatar: Annotated[Optional[UploadFile], File(description="Avatar image")] = None,
):
    return await auth_service.update_avatar(current_user, avatar)


@router.patch(
    "/cover-image",
    response_model=UserResponse,
    summary="Replace cover image",
)
async def update_cover_image(
    current_user: CurrentUser,
    auth_service: AuthServiceDep,
    cover_image: Annotated[Optional[UploadFile], File(description="Cover image")] = None,
):
    return await auth_service.update_cover_image(current_user, cover_image)


# ==================== Channel & history ====================

@router.get(
    "/channel/{handle}",
    response_model=ChannelProfile,
    summary="Public channel profile",
)
async def channel_profile(handle: str, viewer: OptionalUser, user_service: UserServiceDep):
    """Channel profile with subscriber counts. `is_subscribed` is false for anonymous viewers."""
    return await user_service.get_channel_profile(handle, viewer)


@router.get(
    "/history",
    response_model=list[VideoSummary],
    summary="Watch history",
)
async def watch_history(current_user: CurrentUser, user_service: UserServiceDep):
    """Watched videos, most recent first."""
    return await user_service.get_watch_history(current_user)


@router.post(
    "/history/{video_id}",
    response_model=list[str],
    summary="Record a watched video",
)
async def record_watch(video_id: str, current_user: CurrentUser, user_service: UserServiceDep):
    return await user_service.record_watch(current_user, video_id)


@router.delete(
    "/history/{video_id}",
    response_model=list[str],
    summary="Remove a video from watch history",
)
async def remove_from_history(video_id: str, current_user: CurrentUser, user_service: UserServiceDep):
    return await user_service.remove_from_watch_history(current_user, video_id)


@router.delete(
    "/history",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear watch history",
)
async def clear_history(current_user: CurrentUser, user_service: UserServiceDep):
    await user_service.clear_watch_history(current_user)

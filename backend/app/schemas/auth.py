"""
Authentication request/response schemas.
"""
import re
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.user import UserResponse, check_full_name

HANDLE_PATTERN = r"^[a-zA-Z0-9_]+$"


def check_password_strength(password: str) -> str:
    """Require upper, lower, digit and symbol characters (length checked by Field)."""
    if not (
        re.search(r"[A-Z]", password)
        and re.search(r"[a-z]", password)
        and re.search(r"\d", password)
        and re.search(r"[^A-Za-z0-9]", password)
    ):
        raise ValueError(
            "Password must contain one uppercase, one lowercase, one special "
            "character, one digit and be at least 8 characters long"
        )
    return password


class RegisterRequest(BaseModel):
    """Registration (phase 1) request body."""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(
        ...,
        min_length=8,
        description="User password (min 8 characters, mixed classes)"
    )
    full_name: str = Field(..., min_length=3, max_length=50, description="Display name")

    @field_validator("password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        return check_password_strength(value)

    @field_validator("full_name")
    @classmethod
    def alphabetic_name(cls, value: str) -> str:
        return check_full_name(value)


class LoginRequest(BaseModel):
    """Login request body: handle and/or email plus password."""
    handle: Optional[str] = Field(None, pattern=HANDLE_PATTERN, description="User handle")
    email: Optional[EmailStr] = Field(None, description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class LoginResponse(BaseModel):
    """Login / refresh response with both tokens."""
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token lifetime in seconds")
    user: UserResponse = Field(..., description="Authenticated identity")


class TokenRefreshRequest(BaseModel):
    """Refresh request body; the refreshToken cookie is used when omitted."""
    refresh_token: Optional[str] = Field(None, description="Refresh token")


class ResendVerificationRequest(BaseModel):
    email: EmailStr = Field(..., description="Address to re-send verification to")


class ForgotPasswordRequest(BaseModel):
    email: EmailStr = Field(..., description="Account email address")


class ResetPasswordRequest(BaseModel):
    new_password: str = Field(..., min_length=8, description="New password")

    @field_validator("new_password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        return check_password_strength(value)


class ChangePasswordRequest(BaseModel):
    """Authenticated password change."""
    old_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=8, description="New password")
    confirm_new_password: str = Field(..., min_length=1, description="New password again")

    @field_validator("new_password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        return check_password_strength(value)


class EmailVerificationStatus(BaseModel):
    is_email_verified: bool
    email: str
    full_name: str


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str = Field(..., description="Human readable result")

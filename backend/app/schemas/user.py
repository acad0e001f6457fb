"""
User request/response schemas.
"""
import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.user import User

FULL_NAME_PATTERN = re.compile(r"^[a-zA-Z\s]+$")


def check_full_name(value: str) -> str:
    """Strip and require letters and spaces only."""
    value = value.strip()
    if not FULL_NAME_PATTERN.match(value):
        raise ValueError("Full name must contain only alphabetical characters and spaces")
    return value


class UserResponse(BaseModel):
    """User information response (excludes password, tokens and history)."""
    id: str = Field(..., description="User ID")
    handle: str = Field(..., description="User handle")
    email: EmailStr = Field(..., description="User email")
    full_name: str = Field(..., description="Display name")
    avatar: Optional[str] = Field(None, description="Avatar URL")
    cover_image: Optional[str] = Field(None, description="Cover image URL")
    is_email_verified: bool = Field(..., description="Email verification flag")
    profile_completed: bool = Field(..., description="Handle and avatar chosen")
    created_at: datetime = Field(..., description="Account creation date")

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            handle=user.handle,
            email=user.email,
            full_name=user.full_name,
            avatar=user.avatar,
            cover_image=user.cover_image,
            is_email_verified=user.is_email_verified,
            profile_completed=user.profile_completed,
            created_at=user.created_at,
        )


class UserUpdate(BaseModel):
    """Account details update (at least one field)."""
    email: Optional[EmailStr] = Field(None, description="New email address")
    full_name: Optional[str] = Field(None, min_length=3, max_length=50, description="New display name")

    @field_validator("full_name")
    @classmethod
    def alphabetic_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return check_full_name(value)


class OwnerSummary(BaseModel):
    """Public projection of a video owner."""
    id: Optional[str] = None
    handle: Optional[str] = None
    full_name: Optional[str] = None
    avatar: Optional[str] = None


class ChannelProfile(BaseModel):
    """Public channel view with subscription aggregates."""
    id: str
    handle: str
    full_name: str
    email: str
    avatar: Optional[str] = None
    cover_image: Optional[str] = None
    subscriber_count: int = 0
    subscribed_to_count: int = 0
    is_subscribed: bool = False


class VideoSummary(BaseModel):
    """Video with its owner embedded, as used by history and playlist views."""
    id: str
    title: str
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    video_file: Optional[str] = None
    duration: float = 0
    views: int = 0
    is_published: bool = True
    created_at: Optional[datetime] = None
    owner: Optional[OwnerSummary] = None

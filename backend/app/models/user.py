"""
Identity model for the identity database.
"""
from datetime import datetime, timezone
from typing import Optional

from pydantic import EmailStr, Field

from app.models.base import DocumentModel

PLACEHOLDER_HANDLE_PREFIX = "user_"


class User(DocumentModel):
    """
    Identity document model for MongoDB identity_db.users collection.

    ``handle`` holds a synthetic ``user_<hex>`` placeholder until the
    profile is completed. ``refresh_token`` is the only persisted session
    state: a refresh token is valid only while it equals this field.
    """
    handle: str = Field(..., description="Unique public handle")
    email: EmailStr = Field(..., description="Unique email address")
    full_name: str = Field(..., description="Display name")
    password_hash: str = Field(..., description="Bcrypt hashed password")
    avatar: Optional[str] = Field(None, description="Avatar URL")
    avatar_public_id: Optional[str] = Field(None, description="Asset storage id of the avatar")
    cover_image: Optional[str] = Field(None, description="Cover image URL")
    cover_image_public_id: Optional[str] = Field(None, description="Asset storage id of the cover")
    watch_history: list[str] = Field(
        default_factory=list,
        description="Watched video IDs, most recent last"
    )
    is_email_verified: bool = Field(default=False, description="Email verification flag")
    email_verification_token: Optional[str] = Field(
        None,
        description="Outstanding email verification token (at most one)"
    )
    refresh_token: Optional[str] = Field(None, description="Current refresh token (at most one)")
    profile_completed: bool = Field(default=False, description="Handle and avatar chosen")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Account creation timestamp"
    )
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

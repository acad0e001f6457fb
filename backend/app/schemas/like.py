"""
Like request/response schemas.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ToggleResult(str, Enum):
    ADDED = "added"
    REMOVED = "removed"


class LikeToggleResponse(BaseModel):
    """Outcome of a like toggle."""
    status: ToggleResult = Field(..., description="Whether the like was added or removed")
    target_kind: str = Field(..., description="video, comment or tweet")
    target_id: str = Field(..., description="Liked entity ID")
    like_id: Optional[str] = Field(None, description="Created like ID (when added)")


class LikedVideoOwner(BaseModel):
    id: Optional[str] = None
    handle: Optional[str] = None
    full_name: Optional[str] = None


class LikedVideo(BaseModel):
    """Reduced video projection for the liked-videos listing."""
    id: str
    title: str
    thumbnail: Optional[str] = None
    duration: float = 0
    views: int = 0
    created_at: Optional[datetime] = None
    owner: Optional[LikedVideoOwner] = None


class LikeCountResponse(BaseModel):
    video_id: str
    video_likes: int = Field(..., ge=0)

"""
Playlist request/response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.user import VideoSummary


class PlaylistCreate(BaseModel):
    """Create playlist request."""
    name: str = Field(..., min_length=1, max_length=100, description="Playlist name")
    description: str = Field(..., min_length=1, max_length=500, description="Playlist description")


class PlaylistUpdate(BaseModel):
    """Update playlist request (at least one field)."""
    name: Optional[str] = Field(None, min_length=1, max_length=100, description="Playlist name")
    description: Optional[str] = Field(None, min_length=1, max_length=500, description="Playlist description")


class PlaylistResponse(BaseModel):
    """Playlist as stored (video IDs only)."""
    id: str = Field(..., description="Playlist ID")
    name: str
    description: str
    owner: str = Field(..., description="Owner user ID")
    videos: list[str] = Field(default_factory=list, description="Video IDs in order")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PlaylistDetail(BaseModel):
    """Playlist with its videos resolved, in stored order."""
    id: str
    name: str
    description: str
    owner: str
    updated_at: Optional[datetime] = None
    videos: list[VideoSummary] = Field(default_factory=list)


class PlaylistName(BaseModel):
    id: str
    name: str


class PlaylistVideoFlag(BaseModel):
    """Playlist name plus whether it already contains a given video."""
    id: str
    name: str
    contains_video: bool

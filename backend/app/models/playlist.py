"""
Playlist model for the content database.
"""
from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from app.models.base import DocumentModel


class Playlist(DocumentModel):
    """
    Playlist document model for MongoDB content_db.playlists collection.
    """
    name: str = Field(..., description="Playlist name")
    description: str = Field(..., description="Playlist description")
    owner: str = Field(..., description="Owner identity ID")
    videos: list[str] = Field(
        default_factory=list,
        description="Video IDs in playlist order (no duplicates)"
    )
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None

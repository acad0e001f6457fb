"""
Comment model for the content database.
"""
from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from app.models.base import DocumentModel


class Comment(DocumentModel):
    """Document model for content_db.comments."""
    content: str = Field(..., description="Comment body")
    video: str = Field(..., description="Commented video ID")
    owner: str = Field(..., description="Author identity ID")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None

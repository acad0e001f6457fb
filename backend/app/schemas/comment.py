"""
Comment request/response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.user import OwnerSummary


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000, description="Comment body")


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000, description="New comment body")


class CommentResponse(BaseModel):
    id: str
    content: str
    video: str
    owner: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class CommentWithOwner(BaseModel):
    id: str
    content: str
    created_at: datetime
    owner: Optional[OwnerSummary] = None


class CommentPage(BaseModel):
    """One page of a video's comments, newest first."""
    comments: list[CommentWithOwner]
    total: int
    page: int
    page_size: int
    has_more: bool

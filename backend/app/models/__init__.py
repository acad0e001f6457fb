"""
Pydantic models for database documents and data structures.
"""
from app.models.user import User
from app.models.comment import Comment
from app.models.like import LikeTarget, LikeTargetKind
from app.models.playlist import Playlist

__all__ = [
    "User",
    "Comment",
    "LikeTarget",
    "LikeTargetKind",
    "Playlist",
]

"""
Service layer for business logic.
"""
from app.services.auth_service import AuthService
from app.services.comment_service import CommentService
from app.services.like_service import LikeService
from app.services.playlist_service import PlaylistService
from app.services.user_service import UserService
from app.services.view_service import ViewService

__all__ = [
    "AuthService",
    "CommentService",
    "LikeService",
    "PlaylistService",
    "UserService",
    "ViewService",
]

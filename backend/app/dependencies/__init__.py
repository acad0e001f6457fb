"""
Dependencies for dependency injection in routes.
"""
from app.dependencies.auth import CurrentUser, OptionalUser, get_current_user, get_optional_user
from app.dependencies.services import (
    get_asset_storage,
    get_auth_service,
    get_comment_service,
    get_like_service,
    get_mail_service,
    get_playlist_service,
    get_user_service,
)

__all__ = [
    "CurrentUser",
    "OptionalUser",
    "get_current_user",
    "get_optional_user",
    "get_asset_storage",
    "get_auth_service",
    "get_comment_service",
    "get_like_service",
    "get_mail_service",
    "get_playlist_service",
    "get_user_service",
]

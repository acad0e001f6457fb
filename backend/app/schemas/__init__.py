"""
Request and response schemas for API endpoints.
"""
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    TokenRefreshRequest,
    ResendVerificationRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    ChangePasswordRequest,
    EmailVerificationStatus,
    MessageResponse,
)
from app.schemas.user import (
    UserResponse,
    UserUpdate,
    OwnerSummary,
    ChannelProfile,
    VideoSummary,
)
from app.schemas.playlist import (
    PlaylistCreate,
    PlaylistUpdate,
    PlaylistResponse,
    PlaylistDetail,
    PlaylistName,
    PlaylistVideoFlag,
)
from app.schemas.like import (
    ToggleResult,
    LikeToggleResponse,
    LikedVideo,
    LikeCountResponse,
)
from app.schemas.comment import (
    CommentCreate,
    CommentUpdate,
    CommentResponse,
    CommentWithOwner,
    CommentPage,
)

__all__ = [
    # Auth
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "TokenRefreshRequest",
    "ResendVerificationRequest",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "ChangePasswordRequest",
    "EmailVerificationStatus",
    "MessageResponse",
    # User
    "UserResponse",
    "UserUpdate",
    "OwnerSummary",
    "ChannelProfile",
    "VideoSummary",
    # Playlist
    "PlaylistCreate",
    "PlaylistUpdate",
    "PlaylistResponse",
    "PlaylistDetail",
    "PlaylistName",
    "PlaylistVideoFlag",
    # Like
    "ToggleResult",
    "LikeToggleResponse",
    "LikedVideo",
    "LikeCountResponse",
    # Comment
    "CommentCreate",
    "CommentUpdate",
    "CommentResponse",
    "CommentWithOwner",
    "CommentPage",
]

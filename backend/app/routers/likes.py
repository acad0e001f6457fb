"""
Likes router for toggling likes and like listings.
"""
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import ValidationError

from app.core.exceptions import InvalidArgument
from app.dependencies.auth import CurrentUser
from app.dependencies.services import get_like_service
from app.models.like import LikeTarget, LikeTargetKind
from app.schemas.like import LikeCountResponse, LikedVideo, LikeToggleResponse
from app.services.like_service import LikeService

router = APIRouter(prefix="/likes", tags=["Likes"])

LikeServiceDep = Annotated[LikeService, Depends(get_like_service)]


def _target(kind: LikeTargetKind, target_id: str) -> LikeTarget:
    try:
        return LikeTarget(kind=kind, id=target_id)
    except ValidationError:
        raise InvalidArgument(f"Invalid {kind.value} id")


@router.post(
    "/toggle/v/{video_id}",
    response_model=LikeToggleResponse,
    summary="Toggle like on a video",
)
async def toggle_video_like(video_id: str, current_user: CurrentUser, like_service: LikeServiceDep):
    return await like_service.toggle_like(current_user, _target(LikeTargetKind.VIDEO, video_id))


@router.post(
    "/toggle/c/{comment_id}",
    response_model=LikeToggleResponse,
    summary="Toggle like on a comment",
)
async def toggle_comment_like(comment_id: str, current_user: CurrentUser, like_service: LikeServiceDep):
    return await like_service.toggle_like(current_user, _target(LikeTargetKind.COMMENT, comment_id))


@router.post(
    "/toggle/t/{tweet_id}",
    response_model=LikeToggleResponse,
    summary="Toggle like on a tweet",
)
async def toggle_tweet_like(tweet_id: str, current_user: CurrentUser, like_service: LikeServiceDep):
    return await like_service.toggle_like(current_user, _target(LikeTargetKind.TWEET, tweet_id))


@router.get(
    "/videos",
    response_model=list[LikedVideo],
    summary="Videos liked by the current user",
)
async def liked_videos(current_user: CurrentUser, like_service: LikeServiceDep):
    """Most recently liked first."""
    return await like_service.liked_videos(current_user)


@router.get(
    "/count/{video_id}",
    response_model=LikeCountResponse,
    summary="Like count of a video",
)
async def video_like_count(video_id: str, like_service: LikeServiceDep):
    return await like_service.video_like_count(video_id)

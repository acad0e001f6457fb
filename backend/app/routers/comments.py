"""
Comments router for video comments.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.dependencies.auth import CurrentUser
from app.dependencies.services import get_comment_service
from app.schemas.comment import CommentCreate, CommentPage, CommentResponse, CommentUpdate
from app.services.comment_service import CommentService

router = APIRouter(prefix="/comments", tags=["Comments"])

CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]


@router.get(
    "/{video_id}",
    response_model=CommentPage,
    summary="List comments on a video",
)
async def list_comments(
    video_id: str,
    comment_service: CommentServiceDep,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(10, ge=1, le=100, description="Comments per page"),
):
    """Newest first."""
    return await comment_service.list_comments(video_id, page, page_size)


@router.post(
    "/{video_id}",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a video",
)
async def add_comment(video_id: str, body: CommentCreate, current_user: CurrentUser, comment_service: CommentServiceDep):
    return await comment_service.add_comment(current_user, video_id, body)


@router.patch(
    "/c/{comment_id}",
    response_model=CommentResponse,
    summary="Edit a comment",
)
async def update_comment(
    comment_id: str,
    body: CommentUpdate,
    current_user: CurrentUser,
    comment_service: CommentServiceDep,
):
    return await comment_service.update_comment(current_user, comment_id, body)


@router.delete(
    "/c/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a comment",
)
async def delete_comment(comment_id: str, current_user: CurrentUser, comment_service: CommentServiceDep):
    await comment_service.delete_comment(current_user, comment_id)

"""
Playlists router for playlist CRUD and membership.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.dependencies.auth import CurrentUser
from app.dependencies.services import get_playlist_service
from app.schemas.playlist import (
    PlaylistCreate,
    PlaylistDetail,
    PlaylistName,
    PlaylistResponse,
    PlaylistUpdate,
    PlaylistVideoFlag,
)
from app.services.playlist_service import PlaylistService

router = APIRouter(prefix="/playlists", tags=["Playlists"])

PlaylistServiceDep = Annotated[PlaylistService, Depends(get_playlist_service)]


@router.post(
    "/",
    response_model=PlaylistResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a playlist",
)
async def create_playlist(body: PlaylistCreate, current_user: CurrentUser, playlist_service: PlaylistServiceDep):
    return await playlist_service.create_playlist(current_user, body)


@router.get(
    "/user/{user_id}",
    response_model=list[PlaylistDetail],
    summary="List a user's playlists",
)
async def user_playlists(user_id: str, current_user: CurrentUser, playlist_service: PlaylistServiceDep):
    """Playlists with their videos, most recently updated first."""
    return await playlist_service.list_user_playlists(user_id)


@router.get(
    "/user/{user_id}/names",
    response_model=list[PlaylistName],
    summary="List playlist names",
)
async def user_playlist_names(user_id: str, current_user: CurrentUser, playlist_service: PlaylistServiceDep):
    return await playlist_service.list_playlist_names(current_user, user_id)


@router.get(
    "/video/{video_id}",
    response_model=list[PlaylistVideoFlag],
    summary="Own playlists flagged by whether they contain a video",
)
async def playlists_for_video(video_id: str, current_user: CurrentUser, playlist_service: PlaylistServiceDep):
    return await playlist_service.list_playlists_for_video(current_user, video_id)


@router.patch(
    "/add/{video_id}/{playlist_id}",
    response_model=PlaylistResponse,
    summary="Add a video to a playlist",
)
async def add_video(video_id: str, playlist_id: str, current_user: CurrentUser, playlist_service: PlaylistServiceDep):
    return await playlist_service.add_video(current_user, video_id, playlist_id)


@router.patch(
    "/remove/{video_id}/{playlist_id}",
    response_model=PlaylistResponse,
    summary="Remove a video from a playlist",
)
async def remove_video(video_id: str, playlist_id: str, current_user: CurrentUser, playlist_service: PlaylistServiceDep):
    return await playlist_service.remove_video(current_user, video_id, playlist_id)


@router.get(
    "/{playlist_id}",
    response_model=PlaylistDetail,
    summary="Get playlist with videos",
)
async def get_playlist(playlist_id: str, current_user: CurrentUser, playlist_service: PlaylistServiceDep):
    """Playlist detail with videos in playlist order. Owner only."""
    return await playlist_service.get_playlist(current_user, playlist_id)


@router.patch(
    "/{playlist_id}",
    response_model=PlaylistResponse,
    summary="Update playlist",
)
async def update_playlist(
    playlist_id: str,
    body: PlaylistUpdate,
    current_user: CurrentUser,
    playlist_service: PlaylistServiceDep,
):
    return await playlist_service.update_playlist(current_user, playlist_id, body)


@router.delete(
    "/{playlist_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete playlist",
)
async def delete_playlist(playlist_id: str, current_user: CurrentUser, playlist_service: PlaylistServiceDep):
    await playlist_service.delete_playlist(current_user, playlist_id)

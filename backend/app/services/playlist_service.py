"""
Playlist service for playlist management.

Every mutation loads the playlist first (NotFound) and then checks the
acting identity owns it (Forbidden) before writing.
"""
import logging
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from app.core.exceptions import Conflict, InvalidArgument, NotFound
from app.core.ownership import ensure_owner
from app.database.databases import content_db
from app.database.ids import parse_object_id
from app.models.playlist import Playlist
from app.models.user import User
from app.schemas.playlist import (
    PlaylistCreate,
    PlaylistDetail,
    PlaylistName,
    PlaylistResponse,
    PlaylistUpdate,
    PlaylistVideoFlag,
)
from app.services.view_service import ViewService

logger = logging.getLogger(__name__)


class PlaylistService:
    """Service for playlist operations."""

    def __init__(self, identity_db_instance: AsyncIOMotorDatabase, content_db_instance: AsyncIOMotorDatabase):
        """Initialize with identity and content databases."""
        self.playlists = content_db_instance[content_db.Collections.PLAYLISTS]
        self.videos = content_db_instance[content_db.Collections.VIDEOS]
        self.views = ViewService(identity_db_instance, content_db_instance)

    @staticmethod
    def _to_response(playlist_doc: dict) -> PlaylistResponse:
        playlist = Playlist(**playlist_doc)
        return PlaylistResponse(
            id=playlist.id,
            name=playlist.name,
            description=playlist.description,
            owner=playlist.owner,
            videos=playlist.videos,
            created_at=playlist.created_at,
            updated_at=playlist.updated_at,
        )

    async def _load_owned(self, user: User, playlist_id: str) -> dict:
        """Fetch a playlist the acting identity owns."""
        playlist_doc = await self.playlists.find_one({"_id": parse_object_id(playlist_id, "playlist id")})
        if not playlist_doc:
            raise NotFound("Playlist does not exist")
        ensure_owner(user.id, playlist_doc["owner"], "You are not authorized to modify this playlist")
        return playlist_doc

    # ==================== Playlist CRUD ====================

    async def create_playlist(self, user: User, request: PlaylistCreate) -> PlaylistResponse:
        now = datetime.now(timezone.utc)
        playlist_doc = {
            "name": request.name,
            "description": request.description,
            "owner": parse_object_id(user.id, "user id"),
            "videos": [],
            "created_at": now,
            "updated_at": now,
        }
        result = await self.playlists.insert_one(playlist_doc)
        playlist_doc["_id"] = result.inserted_id
        logger.info("Playlist created playlist_id=%s user_id=%s", result.inserted_id, user.id)
        return self._to_response(playlist_doc)

    async def get_playlist(self, user: User, playlist_id: str) -> PlaylistDetail:
        """
        Playlist detail, visible to its owner only.

        Raises:
            NotFound: If the playlist does not exist
            Forbidden: If the viewer is not the owner
        """
        detail = await self.views.playlist_detail(playlist_id)
        ensure_owner(user.id, detail.owner, "You are not authorized to view this playlist")
        return detail

    async def update_playlist(self, user: User, playlist_id: str, request: PlaylistUpdate) -> PlaylistResponse:
        """
        Update name and/or description.

        Raises:
            InvalidArgument: If neither field is provided
        """
        update_data = {k: v for k, v in request.model_dump().items() if v is not None}
        if not update_data:
            raise InvalidArgument("Name or description is required")

        playlist_doc = await self._load_owned(user, playlist_id)
        update_data["updated_at"] = datetime.now(timezone.utc)
        updated = await self.playlists.find_one_and_update(
            {"_id": playlist_doc["_id"]},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise NotFound("Playlist does not exist")
        return self._to_response(updated)

    async def delete_playlist(self, user: User, playlist_id: str) -> None:
        playlist_doc = await self._load_owned(user, playlist_id)
        await self.playlists.delete_one({"_id": playlist_doc["_id"]})
        logger.info("Playlist deleted playlist_id=%s user_id=%s", playlist_doc["_id"], user.id)

    # ==================== Membership ====================

    async def add_video(self, user: User, video_id: str, playlist_id: str) -> PlaylistResponse:
        """
        Append a video to a playlist.

        Raises:
            NotFound: Playlist or video missing
            Forbidden: Not the owner
            InvalidArgument: If the video is unpublished
            Conflict: If the video is already in the playlist
        """
        video_oid = parse_object_id(video_id, "video id")
        playlist_doc = await self._load_owned(user, playlist_id)

        video = await self.videos.find_one({"_id": video_oid}, {"_id": 1, "is_published": 1})
        if not video:
            raise NotFound("Video not found")
        if not video.get("is_published", True):
            raise InvalidArgument("Video is not published")

        if video_oid in (playlist_doc.get("videos") or []):
            raise Conflict("Video is already in the playlist")

        # guarded push; a concurrent add of the same video matches nothing
        updated = await self.playlists.find_one_and_update(
            {"_id": playlist_doc["_id"], "videos": {"$ne": video_oid}},
            {
                "$push": {"videos": video_oid},
                "$set": {"updated_at": datetime.now(timezone.utc)},
            },
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise Conflict("Video is already in the playlist")
        return self._to_response(updated)

    async def remove_video(self, user: User, video_id: str, playlist_id: str) -> PlaylistResponse:
        """
        Remove a video from a playlist.

        Raises:
            NotFound: Playlist missing, or the video is not in it
            Forbidden: Not the owner
        """
        video_oid = parse_object_id(video_id, "video id")
        playlist_doc = await self._load_owned(user, playlist_id)

        updated = await self.playlists.find_one_and_update(
            {"_id": playlist_doc["_id"], "videos": video_oid},
            {
                "$pull": {"videos": video_oid},
                "$set": {"updated_at": datetime.now(timezone.utc)},
            },
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise NotFound("Video is not in the playlist")
        return self._to_response(updated)

    # ==================== Listings ====================

    async def list_user_playlists(self, user_id: str) -> list[PlaylistDetail]:
        return await self.views.user_playlists(user_id)

    async def list_playlist_names(self, user: User, user_id: str) -> list[PlaylistName]:
        ensure_owner(user.id, user_id, "You can only list your own playlists")
        return await self.views.playlist_names(user_id)

    async def list_playlists_for_video(self, user: User, video_id: str) -> list[PlaylistVideoFlag]:
        """The acting identity's playlists, flagged by whether they contain ``video_id``."""
        return await self.views.playlists_with_video_flag(user.id, video_id)

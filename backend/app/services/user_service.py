"""
User service for watch history and channel views.
"""
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from app.core.exceptions import NotFound
from app.database.databases import content_db, identity_db
from app.database.ids import parse_object_id
from app.models.user import User
from app.schemas.user import ChannelProfile, VideoSummary
from app.services.view_service import ViewService

logger = logging.getLogger(__name__)


class UserService:
    """Service for per-identity history and public channel lookups."""

    def __init__(self, identity_db_instance: AsyncIOMotorDatabase, content_db_instance: AsyncIOMotorDatabase):
        self.users = identity_db_instance[identity_db.Collections.USERS]
        self.videos = content_db_instance[content_db.Collections.VIDEOS]
        self.views = ViewService(identity_db_instance, content_db_instance)

    async def record_watch(self, user: User, video_id: str) -> list[str]:
        """
        Append a video to the watch history, moving it to the end if present.

        Returns:
            Watched video IDs, oldest first

        Raises:
            NotFound: If the video does not exist
        """
        video_oid = parse_object_id(video_id, "video id")
        if await self.videos.find_one({"_id": video_oid}, {"_id": 1}) is None:
            raise NotFound("Video not found")

        user_oid = parse_object_id(user.id, "user id")
        await self.users.update_one({"_id": user_oid}, {"$pull": {"watch_history": video_oid}})
        updated = await self.users.find_one_and_update(
            {"_id": user_oid},
            {"$push": {"watch_history": video_oid}},
            projection={"watch_history": 1},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise NotFound("User not found")
        return [str(v) for v in updated.get("watch_history", [])]

    async def get_watch_history(self, user: User) -> list[VideoSummary]:
        """Watched videos, most recent first."""
        history = await self.views.watch_history(user.id)
        history.reverse()
        return history

    async def remove_from_watch_history(self, user: User, video_id: str) -> list[str]:
        video_oid = parse_object_id(video_id, "video id")
        updated = await self.users.find_one_and_update(
            {"_id": parse_object_id(user.id, "user id")},
            {"$pull": {"watch_history": video_oid}},
            projection={"watch_history": 1},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise NotFound("User not found")
        return [str(v) for v in updated.get("watch_history", [])]

    async def clear_watch_history(self, user: User) -> None:
        await self.users.update_one(
            {"_id": parse_object_id(user.id, "user id")},
            {"$set": {"watch_history": []}},
        )
        logger.info("Watch history cleared user_id=%s", user.id)

    async def get_channel_profile(self, handle: str, viewer: Optional[User] = None) -> ChannelProfile:
        return await self.views.channel_profile(handle, viewer.id if viewer else None)

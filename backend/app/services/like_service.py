"""
Like service: toggling likes and reading like views.
"""
import logging
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from app.core.exceptions import NotFound
from app.database.databases import content_db
from app.database.ids import parse_object_id
from app.models.like import LikeTarget, LikeTargetKind
from app.models.user import User
from app.schemas.like import LikeCountResponse, LikedVideo, LikeToggleResponse, ToggleResult
from app.services.view_service import ViewService

logger = logging.getLogger(__name__)

TARGET_COLLECTIONS = {
    LikeTargetKind.VIDEO: content_db.Collections.VIDEOS,
    LikeTargetKind.COMMENT: content_db.Collections.COMMENTS,
    LikeTargetKind.TWEET: content_db.Collections.TWEETS,
}


class LikeService:
    """Service for like operations."""

    def __init__(self, identity_db_instance: AsyncIOMotorDatabase, content_db_instance: AsyncIOMotorDatabase):
        self.content_db = content_db_instance
        self.likes = content_db_instance[content_db.Collections.LIKES]
        self.views = ViewService(identity_db_instance, content_db_instance)

    async def _ensure_target_exists(self, target: LikeTarget) -> None:
        collection = self.content_db[TARGET_COLLECTIONS[LikeTargetKind(target.kind)]]
        if await collection.find_one({"_id": target.object_id}, {"_id": 1}) is None:
            raise NotFound(f"{LikeTargetKind(target.kind).value.capitalize()} not found")

    async def toggle_like(self, user: User, target: LikeTarget) -> LikeToggleResponse:
        """
        Remove the identity's like on ``target`` if present, otherwise add one.

        The unique (liked_by, target_kind, target_id) index guarantees at
        most one like per pair; a concurrent insert that loses the race is
        reported as "added" since the like exists either way.

        Raises:
            NotFound: If the target does not exist
        """
        await self._ensure_target_exists(target)

        criteria = {"liked_by": parse_object_id(user.id, "user id"), **target.to_filter()}
        kind = LikeTargetKind(target.kind).value

        removed = await self.likes.find_one_and_delete(criteria)
        if removed is not None:
            logger.info("Like removed user_id=%s %s=%s", user.id, kind, target.id)
            return LikeToggleResponse(status=ToggleResult.REMOVED, target_kind=kind, target_id=target.id)

        try:
            result = await self.likes.insert_one({**criteria, "created_at": datetime.now(timezone.utc)})
            like_id = str(result.inserted_id)
        except DuplicateKeyError:
            existing = await self.likes.find_one(criteria, {"_id": 1})
            like_id = str(existing["_id"]) if existing else None

        logger.info("Like added user_id=%s %s=%s", user.id, kind, target.id)
        return LikeToggleResponse(
            status=ToggleResult.ADDED,
            target_kind=kind,
            target_id=target.id,
            like_id=like_id,
        )

    async def liked_videos(self, user: User) -> list[LikedVideo]:
        return await self.views.liked_videos(user.id)

    async def video_like_count(self, video_id: str) -> LikeCountResponse:
        count = await self.views.video_like_count(video_id)
        return LikeCountResponse(video_id=video_id, video_likes=count)

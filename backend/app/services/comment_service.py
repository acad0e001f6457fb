"""
Comment service for video comments.
"""
import logging
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from app.core.exceptions import NotFound
from app.core.ownership import ensure_owner
from app.database.databases import content_db, identity_db
from app.database.ids import parse_object_id
from app.models.user import User
from app.models.comment import Comment
from app.schemas.comment import (
    CommentCreate,
    CommentPage,
    CommentResponse,
    CommentUpdate,
    CommentWithOwner,
)
from app.services.pipeline import count_related, embed_owners, match_many, project

logger = logging.getLogger(__name__)

COMMENT_FIELDS = ("_id", "content", "created_at", "owner")


class CommentService:
    """Service for comment operations."""

    def __init__(self, identity_db_instance: AsyncIOMotorDatabase, content_db_instance: AsyncIOMotorDatabase):
        self.users = identity_db_instance[identity_db.Collections.USERS]
        self.comments = content_db_instance[content_db.Collections.COMMENTS]
        self.videos = content_db_instance[content_db.Collections.VIDEOS]

    @staticmethod
    def _to_response(comment_doc: dict) -> CommentResponse:
        comment = Comment(**comment_doc)
        return CommentResponse(
            id=comment.id,
            content=comment.content,
            video=comment.video,
            owner=comment.owner,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )

    async def _require_video(self, video_id: str):
        video_oid = parse_object_id(video_id, "video id")
        if await self.videos.find_one({"_id": video_oid}, {"_id": 1}) is None:
            raise NotFound("Video not found")
        return video_oid

    async def _load_owned(self, user: User, comment_id: str) -> dict:
        comment_doc = await self.comments.find_one({"_id": parse_object_id(comment_id, "comment id")})
        if not comment_doc:
            raise NotFound("Comment not found")
        ensure_owner(user.id, comment_doc["owner"], "You are not authorized to modify this comment")
        return comment_doc

    async def list_comments(self, video_id: str, page: int = 1, page_size: int = 10) -> CommentPage:
        """
        One page of a video's comments, newest first, with owner projections.

        Raises:
            NotFound: If the video does not exist
        """
        video_oid = await self._require_video(video_id)
        criteria = {"video": video_oid}

        total = await count_related(self.comments, criteria)
        docs = await match_many(
            self.comments,
            criteria,
            sort=[("created_at", -1), ("_id", -1)],
            skip=(page - 1) * page_size,
            limit=page_size,
        )
        with_owners = await embed_owners(self.users, docs)

        return CommentPage(
            comments=[CommentWithOwner(**project(doc, COMMENT_FIELDS)) for doc in with_owners],
            total=total,
            page=page,
            page_size=page_size,
            has_more=page * page_size < total,
        )

    async def add_comment(self, user: User, video_id: str, request: CommentCreate) -> CommentResponse:
        video_oid = await self._require_video(video_id)
        comment_doc = {
            "content": request.content,
            "video": video_oid,
            "owner": parse_object_id(user.id, "user id"),
            "created_at": datetime.now(timezone.utc),
            "updated_at": None,
        }
        result = await self.comments.insert_one(comment_doc)
        comment_doc["_id"] = result.inserted_id
        return self._to_response(comment_doc)

    async def update_comment(self, user: User, comment_id: str, request: CommentUpdate) -> CommentResponse:
        """
        Edit a comment's content (owner only).

        Raises:
            NotFound: If the comment does not exist
            Forbidden: If the acting identity is not the author
        """
        comment_doc = await self._load_owned(user, comment_id)
        updated = await self.comments.find_one_and_update(
            {"_id": comment_doc["_id"]},
            {"$set": {"content": request.content, "updated_at": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise NotFound("Comment not found")
        return self._to_response(updated)

    async def delete_comment(self, user: User, comment_id: str) -> None:
        comment_doc = await self._load_owned(user, comment_id)
        await self.comments.delete_one({"_id": comment_doc["_id"]})
        logger.info("Comment deleted comment_id=%s user_id=%s", comment_doc["_id"], user.id)

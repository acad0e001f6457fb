"""
Relational view assembly.

Builds the denormalized, read-only views served to clients:
- channel profile with subscription aggregates
- playlist detail with videos in stored order
- watch history in recorded order
- liked videos, most recently liked first
- per-video like counts and playlist listings
"""
from typing import Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.exceptions import NotFound
from app.database.databases import content_db, identity_db
from app.database.ids import parse_object_id
from app.models.like import LikeTargetKind
from app.schemas.like import LikedVideo
from app.schemas.playlist import PlaylistDetail, PlaylistName, PlaylistVideoFlag
from app.schemas.user import ChannelProfile, VideoSummary
from app.services.pipeline import (
    count_related,
    embed_owners,
    join_by_ids,
    match_many,
    match_one,
    order_by_reference,
    project,
)

CHANNEL_FIELDS = ("_id", "handle", "full_name", "email", "avatar", "cover_image")
VIDEO_FIELDS = (
    "_id",
    "title",
    "description",
    "thumbnail",
    "video_file",
    "duration",
    "views",
    "is_published",
    "created_at",
    "owner",
)
LIKED_VIDEO_FIELDS = ("_id", "title", "thumbnail", "duration", "views", "created_at", "owner")
LIKED_VIDEO_OWNER_FIELDS = ("_id", "handle", "full_name")


class ViewService:
    """Service assembling relational views from the identity and content stores."""

    def __init__(self, identity_db_instance: AsyncIOMotorDatabase, content_db_instance: AsyncIOMotorDatabase):
        """Initialize with the identity and content databases."""
        self.users = identity_db_instance[identity_db.Collections.USERS]
        self.videos = content_db_instance[content_db.Collections.VIDEOS]
        self.likes = content_db_instance[content_db.Collections.LIKES]
        self.playlists = content_db_instance[content_db.Collections.PLAYLISTS]
        self.subscriptions = content_db_instance[content_db.Collections.SUBSCRIPTIONS]

    # ==================== Channel ====================

    async def channel_profile(self, handle: str, viewer_id: Optional[str] = None) -> ChannelProfile:
        """
        Public profile of the channel owned by ``handle``.

        Subscriptions are joined twice: once where the identity is the
        channel (subscribers) and once where it is the subscriber.
        ``is_subscribed`` tests the viewer's membership in the subscriber set.

        Raises:
            NotFound: If no identity has this handle
        """
        user = await match_one(self.users, {"handle": handle.lower()}, CHANNEL_FIELDS)
        if user is None:
            raise NotFound(f"Channel with the name {handle} does not exist")

        channel_id = user["_id"]
        subscriber_count = await count_related(self.subscriptions, {"channel": channel_id})
        subscribed_to_count = await count_related(self.subscriptions, {"subscriber": channel_id})

        is_subscribed = False
        if viewer_id is not None and ObjectId.is_valid(str(viewer_id)):
            is_subscribed = await count_related(
                self.subscriptions,
                {"channel": channel_id, "subscriber": ObjectId(str(viewer_id))},
            ) > 0

        return ChannelProfile(
            **project(user, CHANNEL_FIELDS),
            subscriber_count=subscriber_count,
            subscribed_to_count=subscribed_to_count,
            is_subscribed=is_subscribed,
        )

    # ==================== Videos ====================

    async def _videos_in_order(self, video_ids: list[ObjectId]) -> list[VideoSummary]:
        """Join videos and their owners, preserving the order of ``video_ids``."""
        if not video_ids:
            return []
        videos_by_id = await join_by_ids(self.videos, video_ids, VIDEO_FIELDS)
        ordered = order_by_reference(video_ids, videos_by_id)
        with_owners = await embed_owners(self.users, ordered)
        return [VideoSummary(**project(doc, VIDEO_FIELDS)) for doc in with_owners]

    # ==================== Playlists ====================

    async def playlist_detail(self, playlist_id: str) -> PlaylistDetail:
        """
        Playlist with its videos resolved, in the playlist's stored order.

        Not ownership-gated: callers that must restrict reads to the owner
        check ``PlaylistDetail.owner`` themselves.

        Raises:
            NotFound: If the playlist does not exist
        """
        oid = parse_object_id(playlist_id, "playlist id")
        playlist = await match_one(self.playlists, {"_id": oid})
        if playlist is None:
            raise NotFound("Playlist does not exist")

        videos = await self._videos_in_order(playlist.get("videos") or [])
        return PlaylistDetail(
            id=str(playlist["_id"]),
            name=playlist["name"],
            description=playlist.get("description", ""),
            owner=str(playlist["owner"]),
            updated_at=playlist.get("updated_at"),
            videos=videos,
        )

    async def user_playlists(self, owner_id: str) -> list[PlaylistDetail]:
        """All playlists of an owner with videos resolved, most recently updated first."""
        oid = parse_object_id(owner_id, "user id")
        playlists = await match_many(
            self.playlists,
            {"owner": oid},
            sort=[("updated_at", -1), ("_id", -1)],
        )

        details = []
        for playlist in playlists:
            details.append(
                PlaylistDetail(
                    id=str(playlist["_id"]),
                    name=playlist["name"],
                    description=playlist.get("description", ""),
                    owner=str(playlist["owner"]),
                    updated_at=playlist.get("updated_at"),
                    videos=await self._videos_in_order(playlist.get("videos") or []),
                )
            )
        return details

    async def playlist_names(self, owner_id: str) -> list[PlaylistName]:
        oid = parse_object_id(owner_id, "user id")
        playlists = await match_many(self.playlists, {"owner": oid}, fields=("_id", "name"))
        return [PlaylistName(**project(p, ("_id", "name"))) for p in playlists]

    async def playlists_with_video_flag(self, owner_id: str, video_id: str) -> list[PlaylistVideoFlag]:
        """Owner's playlists flagged by whether they contain ``video_id``, containing ones first."""
        owner_oid = parse_object_id(owner_id, "user id")
        video_oid = parse_object_id(video_id, "video id")
        playlists = await match_many(self.playlists, {"owner": owner_oid}, fields=("_id", "name", "videos"))

        flagged = [
            PlaylistVideoFlag(
                id=str(p["_id"]),
                name=p["name"],
                contains_video=video_oid in (p.get("videos") or []),
            )
            for p in playlists
        ]
        # stable sort keeps store order within each group
        return sorted(flagged, key=lambda p: not p.contains_video)

    # ==================== History ====================

    async def watch_history(self, identity_id: str) -> list[VideoSummary]:
        """
        Watched videos in the order recorded on the identity (oldest first).

        Raises:
            NotFound: If the identity does not exist
        """
        oid = parse_object_id(identity_id, "user id")
        user = await match_one(self.users, {"_id": oid}, ("_id", "watch_history"))
        if user is None:
            raise NotFound("User not found")
        return await self._videos_in_order(user.get("watch_history") or [])

    # ==================== Likes ====================

    async def liked_videos(self, identity_id: str) -> list[LikedVideo]:
        """
        Videos liked by an identity, most recently liked first.

        Only video-typed likes are surfaced; zero likes yields an empty list.
        """
        oid = parse_object_id(identity_id, "user id")
        likes = await match_many(
            self.likes,
            {"liked_by": oid, "target_kind": LikeTargetKind.VIDEO.value},
            sort=[("created_at", 1), ("_id", 1)],
            fields=("target_id",),
        )
        video_ids = [like["target_id"] for like in likes]
        if not video_ids:
            return []

        videos_by_id = await join_by_ids(self.videos, video_ids, LIKED_VIDEO_FIELDS)
        ordered = order_by_reference(video_ids, videos_by_id)
        with_owners = await embed_owners(self.users, ordered, owner_fields=LIKED_VIDEO_OWNER_FIELDS)

        liked = [LikedVideo(**project(doc, LIKED_VIDEO_FIELDS)) for doc in with_owners]
        liked.reverse()
        return liked

    async def video_like_count(self, video_id: str) -> int:
        """
        Number of likes on a video (0 when it has none).

        Raises:
            NotFound: If the video does not exist
        """
        oid = parse_object_id(video_id, "video id")
        video = await match_one(self.videos, {"_id": oid}, ("_id",))
        if video is None:
            raise NotFound("Video not found")
        return await count_related(
            self.likes,
            {"target_kind": LikeTargetKind.VIDEO.value, "target_id": oid},
        )

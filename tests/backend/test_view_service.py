"""
Tests for the relational view assembler and its query steps.
"""

from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId


# =============================================================================
# Query steps
# =============================================================================

class TestPipelineSteps:

    def test_order_by_reference_follows_reference_and_drops_missing(self):
        from app.services.pipeline import order_by_reference

        a, b, c = ObjectId(), ObjectId(), ObjectId()
        docs = {b: {"_id": b}, a: {"_id": a}}

        assert order_by_reference([a, c, b], docs) == [{"_id": a}, {"_id": b}]

    def test_project_renames_id_and_stringifies(self):
        from app.services.pipeline import project

        oid, owner = ObjectId(), ObjectId()
        doc = {"_id": oid, "title": "T", "owner": owner, "videos": [owner], "secret": "x"}

        projected = project(doc, ("_id", "title", "owner", "videos"))

        assert projected == {"id": str(oid), "title": "T", "owner": str(owner), "videos": [str(owner)]}

    def test_project_none_is_none(self):
        from app.services.pipeline import project

        assert project(None, ("_id",)) is None

    @pytest.mark.asyncio
    async def test_join_by_ids_returns_lookup_map(self, mock_content_db):
        from app.services.pipeline import join_by_ids

        videos = mock_content_db["videos"]
        ids = [(await videos.insert_one({"title": t})).inserted_id for t in ("one", "two")]

        joined = await join_by_ids(videos, [ids[1], ids[0], ids[1], None], fields=("_id", "title"))

        assert set(joined) == set(ids)
        assert joined[ids[0]]["title"] == "one"


# =============================================================================
# Watch history
# =============================================================================

class TestWatchHistory:

    @pytest.mark.asyncio
    async def test_history_is_most_recent_first(self, user_service, make_user, make_video):
        viewer = await make_user("viewer")
        creator = await make_user("creator")
        v1 = await make_video(creator, "v1")
        v2 = await make_video(creator, "v2")
        v3 = await make_video(creator, "v3")

        for video_id in (v1, v2, v3):
            await user_service.record_watch(viewer, video_id)

        history = await user_service.get_watch_history(viewer)

        assert [v.id for v in history] == [v3, v2, v1]
        assert history[0].owner.handle == "creator"
        assert history[0].owner.id == creator.id

    @pytest.mark.asyncio
    async def test_rewatch_moves_video_to_front(self, user_service, make_user, make_video):
        viewer = await make_user("viewer")
        v1 = await make_video(viewer, "v1")
        v2 = await make_video(viewer, "v2")

        await user_service.record_watch(viewer, v1)
        await user_service.record_watch(viewer, v2)
        stored = await user_service.record_watch(viewer, v1)

        assert stored == [v2, v1]
        history = await user_service.get_watch_history(viewer)
        assert [v.id for v in history] == [v1, v2]

    @pytest.mark.asyncio
    async def test_deleted_video_is_dropped_from_history(self, user_service, make_user, make_video, mock_content_db):
        viewer = await make_user("viewer")
        v1 = await make_video(viewer, "v1")
        v2 = await make_video(viewer, "v2")
        await user_service.record_watch(viewer, v1)
        await user_service.record_watch(viewer, v2)

        await mock_content_db["videos"].delete_one({"_id": ObjectId(v1)})

        history = await user_service.get_watch_history(viewer)
        assert [v.id for v in history] == [v2]

    @pytest.mark.asyncio
    async def test_record_unknown_video_raises_not_found(self, user_service, make_user):
        from app.core.exceptions import NotFound

        viewer = await make_user("viewer")

        with pytest.raises(NotFound):
            await user_service.record_watch(viewer, str(ObjectId()))

    @pytest.mark.asyncio
    async def test_remove_and_clear_history(self, user_service, make_user, make_video):
        viewer = await make_user("viewer")
        v1 = await make_video(viewer, "v1")
        v2 = await make_video(viewer, "v2")
        await user_service.record_watch(viewer, v1)
        await user_service.record_watch(viewer, v2)

        assert await user_service.remove_from_watch_history(viewer, v1) == [v2]

        await user_service.clear_watch_history(viewer)
        assert await user_service.get_watch_history(viewer) == []


# =============================================================================
# Channel profile
# =============================================================================

class TestChannelProfile:

    @pytest.mark.asyncio
    async def test_counts_and_viewer_subscription(self, view_service, make_user, make_subscription):
        channel = await make_user("channel")
        fan = await make_user("fan")
        other = await make_user("other")
        await make_subscription(fan, channel)
        await make_subscription(other, channel)
        await make_subscription(channel, other)

        profile = await view_service.channel_profile("Channel", viewer_id=fan.id)

        assert profile.handle == "channel"
        assert profile.subscriber_count == 2
        assert profile.subscribed_to_count == 1
        assert profile.is_subscribed is True

    @pytest.mark.asyncio
    async def test_anonymous_viewer_is_not_subscribed(self, view_service, make_user):
        await make_user("channel")

        profile = await view_service.channel_profile("channel")

        assert profile.subscriber_count == 0
        assert profile.is_subscribed is False

    @pytest.mark.asyncio
    async def test_unknown_handle_raises_not_found(self, view_service):
        from app.core.exceptions import NotFound

        with pytest.raises(NotFound):
            await view_service.channel_profile("ghost")


# =============================================================================
# Playlists
# =============================================================================

class TestPlaylistViews:

    @pytest.mark.asyncio
    async def test_detail_preserves_stored_order(self, view_service, mock_content_db, make_user, make_video):
        owner = await make_user("owner")
        v1 = await make_video(owner, "v1")
        v2 = await make_video(owner, "v2")
        v3 = await make_video(owner, "v3")
        result = await mock_content_db["playlists"].insert_one({
            "name": "Mix",
            "description": "Mixed",
            "owner": ObjectId(owner.id),
            "videos": [ObjectId(v2), ObjectId(v3), ObjectId(v1)],
            "updated_at": datetime.now(timezone.utc),
        })

        detail = await view_service.playlist_detail(str(result.inserted_id))

        assert [v.id for v in detail.videos] == [v2, v3, v1]
        assert detail.videos[0].owner.handle == "owner"
        assert detail.owner == owner.id

    @pytest.mark.asyncio
    async def test_empty_playlist_has_empty_video_list(self, view_service, mock_content_db, make_user):
        owner = await make_user("owner")
        result = await mock_content_db["playlists"].insert_one({
            "name": "Empty",
            "description": "Nothing yet",
            "owner": ObjectId(owner.id),
            "videos": [],
        })

        detail = await view_service.playlist_detail(str(result.inserted_id))

        assert detail.videos == []
        assert detail.model_dump()["videos"] == []

    @pytest.mark.asyncio
    async def test_missing_playlist_raises_not_found(self, view_service):
        from app.core.exceptions import NotFound

        with pytest.raises(NotFound):
            await view_service.playlist_detail(str(ObjectId()))

    @pytest.mark.asyncio
    async def test_user_playlists_most_recently_updated_first(self, view_service, mock_content_db, make_user):
        owner = await make_user("owner")
        now = datetime.now(timezone.utc)
        for name, age in (("old", 10), ("new", 0), ("mid", 5)):
            await mock_content_db["playlists"].insert_one({
                "name": name,
                "description": name,
                "owner": ObjectId(owner.id),
                "videos": [],
                "updated_at": now - timedelta(minutes=age),
            })

        playlists = await view_service.user_playlists(owner.id)

        assert [p.name for p in playlists] == ["new", "mid", "old"]

    @pytest.mark.asyncio
    async def test_video_flag_lists_containing_playlists_first(self, view_service, mock_content_db, make_user, make_video):
        owner = await make_user("owner")
        video = await make_video(owner, "v1")
        await mock_content_db["playlists"].insert_one(
            {"name": "without", "description": "d", "owner": ObjectId(owner.id), "videos": []}
        )
        await mock_content_db["playlists"].insert_one(
            {"name": "with", "description": "d", "owner": ObjectId(owner.id), "videos": [ObjectId(video)]}
        )

        flagged = await view_service.playlists_with_video_flag(owner.id, video)

        assert [(p.name, p.contains_video) for p in flagged] == [("with", True), ("without", False)]

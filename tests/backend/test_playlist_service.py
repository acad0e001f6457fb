"""
Tests for PlaylistService: CRUD, membership and ownership checks.
"""

import pytest
from bson import ObjectId


@pytest.fixture
def playlist_request():
    from app.schemas.playlist import PlaylistCreate
    return PlaylistCreate(name="Favorites", description="Best videos")


class TestPlaylistCrud:

    @pytest.mark.asyncio
    async def test_create_and_get(self, playlist_service, make_user, playlist_request):
        owner = await make_user("owner")

        created = await playlist_service.create_playlist(owner, playlist_request)
        detail = await playlist_service.get_playlist(owner, created.id)

        assert created.owner == owner.id
        assert created.videos == []
        assert detail.name == "Favorites"
        assert detail.videos == []

    @pytest.mark.asyncio
    async def test_get_by_non_owner_raises_forbidden(self, playlist_service, make_user, playlist_request):
        from app.core.exceptions import Forbidden

        owner = await make_user("owner")
        stranger = await make_user("stranger")
        created = await playlist_service.create_playlist(owner, playlist_request)

        with pytest.raises(Forbidden):
            await playlist_service.get_playlist(stranger, created.id)

    @pytest.mark.asyncio
    async def test_missing_playlist_is_not_found_before_forbidden(self, playlist_service, make_user):
        from app.core.exceptions import NotFound
        from app.schemas.playlist import PlaylistUpdate

        stranger = await make_user("stranger")

        with pytest.raises(NotFound):
            await playlist_service.update_playlist(stranger, str(ObjectId()), PlaylistUpdate(name="x"))

    @pytest.mark.asyncio
    async def test_update_requires_a_field(self, playlist_service, make_user, playlist_request):
        from app.core.exceptions import InvalidArgument
        from app.schemas.playlist import PlaylistUpdate

        owner = await make_user("owner")
        created = await playlist_service.create_playlist(owner, playlist_request)

        with pytest.raises(InvalidArgument):
            await playlist_service.update_playlist(owner, created.id, PlaylistUpdate())

    @pytest.mark.asyncio
    async def test_update_by_owner(self, playlist_service, make_user, playlist_request):
        from app.schemas.playlist import PlaylistUpdate

        owner = await make_user("owner")
        created = await playlist_service.create_playlist(owner, playlist_request)

        updated = await playlist_service.update_playlist(owner, created.id, PlaylistUpdate(name="Renamed"))

        assert updated.name == "Renamed"
        assert updated.description == "Best videos"

    @pytest.mark.asyncio
    async def test_delete_by_non_owner_leaves_playlist(self, playlist_service, make_user, playlist_request):
        from app.core.exceptions import Forbidden

        owner = await make_user("owner")
        stranger = await make_user("stranger")
        created = await playlist_service.create_playlist(owner, playlist_request)

        with pytest.raises(Forbidden):
            await playlist_service.delete_playlist(stranger, created.id)

        assert (await playlist_service.get_playlist(owner, created.id)).id == created.id

    @pytest.mark.asyncio
    async def test_delete_by_owner(self, playlist_service, make_user, playlist_request):
        from app.core.exceptions import NotFound

        owner = await make_user("owner")
        created = await playlist_service.create_playlist(owner, playlist_request)

        await playlist_service.delete_playlist(owner, created.id)

        with pytest.raises(NotFound):
            await playlist_service.get_playlist(owner, created.id)


class TestPlaylistMembership:

    @pytest.mark.asyncio
    async def test_add_videos_keeps_insertion_order(self, playlist_service, make_user, make_video, playlist_request):
        owner = await make_user("owner")
        v1 = await make_video(owner, "v1")
        v2 = await make_video(owner, "v2")
        created = await playlist_service.create_playlist(owner, playlist_request)

        await playlist_service.add_video(owner, v2, created.id)
        updated = await playlist_service.add_video(owner, v1, created.id)

        assert updated.videos == [v2, v1]
        detail = await playlist_service.get_playlist(owner, created.id)
        assert [v.id for v in detail.videos] == [v2, v1]

    @pytest.mark.asyncio
    async def test_add_duplicate_raises_conflict(self, playlist_service, make_user, make_video, playlist_request):
        from app.core.exceptions import Conflict

        owner = await make_user("owner")
        video = await make_video(owner, "v1")
        created = await playlist_service.create_playlist(owner, playlist_request)
        await playlist_service.add_video(owner, video, created.id)

        with pytest.raises(Conflict):
            await playlist_service.add_video(owner, video, created.id)

    @pytest.mark.asyncio
    async def test_add_missing_video_raises_not_found(self, playlist_service, make_user, playlist_request):
        from app.core.exceptions import NotFound

        owner = await make_user("owner")
        created = await playlist_service.create_playlist(owner, playlist_request)

        with pytest.raises(NotFound):
            await playlist_service.add_video(owner, str(ObjectId()), created.id)

    @pytest.mark.asyncio
    async def test_add_unpublished_video_raises_invalid_argument(
        self, playlist_service, make_user, make_video, playlist_request
    ):
        from app.core.exceptions import InvalidArgument

        owner = await make_user("owner")
        video = await make_video(owner, "draft", is_published=False)
        created = await playlist_service.create_playlist(owner, playlist_request)

        with pytest.raises(InvalidArgument):
            await playlist_service.add_video(owner, video, created.id)

    @pytest.mark.asyncio
    async def test_add_to_someone_elses_playlist_raises_forbidden(
        self, playlist_service, make_user, make_video, playlist_request
    ):
        from app.core.exceptions import Forbidden

        owner = await make_user("owner")
        stranger = await make_user("stranger")
        video = await make_video(stranger, "v1")
        created = await playlist_service.create_playlist(owner, playlist_request)

        with pytest.raises(Forbidden):
            await playlist_service.add_video(stranger, video, created.id)

    @pytest.mark.asyncio
    async def test_remove_video(self, playlist_service, make_user, make_video, playlist_request):
        owner = await make_user("owner")
        v1 = await make_video(owner, "v1")
        v2 = await make_video(owner, "v2")
        created = await playlist_service.create_playlist(owner, playlist_request)
        await playlist_service.add_video(owner, v1, created.id)
        await playlist_service.add_video(owner, v2, created.id)

        updated = await playlist_service.remove_video(owner, v1, created.id)

        assert updated.videos == [v2]

    @pytest.mark.asyncio
    async def test_remove_non_member_raises_not_found(self, playlist_service, make_user, make_video, playlist_request):
        from app.core.exceptions import NotFound

        owner = await make_user("owner")
        video = await make_video(owner, "v1")
        created = await playlist_service.create_playlist(owner, playlist_request)

        with pytest.raises(NotFound):
            await playlist_service.remove_video(owner, video, created.id)

    @pytest.mark.asyncio
    async def test_playlist_names_only_for_self(self, playlist_service, make_user, playlist_request):
        from app.core.exceptions import Forbidden

        owner = await make_user("owner")
        stranger = await make_user("stranger")
        await playlist_service.create_playlist(owner, playlist_request)

        names = await playlist_service.list_playlist_names(owner, owner.id)

        assert [n.name for n in names] == ["Favorites"]
        with pytest.raises(Forbidden):
            await playlist_service.list_playlist_names(stranger, owner.id)

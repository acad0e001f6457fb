"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with services wired to the mock
databases and helpers to seed users, videos and other content.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from bson import ObjectId

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "backend"))


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def auth_service(mock_identity_db, mock_mail_service, asset_storage, mock_async_redis):
    """AuthService on the mock identity database, with mail mocked."""
    from app.services.auth_service import AuthService
    return AuthService(mock_identity_db, mock_mail_service, asset_storage)


@pytest.fixture
def view_service(mock_identity_db, mock_content_db):
    from app.services.view_service import ViewService
    return ViewService(mock_identity_db, mock_content_db)


@pytest.fixture
def user_service(mock_identity_db, mock_content_db):
    from app.services.user_service import UserService
    return UserService(mock_identity_db, mock_content_db)


@pytest.fixture
def playlist_service(mock_identity_db, mock_content_db):
    from app.services.playlist_service import PlaylistService
    return PlaylistService(mock_identity_db, mock_content_db)


@pytest.fixture
def like_service(mock_identity_db, mock_content_db):
    from app.services.like_service import LikeService
    return LikeService(mock_identity_db, mock_content_db)


@pytest.fixture
def comment_service(mock_identity_db, mock_content_db):
    from app.services.comment_service import CommentService
    return CommentService(mock_identity_db, mock_content_db)


# =============================================================================
# Seeding Helpers
# =============================================================================

def user_document(handle: str, email: str | None = None, **overrides) -> dict:
    """An identity document as stored after a completed profile."""
    from app.core.security import hash_password

    now = datetime.now(timezone.utc)
    doc = {
        "handle": handle,
        "email": email or f"{handle}@example.com",
        "full_name": handle.capitalize(),
        "password_hash": hash_password("SecurePassword123!"),
        "avatar": f"http://testserver/media/{handle}.png",
        "avatar_public_id": None,
        "cover_image": None,
        "cover_image_public_id": None,
        "watch_history": [],
        "is_email_verified": True,
        "email_verification_token": None,
        "refresh_token": None,
        "profile_completed": True,
        "created_at": now,
        "updated_at": now,
    }
    doc.update(overrides)
    return doc


def video_document(owner_id: ObjectId, title: str, minutes_ago: int = 0, **overrides) -> dict:
    doc = {
        "title": title,
        "description": f"{title} description",
        "thumbnail": f"http://testserver/media/{title}.jpg",
        "video_file": f"http://testserver/media/{title}.mp4",
        "duration": 120.0,
        "views": 0,
        "is_published": True,
        "owner": owner_id,
        "created_at": datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
    }
    doc.update(overrides)
    return doc


@pytest_asyncio.fixture
async def make_user(mock_identity_db):
    """
    Insert an identity and return it as a ``User`` model.

    Usage:
        alice = await make_user("alice")
    """
    from app.database.databases import identity_db
    from app.models.user import User

    async def _make(handle: str, **overrides) -> "User":
        doc = user_document(handle, **overrides)
        result = await mock_identity_db[identity_db.Collections.USERS].insert_one(doc)
        doc["_id"] = result.inserted_id
        return User(**doc)

    return _make


@pytest_asyncio.fixture
async def make_video(mock_content_db):
    """Insert a video owned by ``owner`` (a User) and return its id as a string."""
    from app.database.databases import content_db

    async def _make(owner, title: str, **overrides) -> str:
        doc = video_document(ObjectId(owner.id), title, **overrides)
        result = await mock_content_db[content_db.Collections.VIDEOS].insert_one(doc)
        return str(result.inserted_id)

    return _make


@pytest_asyncio.fixture
async def make_comment(mock_content_db):
    from app.database.databases import content_db

    async def _make(owner, video_id: str, content: str = "Nice video", minutes_ago: int = 0) -> str:
        result = await mock_content_db[content_db.Collections.COMMENTS].insert_one({
            "content": content,
            "video": ObjectId(video_id),
            "owner": ObjectId(owner.id),
            "created_at": datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
            "updated_at": None,
        })
        return str(result.inserted_id)

    return _make


@pytest_asyncio.fixture
async def make_subscription(mock_content_db):
    from app.database.databases import content_db

    async def _make(subscriber, channel) -> None:
        await mock_content_db[content_db.Collections.SUBSCRIPTIONS].insert_one({
            "subscriber": ObjectId(subscriber.id),
            "channel": ObjectId(channel.id),
            "created_at": datetime.now(timezone.utc),
        })

    return _make


# =============================================================================
# HTTP Seeding Helpers
# =============================================================================

@pytest.fixture
def seed_video(client, app_mongo_client):
    """
    Insert a video into the app's store from a synchronous route test.

    Runs on the TestClient's event loop through its blocking portal.
    """
    from app.database.databases import content_db

    def _seed(owner_id: str, title: str, **overrides) -> str:
        collection = app_mongo_client[content_db.DB_NAME][content_db.Collections.VIDEOS]
        doc = video_document(ObjectId(owner_id), title, **overrides)
        result = client.portal.call(collection.insert_one, doc)
        return str(result.inserted_id)

    return _seed


# =============================================================================
# Response Assertion Helpers
# =============================================================================

@pytest.fixture
def assert_error_response():
    """Helper to assert error response structure."""
    def _assert(response, status_code: int, detail_contains: str = None):
        assert response.status_code == status_code
        data = response.json()
        assert "detail" in data
        if detail_contains:
            assert detail_contains.lower() in data["detail"].lower()
    return _assert

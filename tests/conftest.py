"""
Global test fixtures for the VideoShare backend.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor)
- Mock Redis (fakeredis)
- Mail and asset storage collaborators
- Test user data
"""

import sys
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))


# =============================================================================
# MongoDB Fixtures (mongomock-motor)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.

    Indexes are created exactly as at application startup, so unique
    email / handle / like constraints are enforced.
    """
    from mongomock_motor import AsyncMongoMockClient
    from app.database.registry import create_indexes

    client = AsyncMongoMockClient()
    await create_indexes(client)
    yield client
    client.close()


@pytest.fixture
def mock_identity_db(mock_async_mongo_client):
    """Provide mock identity_db database."""
    from app.database.databases import identity_db
    return mock_async_mongo_client[identity_db.DB_NAME]


@pytest.fixture
def mock_content_db(mock_async_mongo_client):
    """Provide mock content_db database."""
    from app.database.databases import content_db
    return mock_async_mongo_client[content_db.DB_NAME]


# =============================================================================
# Redis Fixtures (fakeredis)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_redis(monkeypatch):
    """
    Create an async mock Redis client using fakeredis and install it as the
    process-wide client used by the rate limiter.
    """
    import fakeredis.aioredis
    from app.database import connections

    redis_client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    monkeypatch.setattr(connections, "_redis_client", redis_client)
    yield redis_client
    await redis_client.flushall()


# =============================================================================
# Collaborator Fixtures
# =============================================================================

@pytest.fixture
def test_settings(tmp_path):
    """Settings with media and upload dirs under a temp directory."""
    from app.config import Settings

    return Settings(
        media_root=str(tmp_path / "media"),
        upload_tmp_dir=str(tmp_path / "uploads"),
        media_base_url="http://testserver/media",
        client_scheme="https",
        client_host="videoshare.test",
    )


@pytest.fixture
def mock_mail_service():
    """
    A mail dispatcher whose sends are AsyncMocks.

    Tokens that would be mailed can be read back from the call args:

        token = mock_mail_service.send_verification_email.call_args.args[2]
    """
    service = MagicMock()
    service.send = AsyncMock()
    service.send_verification_email = AsyncMock()
    service.send_password_reset_email = AsyncMock()
    return service


@pytest.fixture
def asset_storage(test_settings):
    """Local-disk asset storage rooted in a temp directory."""
    from app.services.asset_storage import AssetStorage
    return AssetStorage(test_settings)


# =============================================================================
# User Fixtures
# =============================================================================

@pytest.fixture
def test_user_data() -> dict:
    """Registration payload."""
    return {
        "email": "testuser@example.com",
        "password": "SecurePassword123!",
        "full_name": "Test User",
    }


@pytest.fixture
def png_upload():
    """Factory for (filename, bytes, content type) multipart file tuples."""
    def _make(name: str = "avatar.png"):
        return (name, b"\x89PNG\r\n\x1a\nfake-image-bytes", "image/png")
    return _make


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================

@pytest.fixture
def app():
    """
    The FastAPI app.

    Note: use together with ``client`` which installs mock connections.
    """
    from app.main import app
    return app


@pytest.fixture
def app_mongo_client():
    """The in-memory Mongo client installed behind the app by ``client``."""
    from mongomock_motor import AsyncMongoMockClient
    return AsyncMongoMockClient()


@pytest.fixture
def client(app, monkeypatch, app_mongo_client, mock_mail_service, asset_storage) -> Generator:
    """
    A TestClient whose Mongo and Redis connections are in-memory mocks.

    The lifespan runs inside the client context, so registry sync and
    index creation happen on the mock store exactly as in production.
    """
    import fakeredis.aioredis

    from app.database import connections
    from app.dependencies.services import get_asset_storage, get_mail_service

    monkeypatch.setattr(connections, "_mongo_client", app_mongo_client)
    monkeypatch.setattr(connections, "_redis_client", fakeredis.aioredis.FakeRedis(decode_responses=True))

    app.dependency_overrides[get_mail_service] = lambda: mock_mail_service
    app.dependency_overrides[get_asset_storage] = lambda: asset_storage

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def bearer():
    """Build an Authorization header for an access token."""
    def _headers(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}
    return _headers

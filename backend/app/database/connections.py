"""
Process-wide MongoDB and Redis clients.

Both clients are created lazily on first use and shared by every request.
Mongo is opened ``tz_aware`` so timestamps read back compare correctly with
the UTC datetimes the services write.
"""
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from redis.asyncio import Redis

from app.config import get_settings
from app.database.databases import content_db, identity_db

logger = logging.getLogger(__name__)

_mongo_client: Optional[AsyncIOMotorClient] = None
_redis_client: Optional[Redis] = None


async def get_mongo_client() -> AsyncIOMotorClient:
    """Shared Motor client for the entity store."""
    global _mongo_client
    if _mongo_client is None:
        settings = get_settings()
        _mongo_client = AsyncIOMotorClient(
            settings.mongo_uri,
            tz_aware=True,
            serverSelectionTimeoutMS=settings.mongo_timeout_ms,
        )
        logger.info("MongoDB client created")
    return _mongo_client


async def get_redis_client() -> Redis:
    """Shared Redis client for rate limiting and lockouts."""
    global _redis_client
    if _redis_client is None:
        settings = get_settings()
        _redis_client = Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            decode_responses=True,
            socket_timeout=settings.redis_timeout_seconds,
        )
        logger.info("Redis client created host=%s port=%s", settings.redis_host, settings.redis_port)
    return _redis_client


async def get_identity_database() -> AsyncIOMotorDatabase:
    client = await get_mongo_client()
    return client[identity_db.DB_NAME]


async def get_content_database() -> AsyncIOMotorDatabase:
    client = await get_mongo_client()
    return client[content_db.DB_NAME]


async def close_connections() -> None:
    """Close and forget both clients; the next use reconnects."""
    global _mongo_client, _redis_client

    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None

    if _redis_client is not None:
        await _redis_client.close()
        _redis_client = None

    logger.info("Database connections closed")

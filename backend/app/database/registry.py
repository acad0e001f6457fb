"""
Database registry management.
Ensures all databases and collections are registered on startup.
"""
import logging
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorClient

from app.database.databases import content_db, identity_db

logger = logging.getLogger(__name__)

# Registry location; one document per application database
REGISTRY_DB_NAME = "system_db"
REGISTRY_COLLECTION = "db_registry"
SCHEMA_VERSION = "1.0"

ALL_DB_MANIFESTS = [
    identity_db.DB_MANIFEST,
    content_db.DB_MANIFEST,
]


async def _upsert_stamped(collection, key: dict, fields: dict, now: datetime) -> None:
    await collection.update_one(
        key,
        {"$set": fields, "$setOnInsert": {"created_at": now}},
        upsert=True,
    )


async def sync_registry(client: AsyncIOMotorClient) -> None:
    """
    Record every application database in the registry on startup.

    Each database also gets a ``_metadata`` document so it exists in
    Mongo even before its first write.
    """
    registry = client[REGISTRY_DB_NAME][REGISTRY_COLLECTION]
    now = datetime.now(timezone.utc)

    for manifest in ALL_DB_MANIFESTS:
        db_name = manifest["db_name"]
        await _upsert_stamped(
            registry,
            {"_id": db_name},
            {
                "purpose": manifest["purpose"],
                "collections": manifest["collections"],
                "access_level": manifest["access_level"],
                "schema_version": SCHEMA_VERSION,
                "updated_at": now,
            },
            now,
        )
        await _upsert_stamped(
            client[db_name]["_metadata"],
            {"_id": "db_metadata"},
            {"db_name": db_name, "last_updated_at": now},
            now,
        )

    logger.info("Registry synced for %d databases", len(ALL_DB_MANIFESTS))


async def create_indexes(client: AsyncIOMotorClient) -> None:
    """
    Create necessary indexes for all databases.

    The unique indexes on users.email and users.handle are what reject
    concurrent registrations / profile completions that race past the
    service-level existence checks.
    """
    users = client[identity_db.DB_NAME][identity_db.Collections.USERS]
    await users.create_index("email", unique=True)
    await users.create_index("handle", unique=True)

    await content_db.create_content_indexes(client[content_db.DB_NAME])
    logger.info("Indexes ensured for %s and %s", identity_db.DB_NAME, content_db.DB_NAME)

"""
Database module - MongoDB and Redis connections and database definitions.
"""
from app.database.connections import (
    close_connections,
    get_content_database,
    get_identity_database,
    get_mongo_client,
    get_redis_client,
)
from app.database.databases import content_db, identity_db
from app.database.ids import parse_object_id, stringify_id

__all__ = [
    "close_connections",
    "get_content_database",
    "get_identity_database",
    "get_mongo_client",
    "get_redis_client",
    "content_db",
    "identity_db",
    "parse_object_id",
    "stringify_id",
]

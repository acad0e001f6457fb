"""
Content database configuration.
Stores videos and the per-user resources attached to them.

Structure:
- videos: Uploaded videos (written by the video service)
- comments: Comments on videos
- tweets: Short channel posts (like targets)
- likes: One document per (liked_by, target_kind, target_id)
- playlists: User playlists with ordered video references
- subscriptions: subscriber -> channel edges
- _metadata: Database metadata
"""
from motor.motor_asyncio import AsyncIOMotorDatabase

DB_NAME = "content_db"


class Collections:
    """Collection names in content_db."""
    VIDEOS = "videos"
    COMMENTS = "comments"
    TWEETS = "tweets"
    LIKES = "likes"
    PLAYLISTS = "playlists"
    SUBSCRIPTIONS = "subscriptions"
    METADATA = "_metadata"

    # Index definitions for each collection
    INDEXES = {
        "videos": [
            {"keys": [("owner", 1)]},
        ],
        "comments": [
            {"keys": [("video", 1), ("created_at", -1)]},
        ],
        "likes": [
            {
                "keys": [("liked_by", 1), ("target_kind", 1), ("target_id", 1)],
                "unique": True,
            },
            {"keys": [("target_kind", 1), ("target_id", 1)]},
        ],
        "playlists": [
            {"keys": [("owner", 1), ("updated_at", -1)]},
        ],
        "subscriptions": [
            {"keys": [("subscriber", 1), ("channel", 1)], "unique": True},
            {"keys": [("channel", 1)]},
        ],
    }


async def create_content_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create indexes for content database collections."""
    for collection_name, indexes in Collections.INDEXES.items():
        collection = db[collection_name]
        for index_def in indexes:
            keys = index_def["keys"]
            kwargs = {k: v for k, v in index_def.items() if k != "keys"}
            await collection.create_index(keys, **kwargs)


# Manifest for registry
DB_MANIFEST = {
    "db_name": DB_NAME,
    "purpose": "Videos, comments, likes, playlists and subscriptions",
    "collections": [
        Collections.VIDEOS,
        Collections.COMMENTS,
        Collections.TWEETS,
        Collections.LIKES,
        Collections.PLAYLISTS,
        Collections.SUBSCRIPTIONS,
        Collections.METADATA,
    ],
    "access_level": "standard",
}

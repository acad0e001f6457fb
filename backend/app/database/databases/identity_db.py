"""
Identity database configuration.
Stores user identities, credentials and session mirrors.
"""

DB_NAME = "identity_db"


class Collections:
    """Collection names in identity_db."""
    USERS = "users"
    METADATA = "_metadata"


# Manifest for registry
DB_MANIFEST = {
    "db_name": DB_NAME,
    "purpose": "User identity, credentials and session state",
    "collections": [Collections.USERS, Collections.METADATA],
    "access_level": "restricted",
}

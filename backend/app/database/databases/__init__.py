"""
Database definitions and collection constants.
"""
from app.database.databases import identity_db, content_db

__all__ = ["identity_db", "content_db"]

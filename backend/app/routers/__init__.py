"""
API Routers module.
"""
from app.routers import comments, health, likes, playlists, users

__all__ = ["comments", "health", "likes", "playlists", "users"]

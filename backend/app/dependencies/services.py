"""
Service providers for dependency injection in routes.

Tests swap collaborators through ``app.dependency_overrides``.
"""
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database.connections import get_content_database, get_identity_database
from app.services.asset_storage import AssetStorage
from app.services.auth_service import AuthService
from app.services.comment_service import CommentService
from app.services.like_service import LikeService
from app.services.mail_service import MailService
from app.services.playlist_service import PlaylistService
from app.services.user_service import UserService


@lru_cache
def get_mail_service() -> MailService:
    return MailService()


@lru_cache
def get_asset_storage() -> AssetStorage:
    return AssetStorage()


IdentityDB = Annotated[AsyncIOMotorDatabase, Depends(get_identity_database)]
ContentDB = Annotated[AsyncIOMotorDatabase, Depends(get_content_database)]


def get_auth_service(
    db: IdentityDB,
    mail: Annotated[MailService, Depends(get_mail_service)],
    storage: Annotated[AssetStorage, Depends(get_asset_storage)],
) -> AuthService:
    return AuthService(db, mail, storage)


def get_user_service(identity: IdentityDB, content: ContentDB) -> UserService:
    return UserService(identity, content)


def get_playlist_service(identity: IdentityDB, content: ContentDB) -> PlaylistService:
    return PlaylistService(identity, content)


def get_like_service(identity: IdentityDB, content: ContentDB) -> LikeService:
    return LikeService(identity, content)


def get_comment_service(identity: IdentityDB, content: ContentDB) -> CommentService:
    return CommentService(identity, content)

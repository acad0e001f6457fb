"""
Authentication service: registration, login, sessions and passwords.

Session model:
- access tokens are self-contained and never stored
- the identity's ``refresh_token`` field mirrors the single live refresh
  token; a refresh token is accepted only while it equals that field, so
  logout and rotation revoke by store comparison rather than by expiry
- the identity's ``email_verification_token`` mirrors the single live
  verification token
"""
import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from fastapi import UploadFile
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.config import get_settings
from app.core.exceptions import (
    Conflict,
    InvalidArgument,
    NotFound,
    TokenInvalid,
    Unauthorized,
)
from app.core.rate_limit import (
    check_user_lockout,
    increment_failed_login,
    reset_failed_attempts,
    set_user_lockout,
)
from app.core.security import (
    TokenPurpose,
    default_ttl,
    hash_password,
    issue_token,
    verify_password,
    verify_token,
)
from app.database.databases import identity_db
from app.database.ids import parse_object_id
from app.models.user import PLACEHOLDER_HANDLE_PREFIX, User
from app.schemas.auth import (
    ChangePasswordRequest,
    EmailVerificationStatus,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
)
from app.schemas.user import UserResponse, UserUpdate
from app.services.asset_storage import AssetStorage, StoredAsset, ensure_image
from app.services.mail_service import MailService

logger = logging.getLogger(__name__)

HANDLE_RE = re.compile(r"^[a-zA-Z0-9_]+$")


def _password_fields(plain_password: str) -> dict:
    """Fields to $set when the password changes; the only place hashing happens."""
    return {"password_hash": hash_password(plain_password)}


def _now() -> datetime:
    return datetime.now(timezone.utc)


class AuthService:
    """Service for identity and session lifecycle operations."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        mail: Optional[MailService] = None,
        storage: Optional[AssetStorage] = None,
    ):
        """Initialize with identity database and the mail/asset collaborators."""
        self.db = db
        self.users_collection = db[identity_db.Collections.USERS]
        self.mail = mail or MailService()
        self.storage = storage or AssetStorage()
        self.settings = get_settings()

    # ==================== Lookups ====================

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """
        Get user by ID.

        Returns:
            User model or None if not found (or the ID is malformed)
        """
        if not ObjectId.is_valid(str(user_id)):
            return None

        user_doc = await self.users_collection.find_one({"_id": ObjectId(str(user_id))})
        if not user_doc:
            return None
        return User(**user_doc)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        user_doc = await self.users_collection.find_one({"email": email.lower()})
        if not user_doc:
            return None
        return User(**user_doc)

    async def _require_user(self, user_id: str) -> dict:
        user_doc = await self.users_collection.find_one(
            {"_id": parse_object_id(user_id, "user id")}
        )
        if not user_doc:
            raise NotFound("User not found")
        return user_doc

    # ==================== Registration ====================

    async def register_user(self, request: RegisterRequest) -> UserResponse:
        """
        Register a new identity (phase 1).

        The identity starts with a placeholder handle and the default avatar,
        and an email verification token is stored and mailed.

        Raises:
            Conflict: If the email is already registered
            DispatchError: If the verification email cannot be sent
        """
        email = request.email.lower()

        existing = await self.users_collection.find_one({"email": email})
        if existing:
            raise Conflict(f"A user with email {email} already exists")

        now = _now()
        user_doc = {
            "handle": f"{PLACEHOLDER_HANDLE_PREFIX}{uuid.uuid4().hex[:16]}",
            "email": email,
            "full_name": request.full_name,
            **_password_fields(request.password),
            "avatar": self.settings.default_avatar_path,
            "avatar_public_id": None,
            "cover_image": None,
            "cover_image_public_id": None,
            "watch_history": [],
            "is_email_verified": False,
            "email_verification_token": None,
            "refresh_token": None,
            "profile_completed": False,
            "created_at": now,
            "updated_at": now,
        }

        try:
            result = await self.users_collection.insert_one(user_doc)
        except DuplicateKeyError:
            raise Conflict(f"A user with email {email} already exists")

        user_id = str(result.inserted_id)
        token = issue_token(user_id, TokenPurpose.EMAIL_VERIFY)
        await self.users_collection.update_one(
            {"_id": result.inserted_id},
            {"$set": {"email_verification_token": token}},
        )
        user_doc["_id"] = result.inserted_id
        user_doc["email_verification_token"] = token
        logger.info("Registered user_id=%s", user_id)

        # a dispatch failure leaves the stored token in place; resend recovers
        await self.mail.send_verification_email(email, request.full_name, token)

        return UserResponse.from_user(User(**user_doc))

    async def complete_profile(
        self,
        user: User,
        handle: str,
        avatar: Optional[UploadFile],
        cover_image: Optional[UploadFile] = None,
    ) -> UserResponse:
        """
        Finish account creation (phase 2): choose a handle and avatar.

        Uploads happen before the identity is touched. If any upload or the
        final write fails, assets stored by this call are removed and the
        handle is not persisted.

        Raises:
            InvalidArgument: Bad handle or image
            Conflict: If the handle belongs to another identity
            DispatchError: If an upload fails
        """
        handle = (handle or "").strip()
        if not handle or not HANDLE_RE.match(handle):
            raise InvalidArgument(
                "Handle should not be empty and can only contain letters, numbers, and underscores"
            )
        handle = handle.lower()
        ensure_image(avatar, "Avatar")
        ensure_image(cover_image, "Cover image", required=False)

        user_oid = parse_object_id(user.id, "user id")
        taken = await self.users_collection.find_one(
            {"handle": handle, "_id": {"$ne": user_oid}}, {"_id": 1}
        )
        if taken:
            raise Conflict(f"Handle {handle} is already taken")

        stored: list[StoredAsset] = []
        try:
            avatar_asset = await self.storage.upload(avatar)
            stored.append(avatar_asset)

            cover_asset = None
            if cover_image is not None and cover_image.filename:
                cover_asset = await self.storage.upload(cover_image)
                stored.append(cover_asset)

            updated = await self.users_collection.find_one_and_update(
                {"_id": user_oid},
                {
                    "$set": {
                        "handle": handle,
                        "avatar": avatar_asset.url,
                        "avatar_public_id": avatar_asset.public_id,
                        "cover_image": cover_asset.url if cover_asset else None,
                        "cover_image_public_id": cover_asset.public_id if cover_asset else None,
                        "profile_completed": True,
                        "updated_at": _now(),
                    }
                },
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            await self._discard_assets(stored)
            raise Conflict(f"Handle {handle} is already taken")
        except Exception:
            await self._discard_assets(stored)
            raise

        if updated is None:
            await self._discard_assets(stored)
            raise NotFound("User not found")

        # replaced assets are released only after the new ones are in place
        await self.storage.remove(user.avatar_public_id)
        await self.storage.remove(user.cover_image_public_id)

        logger.info("Profile completed user_id=%s handle=%s", user.id, handle)
        return UserResponse.from_user(User(**updated))

    async def _discard_assets(self, assets: list[StoredAsset]) -> None:
        for asset in assets:
            await self.storage.remove(asset.public_id)

    # ==================== Email verification ====================

    async def verify_email(self, token: str) -> UserResponse:
        """
        Consume an email verification token.

        Raises:
            TokenInvalid / TokenExpired: Bad token, or one superseded by a resend
            NotFound: If the subject identity no longer exists
            Conflict: If the email is already verified
        """
        claims = verify_token(token, TokenPurpose.EMAIL_VERIFY)
        user_doc = await self._require_user(claims.subject)

        if user_doc.get("is_email_verified"):
            raise Conflict("Email is already verified")

        updated = await self.users_collection.find_one_and_update(
            {
                "_id": user_doc["_id"],
                "is_email_verified": False,
                "email_verification_token": token,
            },
            {
                "$set": {"is_email_verified": True, "updated_at": _now()},
                "$unset": {"email_verification_token": ""},
            },
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            # lost a race with another verification, or the token was superseded
            current = await self._require_user(claims.subject)
            if current.get("is_email_verified"):
                raise Conflict("Email is already verified")
            raise TokenInvalid("Verification token is no longer valid")

        logger.info("Email verified user_id=%s", claims.subject)
        return UserResponse.from_user(User(**updated))

    async def resend_verification(self, email: str) -> None:
        """
        Issue a fresh verification token, replacing any outstanding one.

        Raises:
            NotFound: If no identity has this email
            Conflict: If the email is already verified
            DispatchError: If the email cannot be sent
        """
        user_doc = await self.users_collection.find_one({"email": email.lower()})
        if not user_doc:
            raise NotFound("User not found")
        if user_doc.get("is_email_verified"):
            raise Conflict("Email is already verified")

        token = issue_token(str(user_doc["_id"]), TokenPurpose.EMAIL_VERIFY)
        await self.users_collection.update_one(
            {"_id": user_doc["_id"]},
            {"$set": {"email_verification_token": token, "updated_at": _now()}},
        )
        await self.mail.send_verification_email(user_doc["email"], user_doc["full_name"], token)

    async def email_verification_status(self, user: User) -> EmailVerificationStatus:
        return EmailVerificationStatus(
            is_email_verified=user.is_email_verified,
            email=user.email,
            full_name=user.full_name,
        )

    # ==================== Sessions ====================

    async def _issue_session(self, user_id: str) -> tuple[str, str]:
        access_token = issue_token(user_id, TokenPurpose.ACCESS)
        refresh_token = issue_token(user_id, TokenPurpose.REFRESH)
        return access_token, refresh_token

    def _session_response(self, access_token: str, refresh_token: str, user_doc: dict) -> LoginResponse:
        return LoginResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="bearer",
            expires_in=int(default_ttl(TokenPurpose.ACCESS).total_seconds()),
            user=UserResponse.from_user(User(**user_doc)),
        )

    async def login(self, request: LoginRequest) -> LoginResponse:
        """
        Authenticate by handle or email and start a session.

        Any previously stored refresh token is overwritten, which revokes it.

        Raises:
            InvalidArgument: If neither handle nor email is given
            NotFound: If no identity matches
            Unauthorized: Wrong password or account temporarily locked
        """
        criteria = []
        if request.handle:
            criteria.append({"handle": request.handle.lower()})
        if request.email:
            criteria.append({"email": request.email.lower()})
        if not criteria:
            raise InvalidArgument("Handle or email is required")

        user_doc = await self.users_collection.find_one({"$or": criteria})
        if not user_doc:
            raise NotFound("User does not exist, please create an account")

        user_id = str(user_doc["_id"])

        if await check_user_lockout(user_id):
            raise Unauthorized("Account temporarily locked due to too many failed attempts")

        if not verify_password(request.password, user_doc.get("password_hash", "")):
            failed_count = await increment_failed_login(user_id)
            if failed_count >= self.settings.user_lockout_threshold:
                await set_user_lockout(user_id, self.settings.user_lockout_duration_minutes)
            logger.info("Failed login user_id=%s attempts=%s", user_id, failed_count)
            raise Unauthorized("Invalid user credentials")

        await reset_failed_attempts(user_id)

        access_token, refresh_token = await self._issue_session(user_id)
        updated = await self.users_collection.find_one_and_update(
            {"_id": user_doc["_id"]},
            {"$set": {"refresh_token": refresh_token}},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise NotFound("User does not exist, please create an account")

        logger.info("Login user_id=%s", user_id)
        return self._session_response(access_token, refresh_token, updated)

    async def logout(self, user: User) -> None:
        """Revoke the stored refresh token."""
        await self.users_collection.update_one(
            {"_id": parse_object_id(user.id, "user id")},
            {"$unset": {"refresh_token": ""}},
        )
        logger.info("Logout user_id=%s", user.id)

    async def refresh(self, refresh_token: Optional[str]) -> LoginResponse:
        """
        Rotate a session: exchange the current refresh token for a new pair.

        The swap is a single conditional update on ``refresh_token``, so a
        rotated-out or logged-out token can never be exchanged twice.

        Raises:
            Unauthorized: Missing token, unknown subject, or not the stored token
            TokenInvalid / TokenExpired: Signature or expiry failure
        """
        if not refresh_token:
            raise Unauthorized("Unauthorized request")

        claims = verify_token(refresh_token, TokenPurpose.REFRESH)
        if not ObjectId.is_valid(claims.subject):
            raise Unauthorized("Invalid refresh token")
        user_oid = ObjectId(claims.subject)

        if await self.users_collection.find_one({"_id": user_oid}, {"_id": 1}) is None:
            raise Unauthorized("Invalid refresh token")

        access_token, new_refresh_token = await self._issue_session(claims.subject)
        updated = await self.users_collection.find_one_and_update(
            {"_id": user_oid, "refresh_token": refresh_token},
            {"$set": {"refresh_token": new_refresh_token}},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            logger.warning("Rejected stale refresh token user_id=%s", claims.subject)
            raise Unauthorized("Invalid or expired refresh token")

        return self._session_response(access_token, new_refresh_token, updated)

    # ==================== Passwords ====================

    async def forgot_password(self, email: str) -> None:
        """
        Mail a short-lived password reset link.

        Raises:
            NotFound: If no identity has this email
            DispatchError: If the email cannot be sent
        """
        user_doc = await self.users_collection.find_one({"email": email.lower()})
        if not user_doc:
            raise NotFound("User not found")

        token = issue_token(str(user_doc["_id"]), TokenPurpose.PASSWORD_RESET)
        await self.mail.send_password_reset_email(user_doc["email"], user_doc["full_name"], token)

    async def reset_password(self, token: str, new_password: str) -> None:
        """
        Set a new password using a reset token.

        Reset tokens carry no one-shot marker: an unexpired token can be
        replayed until it expires.

        Raises:
            TokenInvalid / TokenExpired: Bad token
            NotFound: If the subject identity no longer exists
        """
        claims = verify_token(token, TokenPurpose.PASSWORD_RESET)
        user_doc = await self._require_user(claims.subject)

        await self.users_collection.update_one(
            {"_id": user_doc["_id"]},
            {"$set": {**_password_fields(new_password), "updated_at": _now()}},
        )
        logger.info("Password reset user_id=%s", claims.subject)

    async def change_password(self, user: User, request: ChangePasswordRequest) -> None:
        """
        Change password after verifying the current one.

        Raises:
            Unauthorized: If the old password is incorrect
            InvalidArgument: If the new password and confirmation differ
        """
        user_doc = await self._require_user(user.id)

        if not verify_password(request.old_password, user_doc.get("password_hash", "")):
            raise Unauthorized("Old password is incorrect")

        if request.new_password != request.confirm_new_password:
            raise InvalidArgument("Passwords do not match")

        await self.users_collection.update_one(
            {"_id": user_doc["_id"]},
            {"$set": {**_password_fields(request.new_password), "updated_at": _now()}},
        )
        logger.info("Password changed user_id=%s", user.id)

    # ==================== Account ====================

    async def get_current_identity(self, user: User) -> UserResponse:
        return UserResponse.from_user(user)

    async def update_account_details(self, user: User, request: UserUpdate) -> UserResponse:
        """
        Update email and/or display name.

        Raises:
            InvalidArgument: If neither field is provided
            Conflict: If the email belongs to another identity
        """
        update_data = {k: v for k, v in request.model_dump().items() if v is not None}
        if not update_data:
            raise InvalidArgument("Email or full name must be provided")

        user_oid = parse_object_id(user.id, "user id")
        if "email" in update_data:
            update_data["email"] = update_data["email"].lower()
            taken = await self.users_collection.find_one(
                {"email": update_data["email"], "_id": {"$ne": user_oid}}, {"_id": 1}
            )
            if taken:
                raise Conflict(f"A user with email {update_data['email']} already exists")

        update_data["updated_at"] = _now()
        try:
            updated = await self.users_collection.find_one_and_update(
                {"_id": user_oid},
                {"$set": update_data},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise Conflict("Email is already registered")

        if updated is None:
            raise NotFound("User not found")
        return UserResponse.from_user(User(**updated))

    async def _replace_image(self, user: User, upload: Optional[UploadFile], field: str, label: str) -> UserResponse:
        ensure_image(upload, label)
        user_oid = parse_object_id(user.id, "user id")

        asset = await self.storage.upload(upload)
        try:
            updated = await self.users_collection.find_one_and_update(
                {"_id": user_oid},
                {"$set": {field: asset.url, f"{field}_public_id": asset.public_id, "updated_at": _now()}},
                return_document=ReturnDocument.AFTER,
            )
        except Exception:
            await self.storage.remove(asset.public_id)
            raise

        if updated is None:
            await self.storage.remove(asset.public_id)
            raise NotFound("User not found")

        await self.storage.remove(getattr(user, f"{field}_public_id"))
        return UserResponse.from_user(User(**updated))

    async def update_avatar(self, user: User, upload: Optional[UploadFile]) -> UserResponse:
        return await self._replace_image(user, upload, "avatar", "Avatar")

    async def update_cover_image(self, user: User, upload: Optional[UploadFile]) -> UserResponse:
        return await self._replace_image(user, upload, "cover_image", "Cover image")

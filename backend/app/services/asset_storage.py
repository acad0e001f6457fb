"""
Local-disk asset storage for avatar and cover images.

Uploads are first staged to a temp file, then moved under ``media_root``
and addressed by a generated public id. The staged temp file is removed
whether storing succeeds or fails.
"""
import asyncio
import logging
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from app.config import Settings, get_settings
from app.core.exceptions import DispatchError, InvalidArgument

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif"}


@dataclass(frozen=True)
class StoredAsset:
    """Where a stored asset can be fetched and how to delete it."""
    url: str
    public_id: str


def ensure_image(upload: Optional[UploadFile], label: str, required: bool = True) -> None:
    """
    Validate an uploaded image.

    Raises:
        InvalidArgument: If a required image is missing or the type is not JPEG/PNG/GIF
    """
    if upload is None or not upload.filename:
        if required:
            raise InvalidArgument(f"{label} file is required")
        return
    if upload.content_type not in ALLOWED_IMAGE_TYPES:
        raise InvalidArgument(f"{label} must be a valid image file (JPEG, PNG, GIF)")


class AssetStorage:
    """Stores assets on local disk under ``settings.media_root``."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.media_root = Path(self.settings.media_root)
        self.tmp_dir = Path(self.settings.upload_tmp_dir)

    async def stage(self, upload: UploadFile) -> Path:
        """Write an upload to a temp file and return its path."""
        self.tmp_dir.mkdir(parents=True, exist_ok=True)
        suffix = Path(upload.filename or "").suffix
        path = self.tmp_dir / f"{uuid.uuid4().hex}{suffix}"
        try:
            data = await upload.read()
            await asyncio.to_thread(path.write_bytes, data)
        except Exception:
            path.unlink(missing_ok=True)
            raise
        return path

    def _move(self, local_path: Path, public_id: str) -> Path:
        self.media_root.mkdir(parents=True, exist_ok=True)
        destination = self.media_root / f"{public_id}{local_path.suffix}"
        shutil.copyfile(local_path, destination)
        return destination

    async def store(self, local_path: Path) -> StoredAsset:
        """
        Persist a staged file.

        Raises:
            DispatchError: If the file cannot be stored
        """
        public_id = uuid.uuid4().hex
        try:
            destination = await asyncio.to_thread(self._move, local_path, public_id)
        except OSError as e:
            logger.error("Asset store failed path=%s: %s", local_path, e)
            raise DispatchError("Something went wrong while uploading the file") from e
        finally:
            local_path.unlink(missing_ok=True)

        url = f"{self.settings.media_base_url.rstrip('/')}/{destination.name}"
        return StoredAsset(url=url, public_id=public_id)

    async def upload(self, upload: UploadFile) -> StoredAsset:
        """Stage and store an upload in one step."""
        return await self.store(await self.stage(upload))

    def _remove_blocking(self, public_id: str) -> None:
        for path in self.media_root.glob(f"{public_id}.*"):
            path.unlink(missing_ok=True)
        (self.media_root / public_id).unlink(missing_ok=True)

    async def remove(self, public_id: Optional[str]) -> None:
        """Delete a stored asset; unknown ids are ignored."""
        if not public_id:
            return
        await asyncio.to_thread(self._remove_blocking, public_id)
        logger.info("Asset removed public_id=%s", public_id)

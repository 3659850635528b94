"""
Storage for uploaded video files and campaign assets.
"""

import logging
import random
import time
from pathlib import Path
from typing import Tuple

from fastapi import UploadFile

from adventure.core.config import settings
from adventure.exceptions import ValidationError

logger = logging.getLogger(__name__)

VIDEO_FIELD = "video"
ASSET_FIELD = "asset"

# Uploads are streamed to disk in pieces of this size
UPLOAD_CHUNK_SIZE = 1024 * 1024

# field name -> (subdirectory, allowed mime prefixes)
UPLOAD_KINDS = {
    VIDEO_FIELD: ("videos", ("video/",)),
    ASSET_FIELD: ("assets", ("image/", "video/")),
}


class StorageService:
    """Saves uploads to disk under UPLOAD_DIR"""

    def __init__(self, root: str | None = None, max_size: int | None = None):
        self.root = Path(root or settings.UPLOAD_DIR)
        self.max_size = max_size or settings.MAX_UPLOAD_SIZE

    def ensure_directories(self) -> None:
        """Create upload directories if missing"""
        for subdir, _ in UPLOAD_KINDS.values():
            directory = self.root / subdir
            if not directory.exists():
                directory.mkdir(parents=True, exist_ok=True)
                logger.info("Created directory: %s", directory)

    def directory_for(self, field: str) -> Path:
        return self.root / UPLOAD_KINDS[field][0]

    async def save_upload(self, field: str, upload: UploadFile) -> str:
        """Validate and store an upload, returning its relative path"""
        if field not in UPLOAD_KINDS:
            raise ValidationError("Invalid field name")

        subdir, allowed_prefixes = UPLOAD_KINDS[field]
        content_type = upload.content_type or ""
        if not content_type.startswith(allowed_prefixes):
            if field == VIDEO_FIELD:
                raise ValidationError("Only video files are allowed")
            raise ValidationError("Only image and video files are allowed for assets")

        filename, relative_path = self._unique_name(field, subdir, upload.filename or "")
        directory = self.root / subdir
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename

        size = 0
        try:
            with open(path, "wb") as out:
                while True:
                    chunk = await upload.read(UPLOAD_CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_size:
                        raise ValidationError(f"File size exceeds {self.max_size // (1024 * 1024)}MB limit")
                    out.write(chunk)

            if size == 0:
                raise ValidationError("Empty file")
        except Exception:
            # Partial files never stay on disk
            path.unlink(missing_ok=True)
            raise

        logger.info("Stored %s upload at %s (%d bytes)", field, relative_path, size)
        return relative_path

    def _unique_name(self, field: str, subdir: str, original_name: str) -> Tuple[str, str]:
        suffix = Path(original_name).suffix
        unique = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
        filename = f"{field}-{unique}{suffix}"
        return filename, (self.root / subdir / filename).as_posix()


storage_service = StorageService()

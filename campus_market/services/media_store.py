# campus_market/services/media_store.py
"""
Media store clients: take a binary blob, hand back a durable URL.

Two backends are provided:
  - CloudinaryMediaStore (production): uploads through the Cloudinary SDK
  - LocalMediaStore (development): writes files under MEDIA_DIR, served at /media
"""
import asyncio
import io
import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

import cloudinary.uploader

from campus_market.config import Settings
from campus_market.core.errors import UploadError
from campus_market.utils.media import safe_ext

logger = logging.getLogger(__name__)


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


@dataclass
class MediaBlob:
    filename: str
    content_type: Optional[str]
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class MediaStore:
    """Interface: `await store(blob, kind)` returns a URL or raises UploadError."""

    async def store(self, blob: MediaBlob, kind: MediaKind) -> str:
        raise NotImplementedError


class CloudinaryMediaStore(MediaStore):
    def __init__(self, cloud_name: str, api_key: str, api_secret: str, folder: str = "futa-market"):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder

    async def store(self, blob: MediaBlob, kind: MediaKind) -> str:
        # credentials go with every call instead of the SDK's global config
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload,
                io.BytesIO(blob.data),
                folder=self.folder,
                resource_type=kind.value,
                cloud_name=self.cloud_name,
                api_key=self.api_key,
                api_secret=self.api_secret,
            )
        except Exception as e:
            logger.error("Cloudinary %s upload failed for %s: %s", kind.value, blob.filename, e)
            raise UploadError(str(e)) from e
        url = result.get("secure_url") if isinstance(result, dict) else None
        if not url:
            raise UploadError(f"Cloudinary returned no URL for {blob.filename}")
        logger.info("Uploaded %s %s -> %s", kind.value, blob.filename, url)
        return url


class LocalMediaStore(MediaStore):
    def __init__(self, base_dir: str, public_base_url: str, url_prefix: str = "/media"):
        self.base_dir = Path(base_dir)
        self.public_base_url = public_base_url.rstrip("/")
        self.url_prefix = "/" + url_prefix.strip("/")

    async def store(self, blob: MediaBlob, kind: MediaKind) -> str:
        ext = safe_ext(blob.filename) or (".jpg" if kind is MediaKind.IMAGE else ".mp4")
        rel = Path(f"{kind.value}s") / f"{uuid.uuid4().hex}{ext}"
        path = self.base_dir / rel
        try:
            await asyncio.to_thread(self._write, path, blob.data)
        except OSError as e:
            raise UploadError(str(e)) from e
        return f"{self.public_base_url}{self.url_prefix}/{rel.as_posix()}"

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)


def build_media_store(settings: Settings) -> MediaStore:
    backend = (settings.MEDIA_BACKEND or "").strip().lower()
    if backend == "local":
        return LocalMediaStore(settings.MEDIA_DIR, settings.PUBLIC_BASE_URL)
    if backend == "cloudinary":
        if not settings.CLOUDINARY_CLOUD_NAME:
            logger.warning("CLOUDINARY_CLOUD_NAME is not set; uploads will fail")
        return CloudinaryMediaStore(
            settings.CLOUDINARY_CLOUD_NAME,
            settings.CLOUDINARY_API_KEY,
            settings.CLOUDINARY_API_SECRET,
            folder=settings.MEDIA_FOLDER,
        )
    raise ValueError(f"Unknown MEDIA_BACKEND: {settings.MEDIA_BACKEND!r}")

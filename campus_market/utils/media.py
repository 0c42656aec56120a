# campus_market/utils/media.py
import io
import os
from typing import Optional

from PIL import Image, UnidentifiedImageError

# extensions we accept when the client sends a generic content type
IMAGE_EXT = {".jpg", ".jpeg", ".png", ".webp", ".gif", ".bmp", ".heic"}
VIDEO_EXT = {".mp4", ".mov", ".webm", ".mkv", ".avi", ".m4v", ".3gp"}


def safe_ext(filename: Optional[str]) -> str:
    _, ext = os.path.splitext(filename or "")
    return ext.lower()


def _declared(content_type: Optional[str], major: str) -> bool:
    return (content_type or "").lower().startswith(f"{major}/")


def looks_like_image(filename: Optional[str], content_type: Optional[str], data: bytes) -> bool:
    """
    An image is accepted if the client declared image/*, or, failing that,
    if Pillow can identify the bytes.
    """
    if _declared(content_type, "image"):
        return True
    try:
        with Image.open(io.BytesIO(data)) as im:
            im.verify()
        return True
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        return safe_ext(filename) in IMAGE_EXT and not _declared(content_type, "video")


def looks_like_video(filename: Optional[str], content_type: Optional[str]) -> bool:
    if _declared(content_type, "video"):
        return True
    if _declared(content_type, "image") or _declared(content_type, "text"):
        return False
    return safe_ext(filename) in VIDEO_EXT

# tests/test_media_store.py
import asyncio
from pathlib import Path

import pytest

from campus_market.config import Settings
from campus_market.core.errors import UploadError
from campus_market.services import media_store as media_module
from campus_market.services.media_store import (
    CloudinaryMediaStore,
    LocalMediaStore,
    MediaBlob,
    MediaKind,
    build_media_store,
)


def test_cloudinary_store_passes_kind_folder_and_credentials(monkeypatch):
    seen = {}

    def fake_upload(file, **options):
        seen["data"] = file.read()
        seen.update(options)
        return {"secure_url": "https://res.cloudinary.com/demo/video/upload/v1/futa-market/abc.mp4"}

    monkeypatch.setattr(media_module.cloudinary.uploader, "upload", fake_upload)
    store = CloudinaryMediaStore("demo", "key", "secret", folder="futa-market")
    url = asyncio.run(store.store(MediaBlob("clip.mp4", "video/mp4", b"abc"), MediaKind.VIDEO))

    assert url.startswith("https://res.cloudinary.com/demo/")
    assert seen["data"] == b"abc"
    assert seen["resource_type"] == "video"
    assert seen["folder"] == "futa-market"
    assert (seen["cloud_name"], seen["api_key"], seen["api_secret"]) == ("demo", "key", "secret")


def test_cloudinary_failure_becomes_upload_error(monkeypatch):
    def boom(file, **options):
        raise RuntimeError("Invalid api_key")

    monkeypatch.setattr(media_module.cloudinary.uploader, "upload", boom)
    store = CloudinaryMediaStore("demo", "bad", "secret")
    with pytest.raises(UploadError) as exc:
        asyncio.run(store.store(MediaBlob("a.jpg", "image/jpeg", b"x"), MediaKind.IMAGE))
    assert "Invalid api_key" in str(exc.value)


def test_local_store_writes_file_and_returns_url(tmp_path):
    store = LocalMediaStore(str(tmp_path), "http://localhost:5000/")
    url = asyncio.run(store.store(MediaBlob("pic.png", "image/png", b"png-bytes"), MediaKind.IMAGE))
    assert url.startswith("http://localhost:5000/media/images/")
    assert url.endswith(".png")
    rel = url.split("/media/", 1)[1]
    assert (Path(tmp_path) / rel).read_bytes() == b"png-bytes"


def test_build_media_store_picks_backend(tmp_path):
    local = build_media_store(Settings(MEDIA_BACKEND="local", MEDIA_DIR=str(tmp_path)))
    assert isinstance(local, LocalMediaStore)
    cloud = build_media_store(Settings(MEDIA_BACKEND="cloudinary", CLOUDINARY_CLOUD_NAME="demo"))
    assert isinstance(cloud, CloudinaryMediaStore)
    with pytest.raises(ValueError):
        build_media_store(Settings(MEDIA_BACKEND="ftp"))

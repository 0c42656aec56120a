# tests/conftest.py
import os
import sys
import tempfile
import io
from PIL import Image

import pytest
from fastapi.testclient import TestClient

# ensure project root is importable
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# point the module-level app at a throwaway data dir before it is imported
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="test_data_"))

from campus_market.config import Settings  # noqa: E402
from campus_market.core.errors import UploadError  # noqa: E402
from campus_market.main import create_app  # noqa: E402
from campus_market.services.media_store import MediaStore  # noqa: E402

ADMIN_PASSWORD = "test-admin-secret"


class RecordingMediaStore(MediaStore):
    """
    Stands in for Cloudinary: remembers every stored blob and hands back
    predictable URLs. `fail_on` makes the n-th call (1-based) raise UploadError.
    """

    def __init__(self, fail_on=None):
        self.calls = []
        self.fail_on = fail_on

    async def store(self, blob, kind):
        n = len(self.calls) + 1
        if self.fail_on is not None and n == self.fail_on:
            raise UploadError(f"upload {n} rejected")
        self.calls.append((kind.value, blob.filename, blob.data))
        return f"https://media.test/{kind.value}/{n}-{blob.filename}"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATA_DIR=tmp_path / "data",
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        MEDIA_BACKEND="cloudinary",
        MEDIA_DIR=str(tmp_path / "media"),
    )


@pytest.fixture
def media_store():
    return RecordingMediaStore()


@pytest.fixture
def app(settings, media_store):
    return create_app(settings, media_store=media_store)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def admin_headers():
    return {"x-admin-password": ADMIN_PASSWORD}


@pytest.fixture
def make_sample_jpeg_bytes():
    """
    Return a callable that generates JPEG bytes for tests that need image uploads.
    Usage: jpg = make_sample_jpeg_bytes(size=(200,200))
    """
    def _fn(size=(200, 200), color=(180, 120, 60)):
        bio = io.BytesIO()
        im = Image.new("RGB", size, color)
        im.save(bio, format="JPEG", quality=85)
        bio.seek(0)
        return bio.read()
    return _fn


@pytest.fixture
def image_part(make_sample_jpeg_bytes):
    """Build a multipart `images` entry: image_part("a.jpg")."""
    def _fn(name="photo.jpg"):
        return ("images", (name, make_sample_jpeg_bytes(), "image/jpeg"))
    return _fn


@pytest.fixture
def create_section(client, admin_headers):
    def _fn(title="Electronics"):
        resp = client.post("/sections", json={"title": title}, headers=admin_headers)
        assert resp.status_code == 200, resp.text
        return resp.json()
    return _fn

# tests/test_product_workflow.py
import asyncio

import pytest

from campus_market.core.errors import Forbidden, PersistenceError, UploadError
from campus_market.core.security import AccessGuard
from campus_market.database import FileBackedDB
from campus_market.repositories.products import ProductRepository
from campus_market.repositories.sections import SectionRepository
from campus_market.services.media_store import MediaBlob
from campus_market.services.product_workflow import ProductMutationWorkflow


SECRET = "s3cret"


class FakeUpload:
    """Mimics starlette's UploadFile: async read() plus filename/content_type."""

    def __init__(self, filename, content_type, data):
        self.filename = filename
        self.content_type = content_type
        self._data = data

    async def read(self):
        return self._data


@pytest.fixture
def products(tmp_path):
    db = FileBackedDB(tmp_path)
    return ProductRepository(db, SectionRepository(db))


@pytest.fixture
def store(media_store):
    return media_store


@pytest.fixture
def workflow(products, store):
    return ProductMutationWorkflow(AccessGuard(SECRET), store, products, max_upload_bytes=10_000)


def _jpeg(name, make_sample_jpeg_bytes):
    return MediaBlob(filename=name, content_type="image/jpeg", data=make_sample_jpeg_bytes((20, 20)))


def test_create_uploads_then_persists(workflow, products, store, make_sample_jpeg_bytes):
    images = [_jpeg("1.jpg", make_sample_jpeg_bytes), _jpeg("2.jpg", make_sample_jpeg_bytes)]
    product = asyncio.run(workflow.create(SECRET, {"title": "Fan", "available": "true"}, images))
    assert product.images == ["https://media.test/image/1-1.jpg", "https://media.test/image/2-2.jpg"]
    assert product.available is True
    assert products.get(product.id).images == product.images


def test_accepts_upload_file_like_objects(workflow, make_sample_jpeg_bytes):
    upload = FakeUpload("cam.jpg", "image/jpeg", make_sample_jpeg_bytes((10, 10)))
    video = FakeUpload("clip.webm", "application/octet-stream", b"webm")
    product = asyncio.run(workflow.create(SECRET, {"title": "Cam"}, [upload], video))
    assert product.images == ["https://media.test/image/1-cam.jpg"]
    assert product.video == "https://media.test/video/2-clip.webm"


def test_empty_file_parts_are_ignored(workflow, store):
    empty = FakeUpload("", "application/octet-stream", b"")
    product = asyncio.run(workflow.create(SECRET, {"title": "Nothing"}, [empty], empty))
    assert product.images == []
    assert product.video is None
    assert store.calls == []


def test_bad_credential_stops_before_upload(workflow, products, store, make_sample_jpeg_bytes):
    with pytest.raises(Forbidden):
        asyncio.run(workflow.create("wrong", {"title": "X"}, [_jpeg("1.jpg", make_sample_jpeg_bytes)]))
    assert store.calls == []
    assert products.list() == []


def test_upload_error_propagates_without_persisting(workflow, products, store, make_sample_jpeg_bytes):
    store.fail_on = 1
    with pytest.raises(UploadError):
        asyncio.run(workflow.create(SECRET, {"title": "X"}, [_jpeg("1.jpg", make_sample_jpeg_bytes)]))
    assert products.list() == []


def test_update_of_missing_product_is_persistence_error_after_upload(workflow, store, make_sample_jpeg_bytes):
    with pytest.raises(PersistenceError):
        asyncio.run(workflow.update("ghost", SECRET, {"title": "X"}, [_jpeg("1.jpg", make_sample_jpeg_bytes)]))
    # the blob was already stored and is not compensated
    assert len(store.calls) == 1


def test_update_video_only_keeps_images(workflow, make_sample_jpeg_bytes):
    product = asyncio.run(workflow.create(SECRET, {"title": "X"}, [_jpeg("1.jpg", make_sample_jpeg_bytes)]))
    video = MediaBlob(filename="v.mp4", content_type="video/mp4", data=b"v")
    updated = asyncio.run(workflow.update(product.id, SECRET, {"title": "X"}, [], video))
    assert updated.images == product.images
    assert updated.video == "https://media.test/video/2-v.mp4"

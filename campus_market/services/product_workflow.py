# campus_market/services/product_workflow.py
"""
Product create/update workflow:

    authorizing -> validating_input -> uploading_media -> persisting -> done

with `failed` reachable from every step. Media is uploaded before the record is
written; a failed upload aborts the request and blobs already stored are left
in the media store (their URLs are logged as orphaned).
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from campus_market.core import state_machine as states
from campus_market.core.errors import MarketError, PayloadTooLarge, PersistenceError, ValidationError
from campus_market.core.security import AccessGuard
from campus_market.core.state_machine import StateMachine, WORKFLOW_TRANSITIONS
from campus_market.models.product import Product
from campus_market.repositories.products import ProductRepository
from campus_market.schemas.product import ProductFields
from campus_market.services.media_store import MediaBlob, MediaKind, MediaStore
from campus_market.utils.media import looks_like_image, looks_like_video

logger = logging.getLogger(__name__)


@dataclass
class ProductMutation:
    """Typed request: scalar fields plus the attached media, in received order."""
    fields: ProductFields
    images: List[MediaBlob] = field(default_factory=list)
    video: Optional[MediaBlob] = None

    @property
    def total_bytes(self) -> int:
        return sum(b.size for b in self.images) + (self.video.size if self.video else 0)


@dataclass
class UploadedMedia:
    image_urls: Optional[List[str]] = None
    video_url: Optional[str] = None

    def all_urls(self) -> List[str]:
        return list(self.image_urls or []) + ([self.video_url] if self.video_url else [])


async def _read_blob(upload: Any) -> Optional[MediaBlob]:
    """Accept a MediaBlob or an UploadFile-like object; empty file parts become None."""
    if upload is None:
        return None
    if isinstance(upload, MediaBlob):
        blob = upload
    else:
        data = await upload.read()
        blob = MediaBlob(
            filename=getattr(upload, "filename", None) or "",
            content_type=getattr(upload, "content_type", None),
            data=data or b"",
        )
    if not blob.data and not blob.filename:
        return None
    return blob


class ProductMutationWorkflow:
    def __init__(self, guard: AccessGuard, media_store: MediaStore, products: ProductRepository,
                 max_upload_bytes: int):
        self.guard = guard
        self.media_store = media_store
        self.products = products
        self.max_upload_bytes = max_upload_bytes

    async def create(self, credential: Optional[str], raw_fields: Dict[str, Any],
                     images: Iterable[Any] = (), video: Any = None) -> Product:
        def persist(mutation: ProductMutation, media: UploadedMedia) -> Product:
            return self.products.create(mutation.fields, media.image_urls or [], media.video_url)

        return await self._run("create", credential, raw_fields, images, video, persist)

    async def update(self, product_id: str, credential: Optional[str], raw_fields: Dict[str, Any],
                     images: Iterable[Any] = (), video: Any = None) -> Product:
        def persist(mutation: ProductMutation, media: UploadedMedia) -> Product:
            return self.products.update(product_id, mutation.fields, media.image_urls, media.video_url)

        return await self._run(f"update {product_id}", credential, raw_fields, images, video, persist)

    async def _run(self, label: str, credential: Optional[str], raw_fields: Dict[str, Any],
                   images: Iterable[Any], video: Any,
                   persist: Callable[[ProductMutation, UploadedMedia], Product]) -> Product:
        sm = StateMachine(state=states.AUTHORIZING, allowed_transitions=WORKFLOW_TRANSITIONS)
        media = UploadedMedia()
        try:
            self.guard.require(credential)
            sm.apply(states.VALIDATING_INPUT)

            mutation = await self._validate(raw_fields, images, video)
            sm.apply(states.UPLOADING_MEDIA, meta={"images": len(mutation.images), "video": bool(mutation.video)})

            await self._upload(mutation, media)
            sm.apply(states.PERSISTING)

            # table lock and CSV I/O stay off the event loop
            product = await asyncio.to_thread(persist, mutation, media)
            sm.apply(states.DONE, meta={"id": product.id})
        except MarketError as e:
            self._fail(sm, label, type(e).__name__, e, media)
            raise
        except Exception as e:
            self._fail(sm, label, "InternalError", e, media)
            raise
        logger.info("Product %s done: %s", label, product.id)
        return product

    async def _validate(self, raw_fields: Dict[str, Any], images: Iterable[Any], video: Any) -> ProductMutation:
        try:
            fields = ProductFields.model_validate(dict(raw_fields or {}))
        except PydanticValidationError as e:
            err = e.errors()[0]
            loc = ".".join(str(p) for p in err.get("loc", ()))
            # same 500 path as a rejected write of an uncastable value
            raise PersistenceError(f"{loc}: {err.get('msg')}" if loc else err.get("msg")) from e

        blobs: List[MediaBlob] = []
        for upload in images or ():
            blob = await _read_blob(upload)
            if blob is None:
                continue
            if not looks_like_image(blob.filename, blob.content_type, blob.data):
                raise ValidationError(f"{blob.filename or 'upload'} is not an image")
            blobs.append(blob)

        video_blob = await _read_blob(video)
        if video_blob is not None and not looks_like_video(video_blob.filename, video_blob.content_type):
            raise ValidationError(f"{video_blob.filename or 'upload'} is not a video")

        mutation = ProductMutation(fields=fields, images=blobs, video=video_blob)
        if mutation.total_bytes > self.max_upload_bytes:
            raise PayloadTooLarge()
        return mutation

    async def _upload(self, mutation: ProductMutation, media: UploadedMedia) -> None:
        # sequential so the stored order is the submission order
        if mutation.images:
            media.image_urls = []
            for blob in mutation.images:
                media.image_urls.append(await self.media_store.store(blob, MediaKind.IMAGE))
        if mutation.video is not None:
            media.video_url = await self.media_store.store(mutation.video, MediaKind.VIDEO)

    @staticmethod
    def _fail(sm: StateMachine, label: str, reason: str, exc: Exception, media: UploadedMedia) -> None:
        step = sm.state
        sm.fail(reason, meta={"message": str(exc)})
        if reason == "Forbidden":
            logger.warning("Product %s rejected: bad admin credential", label)
            return
        logger.error("Product %s failed while %s: %s: %s", label, step, reason, exc)
        orphaned = media.all_urls()
        if orphaned:
            logger.warning("Product %s left %d orphaned upload(s): %s", label, len(orphaned), orphaned)

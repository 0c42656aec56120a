# campus_market/repositories/products.py
from datetime import datetime, timezone
from typing import List, Optional

from filelock import Timeout

from campus_market.core.errors import NotFound, PersistenceError
from campus_market.database import FileBackedDB
from campus_market.models.product import Product
from campus_market.repositories.sections import SectionRepository, newest_first
from campus_market.schemas.product import ProductFields

TABLE = "products"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _scalar_updates(fields: ProductFields) -> dict:
    # every scalar is overwritten, omitted ones included
    return {
        "title": fields.title,
        "price": fields.price,
        "available": fields.is_available,
        "section": fields.section,
        "short": fields.short,
        "full": fields.full,
        "location": fields.location,
    }


class ProductRepository:
    """
    CRUD over listings. Reads join each product to its section explicitly;
    the stored row only ever holds the section id.
    """

    def __init__(self, db: FileBackedDB, sections: SectionRepository):
        self.db = db
        self.sections = sections

    def list(self) -> List[Product]:
        products = [Product.from_dict(r) for r in newest_first(self.db.list_records(TABLE))]
        by_id = self.sections.by_id()
        for p in products:
            p.section_ref = by_id.get(p.section) if p.section else None
        return products

    def get(self, product_id: str) -> Product:
        row = self.db.get_record(TABLE, "id", product_id) if product_id else None
        if not row:
            raise NotFound()
        product = Product.from_dict(row)
        product.section_ref = self.sections.get(product.section)
        return product

    def create(self, fields: ProductFields, image_urls: Optional[List[str]] = None,
               video_url: Optional[str] = None) -> Product:
        now = _now()
        product = Product(
            images=list(image_urls or []),
            video=video_url,
            created_at=now,
            updated_at=now,
            **_scalar_updates(fields),
        )
        try:
            row = self.db.create_record(TABLE, product.to_dict(), id_field="id")
        except (OSError, Timeout) as e:
            raise PersistenceError(str(e)) from e
        return Product.from_dict(row)

    def update(self, product_id: str, fields: ProductFields, image_urls: Optional[List[str]] = None,
               video_url: Optional[str] = None) -> Product:
        """
        Overwrite all scalar fields. `images` is replaced only when `image_urls`
        is given, `video` only when `video_url` is given; otherwise both stay as stored.
        """
        patch = Product(**_scalar_updates(fields)).to_dict()
        updates = {k: patch[k] for k in ("title", "price", "available", "section", "short", "full", "location")}
        if image_urls is not None:
            updates["images"] = Product(images=list(image_urls)).to_dict()["images"]
        if video_url is not None:
            updates["video"] = video_url
        updates["updated_at"] = _now()
        try:
            row = self.db.update_record(TABLE, "id", product_id, updates)
        except (OSError, Timeout) as e:
            raise PersistenceError(str(e)) from e
        if not row:
            raise PersistenceError(f"Product {product_id} not found")
        return Product.from_dict(row)

    def delete(self, product_id: str) -> None:
        try:
            self.db.delete_record(TABLE, "id", product_id)
        except (OSError, Timeout) as e:
            raise PersistenceError(str(e)) from e

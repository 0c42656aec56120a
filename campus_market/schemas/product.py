# campus_market/schemas/product.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

from campus_market.models.product import Product, coerce_available
from campus_market.schemas.section import SectionOut


class ProductFields(BaseModel):
    """
    Scalar fields of a product mutation as they arrive in the multipart form.
    Nothing is required; a missing field is stored as null. `available` stays
    the raw form token until the repository coerces it.
    """
    title: Optional[str] = None
    price: Optional[float] = Field(None, allow_inf_nan=False)
    available: Optional[str] = None
    section: Optional[str] = None
    short: Optional[str] = None
    full: Optional[str] = None
    location: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def _blank_price(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("section", mode="before")
    @classmethod
    def _blank_section(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def is_available(self) -> bool:
        return coerce_available(self.available)


class ProductOut(BaseModel):
    """Product as returned by write paths: `section` is the raw id."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: Optional[str] = None
    price: Optional[float] = None
    available: bool = True
    section: Optional[str] = None
    short: Optional[str] = None
    full: Optional[str] = None
    location: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    video: Optional[str] = None
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    @classmethod
    def from_model(cls, product: Product) -> "ProductOut":
        return cls(
            id=product.id,
            title=product.title,
            price=product.price,
            available=product.available,
            section=product.section,
            short=product.short,
            full=product.full,
            location=product.location,
            images=list(product.images),
            video=product.video,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductDetailOut(ProductOut):
    """Product as returned by read paths: `section` resolved to the full Section, or null."""
    section: Optional[SectionOut] = None

    @classmethod
    def from_model(cls, product: Product) -> "ProductDetailOut":
        data = ProductOut.from_model(product).model_dump()
        data["section"] = SectionOut.from_model(product.section_ref) if product.section_ref else None
        return cls(**data)

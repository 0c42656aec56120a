# campus_market/models/product.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
import json

from campus_market.models.section import Section


def coerce_available(raw: Any) -> bool:
    """Only the exact token "true" means available; anything else (or nothing) does not."""
    return raw == "true"


def _parse_price(raw: Any) -> Optional[float]:
    if raw in (None, ""):
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


def _parse_images(raw: Any) -> List[str]:
    if not raw:
        return []
    if isinstance(raw, list):
        return [str(u) for u in raw]
    try:
        loaded = json.loads(raw)
    except (TypeError, ValueError):
        return [str(raw)]
    if not isinstance(loaded, list):
        return [str(loaded)]
    return [str(u) for u in loaded]


@dataclass
class Product:
    """
    Marketplace listing. The CSV-backed store keeps everything as strings,
    so `from_dict` / `to_dict` convert between stored rows and proper types.

    `section` is the referenced section id as stored; `section_ref` is only
    filled by repository reads that resolve the reference.
    """
    id: Optional[str] = None
    title: Optional[str] = None
    price: Optional[float] = None
    available: bool = True
    section: Optional[str] = None
    short: Optional[str] = None
    full: Optional[str] = None
    location: Optional[str] = None
    images: List[str] = field(default_factory=list)
    video: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    section_ref: Optional[Section] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Product":
        if d is None:
            raise ValueError("Cannot construct Product from None")
        available_raw = d.get("available")
        if isinstance(available_raw, bool):
            available = available_raw
        elif available_raw in (None, ""):
            available = True
        else:
            available = str(available_raw).strip().lower() == "true"
        return cls(
            id=d.get("id") or None,
            title=d.get("title") if d.get("title") != "" else None,
            price=_parse_price(d.get("price")),
            available=available,
            section=d.get("section") or None,
            short=d.get("short") if d.get("short") != "" else None,
            full=d.get("full") if d.get("full") != "" else None,
            location=d.get("location") if d.get("location") != "" else None,
            images=_parse_images(d.get("images")),
            video=d.get("video") or None,
            created_at=d.get("created_at") or None,
            updated_at=d.get("updated_at") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Row layout as stored: every value a string (or None for empty)."""
        return {
            "id": self.id,
            "title": self.title,
            "price": None if self.price is None else repr(float(self.price)),
            "available": "true" if self.available else "false",
            "section": self.section,
            "short": self.short,
            "full": self.full,
            "location": self.location,
            "images": json.dumps(list(self.images)),
            "video": self.video,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

# campus_market/models/section.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any


@dataclass
class Section:
    """A category grouping for products."""
    id: Optional[str] = None
    title: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Section":
        if d is None:
            raise ValueError("Cannot construct Section from None")
        return cls(
            id=d.get("id") or None,
            title=str(d.get("title") or ""),
            created_at=d.get("created_at") or None,
            updated_at=d.get("updated_at") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

# campus_market/repositories/sections.py
from datetime import datetime, timezone
from typing import Dict, List, Optional

from filelock import Timeout

from campus_market.core.errors import NotFound, PersistenceError, ValidationError
from campus_market.database import FileBackedDB
from campus_market.models.section import Section

TABLE = "sections"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def newest_first(rows: List[dict]) -> List[dict]:
    """Sort rows by created_at descending; equal timestamps keep latest-inserted first."""
    return sorted(reversed(rows), key=lambda r: r.get("created_at") or "", reverse=True)


class SectionRepository:
    def __init__(self, db: FileBackedDB):
        self.db = db

    def list(self) -> List[Section]:
        return [Section.from_dict(r) for r in newest_first(self.db.list_records(TABLE))]

    def get(self, section_id: str) -> Optional[Section]:
        if not section_id:
            return None
        row = self.db.get_record(TABLE, "id", section_id)
        return Section.from_dict(row) if row else None

    def by_id(self) -> Dict[str, Section]:
        """All sections keyed by id, for joining many products at once."""
        return {s.id: s for s in (Section.from_dict(r) for r in self.db.list_records(TABLE)) if s.id}

    def create(self, title: Optional[str]) -> Section:
        title = _clean_title(title)
        now = _now()
        section = Section(title=title, created_at=now, updated_at=now)
        try:
            row = self.db.create_record(TABLE, section.to_dict(), id_field="id")
        except (OSError, Timeout) as e:
            raise PersistenceError(str(e)) from e
        return Section.from_dict(row)

    def update(self, section_id: str, title: Optional[str]) -> Section:
        title = _clean_title(title)
        try:
            row = self.db.update_record(TABLE, "id", section_id, {"title": title, "updated_at": _now()})
        except (OSError, Timeout) as e:
            raise PersistenceError(str(e)) from e
        if not row:
            raise NotFound()
        return Section.from_dict(row)

    def delete(self, section_id: str) -> None:
        # products referencing the section are left alone; reads resolve them to null
        try:
            self.db.delete_record(TABLE, "id", section_id)
        except (OSError, Timeout) as e:
            raise PersistenceError(str(e)) from e


def _clean_title(title: Optional[str]) -> str:
    if title is None or not str(title).strip():
        raise ValidationError("Title required")
    return str(title)

# campus_market/api/routes/sections.py
from typing import List, Optional

from fastapi import APIRouter, Depends

from campus_market.api.deps import get_sections, require_admin
from campus_market.repositories.sections import SectionRepository
from campus_market.schemas.section import SectionIn, SectionOut

router = APIRouter(prefix="/sections", tags=["sections"])


@router.get("", response_model=List[SectionOut])
def list_sections(sections: SectionRepository = Depends(get_sections)):
    """All sections, newest first."""
    return [SectionOut.from_model(s) for s in sections.list()]


@router.post("", response_model=SectionOut, dependencies=[Depends(require_admin)])
def create_section(payload: Optional[SectionIn] = None, sections: SectionRepository = Depends(get_sections)):
    title = payload.title if payload else None
    return SectionOut.from_model(sections.create(title))


@router.put("/{section_id}", response_model=SectionOut, dependencies=[Depends(require_admin)])
def update_section(section_id: str, payload: Optional[SectionIn] = None,
                   sections: SectionRepository = Depends(get_sections)):
    """Rename a section. Unknown ids answer 404."""
    title = payload.title if payload else None
    return SectionOut.from_model(sections.update(section_id, title))


@router.delete("/{section_id}", dependencies=[Depends(require_admin)])
def delete_section(section_id: str, sections: SectionRepository = Depends(get_sections)):
    # products pointing at the section keep the id and read back with section: null
    sections.delete(section_id)
    return {"message": "Section deleted"}

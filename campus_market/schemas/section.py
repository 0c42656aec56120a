# campus_market/schemas/section.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from campus_market.models.section import Section


class SectionIn(BaseModel):
    # title is checked by the repository so a missing one maps to 400, not 422
    title: Optional[str] = None


class SectionOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    @classmethod
    def from_model(cls, section: Section) -> "SectionOut":
        return cls(
            id=section.id,
            title=section.title,
            created_at=section.created_at,
            updated_at=section.updated_at,
        )

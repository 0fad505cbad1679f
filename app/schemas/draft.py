from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class DraftFile(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    url: str
    active_section: str | None = None


class DraftSectionFile(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str | None = None


class DraftSection(BaseModel):
    model_config = ConfigDict(extra="allow")

    files: list[DraftSectionFile] = Field(default_factory=list)

    @field_validator("files", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return [] if v is None else v


class DraftPayload(BaseModel):
    """Client-side draft state posted as JSON text in the `draftData` form field.

    Sections other than `activeSection` are keyed by section name, e.g.
    `{"activeSection": "gallery", "gallery": {"files": [{"title": "..."}]}}`.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    active_section: str | None = None

    def section(self) -> DraftSection | None:
        if not self.active_section:
            return None
        raw = (self.model_extra or {}).get(self.active_section)
        if not isinstance(raw, dict):
            return None
        return DraftSection.model_validate(raw)

    def title_for(self, index: int) -> str:
        section = self.section()
        if section is not None and index < len(section.files):
            title = section.files[index].title
            if title:
                return title
        return f"File {index + 1}"


class SavedDraft(BaseModel):
    id: int
    email: str
    draft_data: dict[str, Any] = Field(alias="draftData")
    created_at: str = Field(alias="createdAt")

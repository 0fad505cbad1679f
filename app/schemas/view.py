from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.profile import ReachRecord


class ViewRequest(BaseModel):
    email: Optional[str] = None


class ViewStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str
    view_count: int
    views_last_week: int
    reach_history: list[ReachRecord] = Field(default_factory=list)

from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, JSON, String

from app.database import Base


class DraftRecord(Base):
    __tablename__ = "drafts"

    id = Column(Integer, primary_key=True, index=True)

    # Not a foreign key: drafts may be saved before the profile exists.
    email = Column(String(255), nullable=False, index=True)

    # Stored as {"files": [{title, url, activeSection}]}
    draft_data = Column(JSON, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False)

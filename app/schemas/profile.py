# profile.py
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class DocumentModel(BaseModel):
    """Base for records persisted inside a profile document.

    Attributes are snake_case in Python; stored documents and wire payloads use
    the camelCase keys the frontend already relies on (viewCount, senderName, ...).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class EducationEntry(DocumentModel):
    # Degree fields are free-form (school, degree, year, ...); only the logo is interpreted.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    logo: str | None = None


class ExperienceEntry(DocumentModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class GalleryItem(DocumentModel):
    image: str
    title: str = "Untitled"


class VideoItem(DocumentModel):
    video: str
    title: str = "Untitled"


class PostItem(DocumentModel):
    """Blog and news posts share this shape."""

    image: str
    title: str = "Untitled"
    desc: str = "No description"
    # Client-submitted dates are kept verbatim; generated ones are ISO-8601.
    date: str


class Notification(DocumentModel):
    sender_name: str
    sender_email: str
    subject: str
    message: str
    timestamp: datetime


class CalendarEvent(DocumentModel):
    email: str
    title: str
    date: datetime


class ReachRecord(DocumentModel):
    date: datetime
    view_count: int


class Profile(DocumentModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    email: str
    name: str | None = None
    bio: str | None = None
    gender: str | None = None
    dob: str | None = None
    profession: str | None = None
    phone: str | None = None
    linkedin: str | None = None
    facebook: str | None = None
    youtube: str | None = None
    address: str | None = None
    image: str | None = None
    logo: str | None = None

    view_count: int = 0
    reach_history: list[ReachRecord] = Field(default_factory=list)

    education: list[EducationEntry] = Field(default_factory=list)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    gallery: list[GalleryItem] = Field(default_factory=list)
    videos: list[VideoItem] = Field(default_factory=list)
    blog: list[PostItem] = Field(default_factory=list)
    news: list[PostItem] = Field(default_factory=list)
    notifications: list[Notification] = Field(default_factory=list)
    events: list[CalendarEvent] = Field(default_factory=list)
    # Archive entries are whatever the client sent when the item was deleted.
    deleted_items: list[Any] = Field(default_factory=list)

    @field_validator(
        "reach_history",
        "education",
        "experience",
        "gallery",
        "videos",
        "blog",
        "news",
        "notifications",
        "events",
        "deleted_items",
        mode="before",
    )
    @classmethod
    def _none_as_empty(cls, v):
        return [] if v is None else v

    @field_validator("view_count", mode="before")
    @classmethod
    def _none_as_zero(cls, v):
        return 0 if v is None else v


SCALAR_PROFILE_FIELDS: tuple[str, ...] = (
    "name",
    "bio",
    "gender",
    "dob",
    "profession",
    "phone",
    "linkedin",
    "facebook",
    "youtube",
    "address",
)


class ProfileView(BaseModel):
    """Defaulted projection returned by GET /users/{email}: no key is ever absent."""

    name: str = ""
    bio: str = ""
    gender: str = ""
    dob: str = ""
    profession: str = ""
    phone: str = ""
    linkedin: str = ""
    facebook: str = ""
    youtube: str = ""
    address: str = ""
    experience: list[dict[str, Any]] = Field(default_factory=list)
    education: list[dict[str, Any]] = Field(default_factory=list)
    image: str | None = None
    logo: str = ""
    gallery: list[dict[str, Any]] = Field(default_factory=list)
    videos: list[dict[str, Any]] = Field(default_factory=list)
    blog: list[dict[str, Any]] = Field(default_factory=list)
    news: list[dict[str, Any]] = Field(default_factory=list)

    @field_validator(*SCALAR_PROFILE_FIELDS, "logo", mode="before")
    @classmethod
    def _falsy_as_empty_string(cls, v):
        if v is None:
            return ""
        return str(v)

    @field_validator("image", mode="before")
    @classmethod
    def _falsy_as_null(cls, v):
        return v or None

    @field_validator("experience", "education", "gallery", "videos", "blog", "news", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return [] if v is None else v

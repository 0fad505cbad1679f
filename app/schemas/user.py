from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserCreate(BaseModel):
    # Presence is checked in the route so the 400 carries a specific message.
    name: Optional[str] = None
    email: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class RemoveEducationRequest(CamelModel):
    remove_education_index: Optional[Any] = None


class RemoveExperienceRequest(CamelModel):
    remove_experience_index: Optional[Any] = None


class NotificationRequest(CamelModel):
    sender_name: Optional[str] = None
    sender_email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
    to_email: Optional[str] = None


class EventRequest(BaseModel):
    title: Optional[str] = None
    date: Optional[str] = None


class DeleteItemRequest(CamelModel):
    item_type: Optional[str] = None
    item_url: Optional[str] = None
    title: Optional[str] = None


class StoreDeletedItemRequest(CamelModel):
    item_type: Optional[str] = None
    item: Any = None


class ArchivedItemMatch(BaseModel):
    image: Optional[str] = None
    video: Optional[str] = None
    title: Optional[str] = None

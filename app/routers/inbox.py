from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import ValidationError as PydanticValidationError

from app.db.document_store import DocumentStore
from app.errors import NotFoundError, ValidationError
from app.routers.dependencies import get_store, verify_profile_owner
from app.schemas.media import NotificationsResponse
from app.schemas.profile import CalendarEvent, Notification
from app.schemas.user import EventRequest, NotificationRequest
from app.services.profile_service import get_profile_list_field


router = APIRouter(prefix="/users", tags=["inbox"])

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# Notifications are sent by visitors of a public portfolio, so this route never
# requires the recipient's token.
@router.patch("/{email}/notifications")
def send_notification(
    email: str,
    body: NotificationRequest,
    store: DocumentStore = Depends(get_store),
) -> dict[str, Any]:
    if not (body.sender_name and body.sender_email and body.subject and body.message):
        raise ValidationError("All fields are required")

    recipient = body.to_email or email
    notification = Notification(
        sender_name=body.sender_name,
        sender_email=body.sender_email,
        subject=body.subject,
        message=body.message,
        timestamp=_utc_now(),
    ).to_document()

    result = store.push(recipient, "notifications", notification)
    if result.matched_count == 0:
        raise NotFoundError("User not found")
    logger.info("notification stored recipient=%s sender=%s", recipient, body.sender_email)
    return {"message": "Notification sent successfully", "notification": notification}


@router.get("/{email}/notifications", response_model=NotificationsResponse)
def read_notifications(email: str, store: DocumentStore = Depends(get_store)) -> NotificationsResponse:
    return NotificationsResponse(notifications=get_profile_list_field(store, email, "notifications"))


@router.patch("/{email}/events", dependencies=[Depends(verify_profile_owner)])
def add_event(
    email: str,
    body: EventRequest,
    store: DocumentStore = Depends(get_store),
) -> dict[str, Any]:
    if not body.title or not body.date:
        raise ValidationError("All fields are required")
    try:
        event = CalendarEvent(email=email, title=body.title, date=body.date).to_document()
    except PydanticValidationError as exc:
        raise ValidationError("Invalid event date") from exc

    result = store.push(email, "events", event)
    if result.matched_count == 0:
        raise NotFoundError("User not found")
    return event


@router.get("/{email}/events")
def read_events(email: str, store: DocumentStore = Depends(get_store)) -> list[Any]:
    return get_profile_list_field(store, email, "events")

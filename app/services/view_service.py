from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

from app.db.document_store import Document, DocumentStore
from app.errors import NotFoundError, ValidationError
from app.schemas.profile import ReachRecord
from app.schemas.view import ViewStats


logger = logging.getLogger(__name__)

REACH_WINDOW = timedelta(days=7)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def count_recent_views(history: Iterable[ReachRecord], *, now: datetime, window: timedelta = REACH_WINDOW) -> int:
    """Records with date >= now - window. The boundary instant counts."""
    since = now - window
    return sum(1 for record in history if _as_utc(record.date) >= since)


def _reach_history(document: Document) -> list[ReachRecord]:
    raw = document.get("reachHistory")
    return [ReachRecord.model_validate(item) for item in raw] if isinstance(raw, list) else []


def build_view_stats(email: str, document: Document, *, now: datetime | None = None) -> ViewStats:
    history = _reach_history(document)
    return ViewStats(
        email=email,
        view_count=int(document.get("viewCount") or 0),
        views_last_week=count_recent_views(history, now=now or _utc_now()),
        reach_history=history,
    )


def get_view_stats(store: DocumentStore, email: str | None) -> ViewStats:
    if not email:
        raise ValidationError("Email is required")
    document = store.find_profile(email)
    if document is None:
        raise NotFoundError("User not found")
    return build_view_stats(email, document)


def record_view(store: DocumentStore, email: str | None, *, now: datetime | None = None) -> ViewStats:
    if not email:
        raise ValidationError("Email is required")
    now = now or _utc_now()
    new_document: dict[str, Any] = {}

    def mutate(document: Document) -> None:
        count = int(document.get("viewCount") or 0) + 1
        history = document.get("reachHistory")
        history = list(history) if isinstance(history, list) else []
        history.append(ReachRecord(date=now, view_count=count).to_document())
        document["viewCount"] = count
        document["reachHistory"] = history
        new_document.update(document)

    result = store.modify(email, mutate)
    if result.matched_count == 0:
        raise NotFoundError("User not found")
    logger.info("view recorded email=%s count=%s", email, new_document.get("viewCount"))
    return build_view_stats(email, new_document, now=now)

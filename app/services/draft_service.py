from __future__ import annotations

import json
import logging
from typing import Any, Sequence

from pydantic import ValidationError as PydanticValidationError

from app.db.document_store import Document, DocumentStore
from app.errors import ValidationError
from app.schemas.draft import DraftFile, DraftPayload
from app.services.media_service import upload_files
from app.services.media_uploader import DRAFT_FILES, MediaFile, MediaUploader, check_media_files


logger = logging.getLogger(__name__)


def parse_draft_payload(raw: str | None) -> DraftPayload:
    if raw is None or not raw.strip():
        raise ValidationError("draftData is required")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Malformed draftData: {exc.msg}") from exc
    if not isinstance(value, dict):
        raise ValidationError("Malformed draftData: expected a JSON object")
    try:
        return DraftPayload.model_validate(value)
    except PydanticValidationError as exc:
        raise ValidationError(f"Malformed draftData: {exc.errors()[0]['msg']}") from exc


def save_draft(
    store: DocumentStore,
    uploader: MediaUploader,
    email: str,
    raw_draft_data: str | None,
    files: Sequence[MediaFile],
    *,
    max_upload_bytes: int,
    max_workers: int = 4,
) -> Document:
    """Upload the draft's files and insert a new draft record. Drafts are never updated in place."""
    payload = parse_draft_payload(raw_draft_data)
    if not files:
        raise ValidationError("No files uploaded")
    check_media_files(files, max_bytes=max_upload_bytes)

    urls = upload_files(uploader, files, DRAFT_FILES, max_workers=max_workers)
    saved_files: list[dict[str, Any]] = [
        DraftFile(title=payload.title_for(index), url=url, active_section=payload.active_section).model_dump(
            by_alias=True
        )
        for index, url in enumerate(urls)
    ]
    draft = store.insert_draft(email, {"files": saved_files})
    logger.info("draft saved email=%s files=%d", email, len(saved_files))
    return draft

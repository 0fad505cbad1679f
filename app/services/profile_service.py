# profile_service.py
import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from app.db.document_store import Document, DocumentStore, UpdateResult
from app.errors import NotFoundError, UpstreamError, ValidationError
from app.schemas.profile import Profile, ProfileView
from app.services.media_uploader import MediaUploader, check_media_files
from app.services.profile_merge import ProfileUpdatePayload, coerce_index, merge_profile_update


logger = logging.getLogger(__name__)

NO_CHANGES = "No changes made to the user"


def get_profile_document(store: DocumentStore, email: str) -> Document:
    document = store.find_profile(email)
    if document is None:
        raise NotFoundError("User not found")
    return document


def build_profile(document: Document) -> Profile:
    try:
        return Profile.model_validate(document)
    except PydanticValidationError as exc:
        # The store is schemaless; a document the typed record rejects is corrupt data.
        raise UpstreamError("Stored profile is malformed", str(exc)) from exc


def get_profile(store: DocumentStore, email: str) -> Profile:
    return build_profile(get_profile_document(store, email))


def get_profile_view(store: DocumentStore, email: str) -> ProfileView:
    return ProfileView.model_validate(get_profile_document(store, email))


def get_profile_list_field(store: DocumentStore, email: str, field: str) -> list[Any]:
    value = get_profile_document(store, email).get(field)
    return list(value) if isinstance(value, list) else []


def create_profile(store: DocumentStore, name: str | None, email: str | None) -> Document:
    name = (name or "").strip()
    email = (email or "").strip()
    if not name or not email:
        raise ValidationError("Name and email are required")
    return store.insert_profile({"name": name, "email": email})


def parse_entry_index(raw: Any, length: int, label: str) -> int:
    """Validate a client-supplied index against a list of `length` entries."""
    message = f"Invalid {label} index"
    if raw is None:
        raise ValidationError(message)
    try:
        index = coerce_index(raw)
    except ValueError as exc:
        raise ValidationError(message) from exc
    if index < 0 or index >= length:
        raise ValidationError(message)
    return index


def remove_entry(store: DocumentStore, email: str, field: str, raw_index: Any, label: str) -> UpdateResult:
    """Remove one education/experience entry by index. 404 before 400, as callers expect."""
    document = get_profile_document(store, email)
    entries = document.get(field)
    entries = list(entries) if isinstance(entries, list) else []
    index = parse_entry_index(raw_index, len(entries), label)

    def mutate(doc: Document) -> None:
        current = doc.get(field)
        current = list(current) if isinstance(current, list) else []
        # Re-check under the row lock: the list may have shrunk since it was read.
        if index >= len(current):
            raise ValidationError(f"Invalid {label} index")
        del current[index]
        doc[field] = current

    return store.modify(email, mutate)


def update_profile(
    store: DocumentStore,
    uploader: MediaUploader,
    email: str,
    payload: ProfileUpdatePayload,
    *,
    max_upload_bytes: int,
    max_workers: int = 4,
) -> str:
    current = get_profile(store, email)
    check_media_files(payload.media_files(), max_bytes=max_upload_bytes)

    fields = merge_profile_update(current, payload, uploader, max_workers=max_workers)
    if not fields:
        return NO_CHANGES

    result = store.set_fields(email, fields)
    if result.matched_count == 0:
        raise NotFoundError("User not found")
    if result.modified_count == 0:
        return NO_CHANGES
    logger.info("profile updated email=%s fields=%s", email, sorted(fields))
    return "User updated successfully"

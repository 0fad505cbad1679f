from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from app.db.document_store import DocumentStore
from app.errors import NotFoundError, ValidationError
from app.routers.dependencies import get_store, verify_profile_owner
from app.schemas.user import ArchivedItemMatch, MessageResponse, StoreDeletedItemRequest
from app.services.media_service import matches_any
from app.services.profile_service import get_profile_document, get_profile_list_field


router = APIRouter(prefix="/users", tags=["archive"])


@router.post("/{email}/store-deleted-item", response_model=MessageResponse, dependencies=[Depends(verify_profile_owner)])
def store_deleted_item(
    email: str,
    body: StoreDeletedItemRequest,
    store: DocumentStore = Depends(get_store),
) -> MessageResponse:
    if body.item is None:
        raise ValidationError("item is required")
    get_profile_document(store, email)
    result = store.push(email, "deletedItems", body.item)
    if result.matched_count == 0:
        raise NotFoundError("User not found")
    return MessageResponse(message="Deleted item stored successfully")


@router.get("/{email}/store-deleted-item")
def read_deleted_items(email: str, store: DocumentStore = Depends(get_store)) -> dict[str, Any]:
    return {"deletedItems": get_profile_list_field(store, email, "deletedItems")}


@router.delete("/{email}/delete-item", response_model=MessageResponse, dependencies=[Depends(verify_profile_owner)])
def delete_archived_item(
    email: str,
    body: ArchivedItemMatch,
    store: DocumentStore = Depends(get_store),
) -> MessageResponse:
    predicate = matches_any(image=body.image, video=body.video, title=body.title)
    result = store.pull(email, "deletedItems", predicate)
    if result.modified_count == 0:
        raise NotFoundError("Item not found or already deleted")
    return MessageResponse(message="Item deleted successfully")


@router.get("/{email}/deleted-news")
def read_deleted_news(email: str, store: DocumentStore = Depends(get_store)) -> list[Any]:
    return get_profile_list_field(store, email, "deletedNews")

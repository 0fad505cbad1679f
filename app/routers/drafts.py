from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from starlette.concurrency import run_in_threadpool

from app.config import Settings
from app.db.document_store import DocumentStore
from app.routers.dependencies import get_app_settings, get_store, get_uploader, read_media_files, verify_profile_owner
from app.schemas.draft import SavedDraft
from app.services.draft_service import save_draft
from app.services.media_uploader import MediaUploader


router = APIRouter(prefix="/users", tags=["drafts"])


@router.patch("/{email}/updatedDraft", status_code=status.HTTP_201_CREATED, dependencies=[Depends(verify_profile_owner)])
async def create_draft(
    email: str,
    files: list[UploadFile] = File(default=[]),
    draft_data: str | None = Form(default=None, alias="draftData"),
    store: DocumentStore = Depends(get_store),
    uploader: MediaUploader = Depends(get_uploader),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    media = await read_media_files(files)
    draft = await run_in_threadpool(
        save_draft,
        store,
        uploader,
        email,
        draft_data,
        media,
        max_upload_bytes=settings.max_upload_bytes,
        max_workers=settings.upload_max_workers,
    )
    return {"message": "New draft saved successfully", "draft": draft}


@router.get("/{email}/updatedDraft", response_model=list[SavedDraft])
def list_drafts(email: str, store: DocumentStore = Depends(get_store)) -> list[dict[str, Any]]:
    return store.find_drafts(email)

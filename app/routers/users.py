# users.py
from typing import Any

from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile as StarletteUploadFile

from app.config import Settings
from app.db.document_store import DocumentStore
from app.errors import NotFoundError, ValidationError
from app.routers.dependencies import (
    get_app_settings,
    get_store,
    get_uploader,
    read_media_file,
    verify_profile_owner,
)
from app.schemas.media import LogoUpdateResponse
from app.schemas.profile import ProfileView
from app.schemas.user import MessageResponse, RemoveEducationRequest, RemoveExperienceRequest, UserCreate
from app.services.media_uploader import PROFILE_LOGO, MediaUploader, check_media_files
from app.services.profile_merge import parse_profile_update
from app.services.profile_service import (
    NO_CHANGES,
    create_profile,
    get_profile_document,
    get_profile_view,
    remove_entry,
    update_profile,
)


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(user_in: UserCreate, store: DocumentStore = Depends(get_store)) -> dict[str, Any]:
    return create_profile(store, user_in.name, user_in.email)


@router.get("")
def list_users(store: DocumentStore = Depends(get_store)) -> list[dict[str, Any]]:
    return store.list_profiles()


@router.get("/{email}", response_model=ProfileView)
def read_user(email: str, store: DocumentStore = Depends(get_store)) -> ProfileView:
    return get_profile_view(store, email)


@router.patch("/{email}", response_model=MessageResponse, dependencies=[Depends(verify_profile_owner)])
async def update_user(
    email: str,
    request: Request,
    store: DocumentStore = Depends(get_store),
    uploader: MediaUploader = Depends(get_uploader),
    settings: Settings = Depends(get_app_settings),
) -> MessageResponse:
    # Logo file fields are named education[N][logo], so the form is read as-is
    # rather than through declared parameters.
    form = await request.form()
    fields: dict[str, str] = {}
    files = {}
    for key, value in form.multi_items():
        if isinstance(value, StarletteUploadFile):
            if value.filename:
                files[key] = await read_media_file(value)
        else:
            fields[key] = value

    payload = parse_profile_update(fields, files)
    message = await run_in_threadpool(
        update_profile,
        store,
        uploader,
        email,
        payload,
        max_upload_bytes=settings.max_upload_bytes,
        max_workers=settings.upload_max_workers,
    )
    return MessageResponse(message=message)


@router.patch("/{email}/remove-education", response_model=MessageResponse, dependencies=[Depends(verify_profile_owner)])
def remove_education(
    email: str,
    body: RemoveEducationRequest,
    store: DocumentStore = Depends(get_store),
) -> MessageResponse:
    result = remove_entry(store, email, "education", body.remove_education_index, "education")
    if result.modified_count > 0:
        return MessageResponse(message="Education entry removed successfully")
    return MessageResponse(message=NO_CHANGES)


@router.patch("/{email}/remove-experience", response_model=MessageResponse, dependencies=[Depends(verify_profile_owner)])
def remove_experience(
    email: str,
    body: RemoveExperienceRequest,
    store: DocumentStore = Depends(get_store),
) -> MessageResponse:
    result = remove_entry(store, email, "experience", body.remove_experience_index, "experience")
    if result.modified_count > 0:
        return MessageResponse(message="Experience entry removed successfully")
    return MessageResponse(message=NO_CHANGES)


@router.patch("/{email}/update-logo", response_model=LogoUpdateResponse, dependencies=[Depends(verify_profile_owner)])
async def update_logo(
    email: str,
    logo: UploadFile | None = File(default=None),
    store: DocumentStore = Depends(get_store),
    uploader: MediaUploader = Depends(get_uploader),
    settings: Settings = Depends(get_app_settings),
) -> LogoUpdateResponse:
    if logo is None or not logo.filename:
        raise ValidationError("No logo file uploaded")
    media = await read_media_file(logo)
    check_media_files([media], max_bytes=settings.max_upload_bytes)

    # Check the user before spending an upload on them.
    await run_in_threadpool(get_profile_document, store, email)
    url = await run_in_threadpool(uploader.upload, media, PROFILE_LOGO)

    result = await run_in_threadpool(store.set_fields, email, {"logo": url})
    if result.matched_count == 0:
        raise NotFoundError("User not found")
    if result.modified_count == 0:
        return LogoUpdateResponse(message=NO_CHANGES, url=url)
    return LogoUpdateResponse(message="Logo updated successfully", url=url)

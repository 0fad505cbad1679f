from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from starlette.concurrency import run_in_threadpool

from app.config import Settings
from app.db.document_store import DocumentStore
from app.errors import NotFoundError, ValidationError
from app.routers.dependencies import get_app_settings, get_store, get_uploader, read_media_files, verify_profile_owner
from app.schemas.media import BlogResponse, GalleryResponse, NewsResponse, VideosResponse
from app.schemas.user import DeleteItemRequest, MessageResponse
from app.services.media_service import (
    BLOG,
    DELETE_TARGETS,
    GALLERY,
    NEWS,
    PERMANENT_DELETE_CATEGORIES,
    VIDEOS,
    MediaCollection,
    append_media,
    matches_field,
    matches_title,
)
from app.services.media_uploader import MediaUploader
from app.services.profile_service import get_profile_document, get_profile_list_field


router = APIRouter(prefix="/users", tags=["media"])


async def _append(
    email: str,
    collection: MediaCollection,
    uploads: list[UploadFile],
    store: DocumentStore,
    uploader: MediaUploader,
    settings: Settings,
    *,
    titles: list[str] | None = None,
    descriptions: list[str] | None = None,
    dates: list[str] | None = None,
    draft: bool = False,
) -> dict[str, Any]:
    files = await read_media_files(uploads)
    entries = await run_in_threadpool(
        append_media,
        store,
        uploader,
        email,
        collection,
        files,
        titles=titles or [],
        descriptions=descriptions or [],
        dates=dates or [],
        draft=draft,
        max_upload_bytes=settings.max_upload_bytes,
        max_files=settings.max_files_per_upload,
        max_workers=settings.upload_max_workers,
    )
    message = "Video updated successfully" if draft and collection is VIDEOS else f"{collection.label} updated successfully"
    return {"message": message, collection.field: entries}


# ---- appends ---------------------------------------------------------------


@router.patch("/{email}/gallery", dependencies=[Depends(verify_profile_owner)])
async def add_gallery(
    email: str,
    gallery: list[UploadFile] = File(default=[]),
    titles: list[str] = Form(default=[]),
    store: DocumentStore = Depends(get_store),
    uploader: MediaUploader = Depends(get_uploader),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    return await _append(email, GALLERY, gallery, store, uploader, settings, titles=titles)


@router.patch("/{email}/video", dependencies=[Depends(verify_profile_owner)])
async def add_videos(
    email: str,
    videos: list[UploadFile] = File(default=[]),
    titles: list[str] = Form(default=[]),
    store: DocumentStore = Depends(get_store),
    uploader: MediaUploader = Depends(get_uploader),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    return await _append(email, VIDEOS, videos, store, uploader, settings, titles=titles)


@router.patch("/{email}/blog", dependencies=[Depends(verify_profile_owner)])
async def add_blog(
    email: str,
    blog: list[UploadFile] = File(default=[]),
    titles: list[str] = Form(default=[]),
    desc: list[str] = Form(default=[]),
    date: list[str] = Form(default=[]),
    store: DocumentStore = Depends(get_store),
    uploader: MediaUploader = Depends(get_uploader),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    return await _append(email, BLOG, blog, store, uploader, settings, titles=titles, descriptions=desc, dates=date)


@router.patch("/{email}/news", dependencies=[Depends(verify_profile_owner)])
async def add_news(
    email: str,
    news: list[UploadFile] = File(default=[]),
    titles: list[str] = Form(default=[]),
    desc: list[str] = Form(default=[]),
    date: list[str] = Form(default=[]),
    store: DocumentStore = Depends(get_store),
    uploader: MediaUploader = Depends(get_uploader),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    return await _append(email, NEWS, news, store, uploader, settings, titles=titles, descriptions=desc, dates=date)


@router.patch("/{email}/draft/gallery", dependencies=[Depends(verify_profile_owner)])
async def add_draft_gallery(
    email: str,
    gallery: list[UploadFile] = File(default=[]),
    titles: list[str] = Form(default=[]),
    store: DocumentStore = Depends(get_store),
    uploader: MediaUploader = Depends(get_uploader),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    return await _append(email, GALLERY, gallery, store, uploader, settings, titles=titles, draft=True)


@router.patch("/{email}/draft/video", dependencies=[Depends(verify_profile_owner)])
async def add_draft_videos(
    email: str,
    videos: list[UploadFile] = File(default=[]),
    titles: list[str] = Form(default=[]),
    store: DocumentStore = Depends(get_store),
    uploader: MediaUploader = Depends(get_uploader),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    return await _append(email, VIDEOS, videos, store, uploader, settings, titles=titles, draft=True)


@router.patch("/{email}/draft/blog", dependencies=[Depends(verify_profile_owner)])
async def add_draft_blog(
    email: str,
    blog: list[UploadFile] = File(default=[]),
    titles: list[str] = Form(default=[]),
    desc: list[str] = Form(default=[]),
    date: list[str] = Form(default=[]),
    store: DocumentStore = Depends(get_store),
    uploader: MediaUploader = Depends(get_uploader),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    return await _append(
        email, BLOG, blog, store, uploader, settings, titles=titles, descriptions=desc, dates=date, draft=True
    )


@router.patch("/{email}/draft/news", dependencies=[Depends(verify_profile_owner)])
async def add_draft_news(
    email: str,
    news: list[UploadFile] = File(default=[]),
    titles: list[str] = Form(default=[]),
    desc: list[str] = Form(default=[]),
    date: list[str] = Form(default=[]),
    store: DocumentStore = Depends(get_store),
    uploader: MediaUploader = Depends(get_uploader),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    return await _append(
        email, NEWS, news, store, uploader, settings, titles=titles, descriptions=desc, dates=date, draft=True
    )


# ---- reads -----------------------------------------------------------------


@router.get("/{email}/gallery", response_model=GalleryResponse)
def read_gallery(email: str, store: DocumentStore = Depends(get_store)) -> GalleryResponse:
    return GalleryResponse(gallery=get_profile_list_field(store, email, GALLERY.field))


@router.get("/{email}/video", response_model=VideosResponse)
def read_videos(email: str, store: DocumentStore = Depends(get_store)) -> VideosResponse:
    return VideosResponse(videos=get_profile_list_field(store, email, VIDEOS.field))


@router.get("/{email}/blog", response_model=BlogResponse)
def read_blog(email: str, store: DocumentStore = Depends(get_store)) -> BlogResponse:
    return BlogResponse(blog=get_profile_list_field(store, email, BLOG.field))


@router.get("/{email}/news", response_model=NewsResponse)
def read_news(email: str, store: DocumentStore = Depends(get_store)) -> NewsResponse:
    return NewsResponse(news=get_profile_list_field(store, email, NEWS.field))


def _draft_listing(store: DocumentStore, email: str, collection: MediaCollection, noun: str) -> dict[str, Any]:
    items = get_profile_list_field(store, email, collection.field)
    if not items:
        return {"message": f"No {noun} found for this user", collection.field: []}
    return {"message": f"{collection.label} fetched successfully", collection.field: items}


@router.get("/{email}/draft/gallery")
def read_draft_gallery(email: str, store: DocumentStore = Depends(get_store)) -> dict[str, Any]:
    return _draft_listing(store, email, GALLERY, "gallery items")


@router.get("/{email}/draft/videos")
def read_draft_videos(email: str, store: DocumentStore = Depends(get_store)) -> dict[str, Any]:
    return _draft_listing(store, email, VIDEOS, "videos")


@router.get("/{email}/draft/blog")
def read_draft_blog(email: str, store: DocumentStore = Depends(get_store)) -> dict[str, Any]:
    return _draft_listing(store, email, BLOG, "blogs")


@router.get("/{email}/draft/news")
def read_draft_news(email: str, store: DocumentStore = Depends(get_store)) -> dict[str, Any]:
    return _draft_listing(store, email, NEWS, "news")


@router.get("/{email}/draft")
def read_profile_drafts(email: str, store: DocumentStore = Depends(get_store)) -> dict[str, Any]:
    return {"drafts": get_profile_list_field(store, email, "draft")}


# ---- removals --------------------------------------------------------------


@router.delete("/{email}/permanent-delete", response_model=MessageResponse, dependencies=[Depends(verify_profile_owner)])
def permanent_delete(
    email: str,
    category: str | None = Query(default=None),
    title: str | None = Query(default=None),
    store: DocumentStore = Depends(get_store),
) -> MessageResponse:
    if not category or title is None:
        raise ValidationError("category and title are required")
    if category not in PERMANENT_DELETE_CATEGORIES:
        raise ValidationError("Invalid category")
    result = store.pull(email, category, matches_title(title))
    if result.modified_count == 0:
        raise NotFoundError("User or image not found")
    return MessageResponse(message="Image permanently deleted successfully")


@router.delete("/{email}/delete", response_model=MessageResponse, dependencies=[Depends(verify_profile_owner)])
def delete_item(
    email: str,
    body: DeleteItemRequest,
    store: DocumentStore = Depends(get_store),
) -> MessageResponse:
    get_profile_document(store, email)
    item_type = body.item_type or ""
    target = DELETE_TARGETS.get(item_type)
    if target is None:
        raise ValidationError("Invalid item type")
    if not body.item_url:
        raise ValidationError("itemUrl is required")

    field, key = target
    result = store.pull(email, field, matches_field(key, body.item_url))
    label = item_type.capitalize()
    if result.modified_count == 0:
        raise NotFoundError(f"{label} not found")
    return MessageResponse(message=f"{label} deleted successfully")

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Sequence, TypeVar

from app.db.document_store import DocumentStore
from app.errors import NotFoundError, ValidationError
from app.schemas.profile import GalleryItem, PostItem, VideoItem
from app.services import media_uploader
from app.services.media_uploader import MediaFile, MediaTarget, MediaUploader, UploadTask, check_media_files, upload_all
from app.services.profile_service import get_profile_document


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TITLE = "Untitled"
DEFAULT_DESCRIPTION = "No description"


@dataclass(frozen=True)
class MediaCollection:
    """An appendable media array on the profile (gallery, videos, blog, news)."""

    field: str
    label: str
    url_key: str
    has_details: bool
    target: MediaTarget
    draft_target: MediaTarget


GALLERY = MediaCollection("gallery", "Gallery", "image", False, media_uploader.GALLERY, media_uploader.DRAFT_GALLERY)
VIDEOS = MediaCollection("videos", "Videos", "video", False, media_uploader.VIDEOS, media_uploader.DRAFT_VIDEOS)
BLOG = MediaCollection("blog", "Blog", "image", True, media_uploader.BLOG, media_uploader.DRAFT_BLOG)
NEWS = MediaCollection("news", "News", "image", True, media_uploader.NEWS, media_uploader.DRAFT_NEWS)

# itemType accepted by DELETE /users/{email}/delete -> (array field, matching key)
DELETE_TARGETS: dict[str, tuple[str, str]] = {
    "image": ("gallery", "image"),
    "video": ("videos", "video"),
    "blog": ("blog", "image"),
    "news": ("news", "image"),
}

PERMANENT_DELETE_CATEGORIES = ("gallery", "videos", "blog", "news", "deletedItems")


def pad(values: Sequence[T], count: int, default: T) -> list[T]:
    """Return exactly `count` values: `values` truncated, or extended with `default`."""
    values = list(values)[:count]
    return values + [default] * (count - len(values))


def build_entries(
    collection: MediaCollection,
    urls: Sequence[str],
    *,
    titles: Sequence[str] = (),
    descriptions: Sequence[str] = (),
    dates: Sequence[str] = (),
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    count = len(urls)
    padded_titles = pad([t or DEFAULT_TITLE for t in titles], count, DEFAULT_TITLE)

    if collection.has_details:
        stamp = (now or datetime.now(timezone.utc)).isoformat()
        padded_desc = pad([d or DEFAULT_DESCRIPTION for d in descriptions], count, DEFAULT_DESCRIPTION)
        padded_dates = pad([d or stamp for d in dates], count, stamp)
        return [
            PostItem(image=url, title=title, desc=desc, date=date).to_document()
            for url, title, desc, date in zip(urls, padded_titles, padded_desc, padded_dates)
        ]
    if collection.url_key == "video":
        return [VideoItem(video=url, title=title).to_document() for url, title in zip(urls, padded_titles)]
    return [GalleryItem(image=url, title=title).to_document() for url, title in zip(urls, padded_titles)]


def upload_files(
    uploader: MediaUploader,
    files: Sequence[MediaFile],
    target: MediaTarget,
    *,
    max_workers: int = 4,
) -> list[str]:
    """Upload files concurrently; the returned URLs are in the same order as `files`."""
    urls = upload_all(
        uploader,
        [UploadTask(key=index, media=media, target=target) for index, media in enumerate(files)],
        max_workers=max_workers,
    )
    return [urls[index] for index in range(len(files))]


def append_media(
    store: DocumentStore,
    uploader: MediaUploader,
    email: str,
    collection: MediaCollection,
    files: Sequence[MediaFile],
    *,
    titles: Sequence[str] = (),
    descriptions: Sequence[str] = (),
    dates: Sequence[str] = (),
    draft: bool = False,
    max_upload_bytes: int,
    max_files: int,
    max_workers: int = 4,
) -> list[dict[str, Any]]:
    get_profile_document(store, email)
    if not files:
        raise ValidationError("No files uploaded")
    check_media_files(files, max_bytes=max_upload_bytes, max_count=max_files)

    target = collection.draft_target if draft else collection.target
    urls = upload_files(uploader, files, target, max_workers=max_workers)
    entries = build_entries(collection, urls, titles=titles, descriptions=descriptions, dates=dates)

    result = store.push(email, collection.field, *entries)
    if result.matched_count == 0:
        raise NotFoundError("User not found")
    logger.info("appended %d %s entries email=%s draft=%s", len(entries), collection.field, email, draft)
    return entries


def matches_field(key: str, value: Any) -> Callable[[Any], bool]:
    return lambda item: isinstance(item, dict) and item.get(key) == value


def matches_title(title: str) -> Callable[[Any], bool]:
    """Element equal to `title`, or an entry whose title is `title`."""
    return lambda item: item == title or (isinstance(item, dict) and item.get("title") == title)


def matches_any(**conditions: Any) -> Callable[[Any], bool]:
    """Archive entry matching any of the supplied (non-null) key/value pairs."""
    wanted = {key: value for key, value in conditions.items() if value is not None}
    if not wanted:
        raise ValidationError("At least one of image, video or title is required")
    return lambda item: isinstance(item, dict) and any(key in item and item[key] == value for key, value in wanted.items())

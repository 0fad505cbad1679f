from __future__ import annotations

import hashlib
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Hashable, Iterable, Protocol, Sequence

import requests

from app.config import Settings, is_media_host_configured
from app.errors import MediaUploadError, ValidationError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MediaFile:
    """An uploaded file held in memory. Never backed by a filesystem path."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class MediaTarget:
    folder: str | None = None
    resource_type: str = "auto"


PROFILE_IMAGE = MediaTarget()
EDUCATION_LOGO = MediaTarget()
PROFILE_LOGO = MediaTarget()
GALLERY = MediaTarget(folder="user_gallery", resource_type="image")
VIDEOS = MediaTarget(folder="user_videos", resource_type="video")
BLOG = MediaTarget(folder="user_blog_images", resource_type="image")
NEWS = MediaTarget(folder="user_news_images", resource_type="image")
DRAFT_GALLERY = MediaTarget(folder="user_gallery", resource_type="image")
DRAFT_VIDEOS = MediaTarget(folder="user_videos", resource_type="video")
DRAFT_BLOG = MediaTarget(folder="user_blogs", resource_type="image")
DRAFT_NEWS = MediaTarget(folder="user_news", resource_type="image")
DRAFT_FILES = MediaTarget(folder="user_drafts_files")


class MediaUploader(Protocol):
    def upload(self, media: MediaFile, target: MediaTarget) -> str:
        """Store `media` and return its public URL."""
        ...


@dataclass(frozen=True)
class UploadTask:
    key: Hashable
    media: MediaFile
    target: MediaTarget


def sign_params(params: dict[str, str], api_secret: str) -> str:
    # Cloudinary signature: sha1("k1=v1&k2=v2..." + secret) over sorted, non-empty params.
    payload = "&".join(f"{k}={v}" for k, v in sorted(params.items()) if v not in (None, ""))
    return hashlib.sha1(f"{payload}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryUploader:
    def __init__(
        self,
        cloud_name: str | None,
        api_key: str | None,
        api_secret: str | None,
        *,
        api_base: str = "https://api.cloudinary.com/v1_1",
        timeout: float = 60.0,
        session: requests.Session | None = None,
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "CloudinaryUploader":
        if not is_media_host_configured(settings):
            logger.warning("Cloudinary credentials are not configured; uploads will fail")
        return cls(
            settings.cloudinary_cloud_name,
            settings.cloudinary_api_key,
            settings.cloudinary_api_secret,
            api_base=settings.cloudinary_api_base,
            timeout=settings.upload_timeout_seconds,
        )

    def _upload_url(self, resource_type: str) -> str:
        return f"{self.api_base}/{self.cloud_name}/{resource_type}/upload"

    def upload(self, media: MediaFile, target: MediaTarget) -> str:
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise MediaUploadError("Error uploading to Cloudinary", "Media host is not configured")

        params = {"timestamp": str(int(time.time()))}
        if target.folder:
            params["folder"] = target.folder
        data = {**params, "api_key": self.api_key, "signature": sign_params(params, self.api_secret)}
        files = {"file": (media.filename or "upload", media.data, media.content_type or "application/octet-stream")}

        try:
            response = self.session.post(
                self._upload_url(target.resource_type),
                data=data,
                files=files,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise MediaUploadError("Error uploading to Cloudinary", f"{type(exc).__name__}: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok:
            error = None
            if isinstance(body, dict):
                error = (body.get("error") or {}).get("message")
            raise MediaUploadError("Error uploading to Cloudinary", error or f"HTTP {response.status_code}")

        url = body.get("secure_url") if isinstance(body, dict) else None
        if not url:
            raise MediaUploadError("Error uploading to Cloudinary", "Response did not include secure_url")
        logger.info("uploaded %s (%d bytes) to %s", media.filename, media.size, url)
        return url


def upload_all(uploader: MediaUploader, tasks: Sequence[UploadTask], *, max_workers: int = 4) -> dict[Hashable, str]:
    """Upload every task, concurrently, and return {task.key: url}.

    Results are joined by each task's own key, never by completion order. The first
    failure propagates once all started uploads have finished.
    """
    if not tasks:
        return {}
    keys = [task.key for task in tasks]
    if len(set(keys)) != len(keys):
        raise ValueError("upload task keys must be unique")
    if len(tasks) == 1:
        task = tasks[0]
        return {task.key: uploader.upload(task.media, task.target)}

    with ThreadPoolExecutor(max_workers=min(max_workers, len(tasks))) as pool:
        futures = [(task.key, pool.submit(uploader.upload, task.media, task.target)) for task in tasks]
        return {key: future.result() for key, future in futures}


def check_media_files(files: Iterable[MediaFile], *, max_bytes: int, max_count: int | None = None) -> list[MediaFile]:
    files = list(files)
    if max_count is not None and len(files) > max_count:
        raise ValidationError(f"Too many files (at most {max_count} allowed)")
    for media in files:
        content_type = media.content_type or ""
        if not (content_type.startswith("image/") or content_type.startswith("video/")):
            raise ValidationError("Only image and video files are allowed")
        if media.size > max_bytes:
            raise ValidationError(f"File {media.filename} exceeds the {max_bytes} byte limit")
    return files

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class LogoUpdateResponse(BaseModel):
    message: str
    url: str


class GalleryResponse(BaseModel):
    gallery: list[dict[str, Any]] = Field(default_factory=list)


class VideosResponse(BaseModel):
    videos: list[dict[str, Any]] = Field(default_factory=list)


class BlogResponse(BaseModel):
    blog: list[dict[str, Any]] = Field(default_factory=list)


class NewsResponse(BaseModel):
    news: list[dict[str, Any]] = Field(default_factory=list)


class NotificationsResponse(BaseModel):
    notifications: list[dict[str, Any]] = Field(default_factory=list)

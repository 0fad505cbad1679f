from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.config import is_media_host_configured, settings
from app.database import mask_db_url
from app.db.document_store import DocumentStore
from app.errors import DocumentStoreError
from app.routers.dependencies import get_store


router = APIRouter(prefix="/health", tags=["health"])


class HealthStatus(BaseModel):
    status: str
    timestamp: datetime


class StoreHealthStatus(BaseModel):
    store: str
    db_url: str
    media_host_configured: bool
    timestamp: datetime


@router.get("/", response_model=HealthStatus, summary="API heartbeat")
def health_check() -> HealthStatus:
    return HealthStatus(status="ok", timestamp=datetime.now(timezone.utc))


@router.get("/db", response_model=StoreHealthStatus, summary="Document store connectivity check")
def db_health_check(store: DocumentStore = Depends(get_store)) -> StoreHealthStatus:
    store_status = "ok"
    try:
        store.ping()
    except DocumentStoreError:
        store_status = "error"

    return StoreHealthStatus(
        store=store_status,
        db_url=mask_db_url(store.db_url),
        media_host_configured=is_media_host_configured(settings),
        timestamp=datetime.now(timezone.utc),
    )

from fastapi import APIRouter, Depends

from app.db.document_store import DocumentStore
from app.routers.dependencies import get_store
from app.schemas.view import ViewRequest, ViewStats
from app.services.view_service import get_view_stats, record_view


router = APIRouter(prefix="/view", tags=["views"])


@router.post("", response_model=ViewStats)
def add_view(body: ViewRequest, store: DocumentStore = Depends(get_store)) -> ViewStats:
    return record_view(store, body.email)


@router.get("/{email}", response_model=ViewStats)
def read_views(email: str, store: DocumentStore = Depends(get_store)) -> ViewStats:
    return get_view_stats(store, email)

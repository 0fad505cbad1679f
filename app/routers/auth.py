# auth.py
from datetime import timedelta
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from app.config import Settings
from app.db.document_store import DocumentStore
from app.routers.dependencies import get_app_settings, get_store
from app.schemas.auth import AccessTokenResponse
from app.utils.jwt_handler import create_access_token


router = APIRouter()


@router.get("/jwt", response_model=AccessTokenResponse)
def issue_token(
    email: str | None = Query(default=None),
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    user = store.find_profile(email) if email else None
    if not user:
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"accessToken": ""})
    expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    token = create_access_token({"email": email}, expires_delta)
    return AccessTokenResponse(access_token=token)

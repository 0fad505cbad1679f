# dependencies.py
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.datastructures import UploadFile
from app.config import Settings, get_settings
from app.db.document_store import DocumentStore
from app.errors import AuthError
from app.schemas.auth import TokenData
from app.services.media_uploader import MediaFile, MediaUploader
from app.utils.jwt_handler import decode_access_token


bearer_scheme = HTTPBearer(auto_error=False)


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_uploader(request: Request) -> MediaUploader:
    return request.app.state.uploader


def get_app_settings() -> Settings:
    return get_settings()


def verify_profile_owner(
    email: str,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> TokenData | None:
    """Token check for per-user write routes.

    Without REQUIRE_AUTH an anonymous request is let through; any token that is sent
    must still be valid and issued for the email in the path.
    """
    if credentials is None or not credentials.credentials:
        if settings.require_auth:
            raise AuthError("Not authenticated")
        return None
    payload = decode_access_token(credentials.credentials)
    subject = payload.get("email")
    if not subject:
        raise AuthError("Invalid token payload", forbidden=True)
    if subject != email:
        raise AuthError("Token was not issued for this user", forbidden=True)
    return TokenData(email=subject)


async def read_media_file(upload: UploadFile) -> MediaFile:
    data = await upload.read()
    return MediaFile(
        filename=upload.filename or "upload",
        content_type=upload.content_type or "application/octet-stream",
        data=data,
    )


async def read_media_files(uploads: list[UploadFile] | None) -> list[MediaFile]:
    return [await read_media_file(upload) for upload in uploads or [] if upload.filename]

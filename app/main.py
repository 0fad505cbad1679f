# main.py
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Ensure repo-root .env is loaded for the running server process.
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env")

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import build_sqlalchemy_db_url, settings
from app.db.document_store import DocumentStore
from app.errors import register_exception_handlers
from app.api.routes.health import router as health_router
from app.routers import archive, auth, drafts, inbox, media, users, views
from app.services.media_uploader import CloudinaryUploader, MediaUploader


def create_app(*, store: DocumentStore | None = None, uploader: MediaUploader | None = None) -> FastAPI:
    """Build the application.

    `store` and `uploader` default to the configured SQLAlchemy store and Cloudinary
    client; tests pass their own. The store is opened on startup and closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store = store or DocumentStore(build_sqlalchemy_db_url(settings))
        app.state.uploader = uploader or CloudinaryUploader.from_settings(settings)
        app.state.store.open()
        try:
            yield
        finally:
            app.state.store.close()

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(application)

    application.include_router(health_router)
    application.include_router(views.router)

    # /users/jwt must be registered before /users/{email}.
    application.include_router(auth.router, prefix="/users", tags=["auth"])
    application.include_router(media.router)
    application.include_router(archive.router)
    application.include_router(inbox.router)
    application.include_router(drafts.router)
    application.include_router(users.router, prefix="/users", tags=["users"])
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.port)

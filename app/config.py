from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Load project-root .env early so both pydantic-settings and any direct os.getenv access
# see consistent values, even if the process CWD is not the repo root.
_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_IN_TEST = (os.getenv("ENVIRONMENT") or "").lower() == "test" or bool(os.getenv("PYTEST_CURRENT_TEST"))
if _ENV_PATH.exists() and not _IN_TEST:
    load_dotenv(dotenv_path=_ENV_PATH, override=True)


class Settings(BaseSettings):
    app_name: str = Field(default="Innova Portfolio API")
    version: str = Field(default="0.1.0")
    environment: str = Field(default="development")
    debug: bool = Field(default=False)
    port: int = Field(default=8000, validation_alias="PORT")

    # Document store. DB_URL wins; otherwise sqlite in development and the
    # discrete DB_* settings everywhere else.
    db_url: str | None = Field(default=None, validation_alias="DB_URL")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=3306, validation_alias="DB_PORT")
    db_name: str = Field(default="innova_portfolio", validation_alias="DB_NAME")
    db_user: str = Field(default="root", validation_alias="DB_USER")
    db_password: str = Field(default="", validation_alias="DB_PASSWORD")
    db_charset: str = Field(default="utf8mb4", validation_alias="DB_CHARSET")

    jwt_secret: str = Field(
        default="change-me",
        validation_alias=AliasChoices("ACCESS_TOKEN_SECRET", "ACCESS_TOKEN", "JWT_SECRET"),
    )
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # When false (the historical behaviour) per-user write routes accept
    # anonymous requests; a bearer token, if sent, is still verified.
    require_auth: bool = Field(default=False, validation_alias="REQUIRE_AUTH")

    # Media host
    cloudinary_cloud_name: str | None = Field(default=None, validation_alias="CLOUDINARY_CLOUD_NAME")
    cloudinary_api_key: str | None = Field(default=None, validation_alias="CLOUDINARY_API_KEY")
    cloudinary_api_secret: str | None = Field(default=None, validation_alias="CLOUDINARY_API_SECRET")
    cloudinary_api_base: str = Field(default="https://api.cloudinary.com/v1_1", validation_alias="CLOUDINARY_API_BASE")
    upload_timeout_seconds: float = Field(default=60.0, validation_alias="UPLOAD_TIMEOUT_SECONDS")
    upload_max_workers: int = Field(default=4, ge=1, validation_alias="UPLOAD_MAX_WORKERS")
    max_upload_bytes: int = Field(default=20 * 1024 * 1024, validation_alias="MAX_UPLOAD_BYTES")
    max_files_per_upload: int = Field(default=10, ge=1, validation_alias="MAX_FILES_PER_UPLOAD")

    cors_origins: list[str] = Field(default_factory=lambda: ["*"], validation_alias="CORS_ORIGINS")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def build_sqlalchemy_db_url(settings: Settings) -> str:
    if settings.db_url:
        return settings.db_url

    # In development, default to a local sqlite file unless explicitly configured.
    if settings.environment.lower() == "development":
        return "sqlite:///./dev.db"

    # NOTE: password may include special chars; safest is to rely on DB_URL for complex passwords.
    return (
        f"mysql+pymysql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
        f"?charset={settings.db_charset}"
    )


def is_media_host_configured(settings: Settings) -> bool:
    return bool(settings.cloudinary_cloud_name and settings.cloudinary_api_key and settings.cloudinary_api_secret)

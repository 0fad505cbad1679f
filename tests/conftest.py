from __future__ import annotations

import os
import threading
from typing import Any

import pytest
from fastapi.testclient import TestClient


TEST_DB_URL = "sqlite:///./test.db"


def pytest_configure() -> None:
    os.environ["ENVIRONMENT"] = "test"
    os.environ["DB_URL"] = TEST_DB_URL
    os.environ["ACCESS_TOKEN_SECRET"] = "test-secret"
    os.environ["REQUIRE_AUTH"] = "false"


class FakeUploader:
    """Stands in for the media host. URLs are derived from the file name so tests can
    check that every entry got the URL of its own file."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.fail_on: set[str] = set()
        self._lock = threading.Lock()

    def upload(self, media, target) -> str:
        from app.errors import MediaUploadError

        with self._lock:
            self.calls.append((media.filename, target))
        if media.filename in self.fail_on:
            raise MediaUploadError("Error uploading to Cloudinary", f"rejected {media.filename}")
        return f"https://media.test/{target.resource_type}/{target.folder or 'root'}/{media.filename}"

    @property
    def uploaded(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture()
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture()
def client(uploader: FakeUploader) -> Any:
    from app.db.document_store import DocumentStore
    from app.main import create_app

    store = DocumentStore(TEST_DB_URL)
    app = create_app(store=store, uploader=uploader)
    with TestClient(app) as c:
        store.reset()
        yield c


@pytest.fixture()
def store(client) -> Any:
    return client.app.state.store


@pytest.fixture()
def user(client) -> dict[str, Any]:
    r = client.post("/users", json={"name": "A", "email": "a@x.com"})
    assert r.status_code == 201
    return r.json()

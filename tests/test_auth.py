from __future__ import annotations

from datetime import timedelta

import pytest
from jose import jwt

from app.config import settings
from app.utils.jwt_handler import create_access_token


def _bearer(email: str, minutes: int = 5) -> dict[str, str]:
    token = create_access_token({"email": email}, timedelta(minutes=minutes))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def require_auth(monkeypatch):
    monkeypatch.setattr(settings, "require_auth", True)


def test_issue_token_for_known_user(client, user) -> None:
    r = client.get("/users/jwt", params={"email": "a@x.com"})
    assert r.status_code == 200
    token = r.json()["accessToken"]

    claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    assert claims["email"] == "a@x.com"
    assert "exp" in claims


def test_issue_token_refused_for_unknown_or_missing_email(client) -> None:
    r = client.get("/users/jwt", params={"email": "ghost@x.com"})
    assert r.status_code == 403
    assert r.json() == {"accessToken": ""}

    r = client.get("/users/jwt")
    assert r.status_code == 403
    assert r.json() == {"accessToken": ""}


def test_anonymous_writes_allowed_by_default(client, user) -> None:
    r = client.patch("/users/a@x.com", data={"name": "B"})
    assert r.status_code == 200


def test_sent_token_is_checked_even_when_optional(client, user) -> None:
    r = client.patch("/users/a@x.com", data={"name": "B"}, headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 403
    assert r.json() == {"message": "Invalid token"}


def test_missing_token_is_401_when_required(client, user, require_auth) -> None:
    r = client.patch("/users/a@x.com", data={"name": "B"})
    assert r.status_code == 401
    assert r.json() == {"message": "Not authenticated"}


def test_token_for_other_user_is_403(client, user, require_auth) -> None:
    r = client.patch("/users/a@x.com", data={"name": "B"}, headers=_bearer("b@x.com"))
    assert r.status_code == 403


def test_expired_token_is_403(client, user, require_auth) -> None:
    r = client.patch("/users/a@x.com", data={"name": "B"}, headers=_bearer("a@x.com", minutes=-1))
    assert r.status_code == 403
    assert r.json() == {"message": "Token expired"}


def test_valid_token_is_accepted(client, user, require_auth) -> None:
    r = client.patch("/users/a@x.com", data={"name": "B"}, headers=_bearer("a@x.com"))
    assert r.status_code == 200
    assert client.get("/users/a@x.com").json()["name"] == "B"


def test_reads_and_notifications_stay_public(client, user, require_auth) -> None:
    assert client.get("/users/a@x.com").status_code == 200
    r = client.patch(
        "/users/a@x.com/notifications",
        json={"senderName": "V", "senderEmail": "v@x.com", "subject": "Hi", "message": "Hello"},
    )
    assert r.status_code == 200


def test_media_routes_are_guarded(client, uploader, user, require_auth) -> None:
    r = client.patch("/users/a@x.com/gallery", files=[("gallery", ("a.png", b"png", "image/png"))])
    assert r.status_code == 401
    assert uploader.calls == []

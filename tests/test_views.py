from __future__ import annotations

from datetime import datetime, timedelta, timezone

from app.schemas.profile import ReachRecord
from app.services.view_service import count_recent_views, record_view


def test_each_view_increments_and_records_reach(client, user) -> None:
    for expected in (1, 2, 3):
        r = client.post("/view", json={"email": "a@x.com"})
        assert r.status_code == 200
        body = r.json()
        assert body["email"] == "a@x.com"
        assert body["viewCount"] == expected
        assert body["viewsLastWeek"] == expected
        assert len(body["reachHistory"]) == expected

    history = client.get("/view/a@x.com").json()["reachHistory"]
    assert [record["viewCount"] for record in history] == [1, 2, 3]
    dates = [datetime.fromisoformat(record["date"].replace("Z", "+00:00")) for record in history]
    assert dates == sorted(dates)


def test_get_view_stats_without_views(client, user) -> None:
    r = client.get("/view/a@x.com")
    assert r.status_code == 200
    assert r.json() == {"email": "a@x.com", "viewCount": 0, "viewsLastWeek": 0, "reachHistory": []}


def test_view_requires_known_email(client) -> None:
    r = client.post("/view", json={})
    assert r.status_code == 400
    assert r.json() == {"message": "Email is required"}

    assert client.post("/view", json={"email": "ghost@x.com"}).status_code == 404
    assert client.get("/view/ghost@x.com").status_code == 404


def test_views_last_week_excludes_old_records(client, store, user) -> None:
    now = datetime.now(timezone.utc)
    store.set_fields(
        "a@x.com",
        {
            "viewCount": 2,
            "reachHistory": [
                {"date": (now - timedelta(days=30)).isoformat(), "viewCount": 1},
                {"date": (now - timedelta(days=2)).isoformat(), "viewCount": 2},
            ],
        },
    )

    body = client.post("/view", json={"email": "a@x.com"}).json()
    assert body["viewCount"] == 3
    assert body["viewsLastWeek"] == 2


def test_record_view_treats_missing_count_as_zero(store, user) -> None:
    store.set_fields("a@x.com", {"viewCount": None, "reachHistory": None})

    stats = record_view(store, "a@x.com")
    assert stats.view_count == 1
    assert [r.view_count for r in stats.reach_history] == [1]


def test_count_recent_views_includes_boundary() -> None:
    now = datetime(2024, 6, 8, 12, 0, tzinfo=timezone.utc)
    history = [
        ReachRecord(date=now - timedelta(days=7), view_count=1),
        ReachRecord(date=now - timedelta(days=7, seconds=1), view_count=2),
        ReachRecord(date=now, view_count=3),
    ]

    assert count_recent_views(history, now=now) == 2
    assert count_recent_views([], now=now) == 0


def test_count_recent_views_treats_naive_dates_as_utc() -> None:
    now = datetime(2024, 6, 8, 12, 0, tzinfo=timezone.utc)
    history = [ReachRecord(date=datetime(2024, 6, 5), view_count=1)]

    assert count_recent_views(history, now=now) == 1

from __future__ import annotations


NOTE = {"senderName": "Visitor", "senderEmail": "v@x.com", "subject": "Hello", "message": "Nice work"}


def test_send_and_read_notifications(client, user) -> None:
    r = client.patch("/users/a@x.com/notifications", json=NOTE)
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Notification sent successfully"
    assert body["notification"]["senderName"] == "Visitor"
    assert body["notification"]["timestamp"]

    notifications = client.get("/users/a@x.com/notifications").json()["notifications"]
    assert len(notifications) == 1
    assert notifications[0]["subject"] == "Hello"
    assert notifications[0]["senderEmail"] == "v@x.com"


def test_notification_recipient_from_body(client, user) -> None:
    client.post("/users", json={"name": "B", "email": "b@x.com"})

    r = client.patch("/users/a@x.com/notifications", json={**NOTE, "toEmail": "b@x.com"})
    assert r.status_code == 200

    assert client.get("/users/a@x.com/notifications").json() == {"notifications": []}
    assert len(client.get("/users/b@x.com/notifications").json()["notifications"]) == 1


def test_notification_requires_all_fields(client, user) -> None:
    r = client.patch("/users/a@x.com/notifications", json={**NOTE, "subject": ""})
    assert r.status_code == 400
    assert r.json() == {"message": "All fields are required"}


def test_notification_to_unknown_user(client) -> None:
    r = client.patch("/users/ghost@x.com/notifications", json=NOTE)
    assert r.status_code == 404
    assert client.get("/users/ghost@x.com/notifications").status_code == 404


def test_add_and_list_events(client, user) -> None:
    r = client.patch("/users/a@x.com/events", json={"title": "Launch", "date": "2024-05-01T10:00:00Z"})
    assert r.status_code == 200
    event = r.json()
    assert event["email"] == "a@x.com"
    assert event["title"] == "Launch"
    assert event["date"].startswith("2024-05-01T10:00:00")

    r = client.get("/users/a@x.com/events")
    assert r.status_code == 200
    assert r.json() == [event]


def test_event_validation(client, user) -> None:
    r = client.patch("/users/a@x.com/events", json={"title": "Launch"})
    assert r.status_code == 400
    assert r.json() == {"message": "All fields are required"}

    r = client.patch("/users/a@x.com/events", json={"title": "Launch", "date": "someday"})
    assert r.status_code == 400
    assert r.json() == {"message": "Invalid event date"}


def test_event_for_unknown_user(client) -> None:
    r = client.patch("/users/ghost@x.com/events", json={"title": "Launch", "date": "2024-05-01T10:00:00Z"})
    assert r.status_code == 404

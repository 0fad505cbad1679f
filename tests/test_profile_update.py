from __future__ import annotations

import json


PNG = b"\x89PNG\r\n\x1a\n"


def _patch(client, data=None, files=None, email: str = "a@x.com"):
    return client.patch(f"/users/{email}", data=data or {}, files=files)


def test_new_education_is_appended(client, store, user) -> None:
    store.set_fields("a@x.com", {"education": [{"school": "Old"}]})

    r = _patch(client, {"newEducation": json.dumps({"school": "X", "degree": "BSc"})})
    assert r.status_code == 200
    assert r.json() == {"message": "User updated successfully"}

    education = client.get("/users/a@x.com").json()["education"]
    assert education == [{"school": "Old"}, {"school": "X", "degree": "BSc"}]


def test_out_of_range_remove_index_leaves_list_unchanged(client, store, user) -> None:
    store.set_fields("a@x.com", {"experience": [{"role": "a"}, {"role": "b"}]})

    r = _patch(client, {"removeExperienceIndex": "7"})
    assert r.status_code == 200
    assert r.json()["message"] == "No changes made to the user"

    assert client.get("/users/a@x.com").json()["experience"] == [{"role": "a"}, {"role": "b"}]


def test_full_list_replaces_appended_entry(client, store, user) -> None:
    store.set_fields("a@x.com", {"education": [{"school": "A"}]})

    r = _patch(
        client,
        {
            "newEducation": json.dumps({"school": "B"}),
            "education": json.dumps([{"school": "Only"}]),
        },
    )
    assert r.status_code == 200
    assert client.get("/users/a@x.com").json()["education"] == [{"school": "Only"}]


def test_education_logo_uploads_and_carry_forward(client, store, uploader, user) -> None:
    store.set_fields("a@x.com", {"education": [{"school": "A", "logo": "old-a"}, {"school": "B", "logo": "old-b"}]})

    r = _patch(
        client,
        {"education": json.dumps([{"school": "A"}, {"school": "B"}])},
        files={"education[0][logo]": ("new.png", PNG, "image/png")},
    )
    assert r.status_code == 200

    education = client.get("/users/a@x.com").json()["education"]
    assert education[0]["logo"] == "https://media.test/auto/root/new.png"
    assert education[1]["logo"] == "old-b"
    assert uploader.uploaded == ["new.png"]


def test_profile_image_upload(client, uploader, user) -> None:
    r = _patch(client, {"bio": "hello"}, files={"image": ("me.png", PNG, "image/png")})
    assert r.status_code == 200

    body = client.get("/users/a@x.com").json()
    assert body["image"] == "https://media.test/auto/root/me.png"
    assert body["bio"] == "hello"


def test_only_submitted_scalars_change(client, store, user) -> None:
    store.set_fields("a@x.com", {"bio": "keep", "phone": "123", "education": [{"school": "A"}]})

    r = _patch(client, {"name": "Renamed"})
    assert r.status_code == 200

    body = client.get("/users/a@x.com").json()
    assert body["name"] == "Renamed"
    assert body["bio"] == "keep"
    assert body["phone"] == "123"
    assert body["education"] == [{"school": "A"}]


def test_empty_update_reports_no_changes(client, user) -> None:
    r = _patch(client, {})
    assert r.status_code == 200
    assert r.json()["message"] == "No changes made to the user"


def test_malformed_json_fails_before_any_upload(client, uploader, user) -> None:
    r = _patch(client, {"education": "[{broken"}, files={"image": ("me.png", PNG, "image/png")})
    assert r.status_code == 400
    assert r.json()["message"].startswith("Malformed education")
    assert uploader.calls == []


def test_non_integer_remove_index_is_rejected(client, user) -> None:
    r = _patch(client, {"removeEducationIndex": "second"})
    assert r.status_code == 400


def test_upload_failure_persists_nothing(client, uploader, user) -> None:
    uploader.fail_on.add("me.png")

    r = _patch(client, {"name": "Changed"}, files={"image": ("me.png", PNG, "image/png")})
    assert r.status_code == 500
    body = r.json()
    assert body["message"] == "Error uploading to Cloudinary"
    assert "me.png" in body["error"]

    after = client.get("/users/a@x.com").json()
    assert after["name"] == "A"
    assert after["image"] is None


def test_rejects_non_media_upload(client, uploader, user) -> None:
    r = _patch(client, {}, files={"image": ("notes.txt", b"text", "text/plain")})
    assert r.status_code == 400
    assert uploader.calls == []


def test_update_unknown_user(client) -> None:
    r = _patch(client, {"name": "X"}, email="ghost@x.com")
    assert r.status_code == 404
    assert r.json()["message"] == "User not found"


def test_removing_education_leaves_other_entries_untouched(client, store, user) -> None:
    store.set_fields("a@x.com", {"education": [{"school": "A", "logo": "logo-a"}, {"school": "B"}]})

    r = _patch(client, {"removeEducationIndex": "0"})
    assert r.status_code == 200

    assert client.get("/users/a@x.com").json()["education"] == [{"school": "B"}]

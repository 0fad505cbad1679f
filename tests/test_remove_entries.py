from __future__ import annotations

import pytest


ENTRIES = {
    "education": [{"school": "A"}, {"school": "B"}, {"school": "C"}],
    "experience": [{"role": "x"}, {"role": "y"}],
}


@pytest.fixture()
def seeded(store, user):
    store.set_fields("a@x.com", ENTRIES)
    return store


def test_remove_education_keeps_order(client, seeded) -> None:
    r = client.patch("/users/a@x.com/remove-education", json={"removeEducationIndex": 1})
    assert r.status_code == 200
    assert r.json() == {"message": "Education entry removed successfully"}

    assert client.get("/users/a@x.com").json()["education"] == [{"school": "A"}, {"school": "C"}]


def test_remove_experience_accepts_string_index(client, seeded) -> None:
    r = client.patch("/users/a@x.com/remove-experience", json={"removeExperienceIndex": "0"})
    assert r.status_code == 200
    assert r.json() == {"message": "Experience entry removed successfully"}

    assert client.get("/users/a@x.com").json()["experience"] == [{"role": "y"}]


@pytest.mark.parametrize("index", [3, -1, "abc", None, True])
def test_remove_education_invalid_index(client, seeded, index) -> None:
    r = client.patch("/users/a@x.com/remove-education", json={"removeEducationIndex": index})
    assert r.status_code == 400
    assert r.json() == {"message": "Invalid education index"}

    assert len(client.get("/users/a@x.com").json()["education"]) == 3


def test_remove_experience_out_of_range(client, seeded) -> None:
    r = client.patch("/users/a@x.com/remove-experience", json={"removeExperienceIndex": 2})
    assert r.status_code == 400
    assert r.json() == {"message": "Invalid experience index"}


def test_remove_from_unknown_user_is_404_before_index_check(client) -> None:
    r = client.patch("/users/ghost@x.com/remove-education", json={"removeEducationIndex": "nope"})
    assert r.status_code == 404
    assert r.json() == {"message": "User not found"}


def test_remove_from_empty_list(client, user) -> None:
    r = client.patch("/users/a@x.com/remove-experience", json={"removeExperienceIndex": 0})
    assert r.status_code == 400


@pytest.mark.parametrize("index", [1.0, "1.0"])
def test_remove_education_accepts_integral_numbers(client, seeded, index) -> None:
    r = client.patch("/users/a@x.com/remove-education", json={"removeEducationIndex": index})
    assert r.status_code == 200

    assert client.get("/users/a@x.com").json()["education"] == [{"school": "A"}, {"school": "C"}]


def test_remove_education_rejects_fractional_index(client, seeded) -> None:
    r = client.patch("/users/a@x.com/remove-education", json={"removeEducationIndex": "1.5"})
    assert r.status_code == 400

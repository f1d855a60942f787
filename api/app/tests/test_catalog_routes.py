from __future__ import annotations

import pytest

from app.tests.utils import ADMIN_HEADERS


def _movie_upload(**overrides) -> dict:
    payload = {
        "content_type": "Movie",
        "title": "Night Train",
        "genre": ["Action", "Thriller"],
        "description": "A runaway train.",
        "release_year": 2025,
        "rating_type": "PG-13",
        "rating": 7.5,
        "duration": 112,
        "directors": ["A. Director"],
        "feature_in": ["home_hero"],
        "video_url": "https://cdn.example.com/night-train.mp4",
    }
    payload.update(overrides)
    return payload


def _series_upload() -> dict:
    return {
        "content_type": "Web Series",
        "title": "Harbor Lights",
        "genre": ["Drama"],
        "seasons": [
            {
                "description": "The arrival",
                "feature_in": ["home_hero"],
                "episodes": [{"title": "Pilot", "duration": 45}, {"title": "Tide", "duration": 44}],
            },
            {"description": "The storm", "episodes": [{"title": "Gale"}]},
        ],
    }


def _show_upload() -> dict:
    return {
        "content_type": "Show",
        "title": "Late Talk",
        "genre": ["Comedy"],
        "description": "Nightly talk show.",
        "episodes": [{"title": "Opening night"}],
    }


async def _upload(client, payload: dict) -> dict:
    response = await client.post("/api/catalog", json=payload, headers=ADMIN_HEADERS)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_upload_requires_admin(client):
    response = await client.post("/api/catalog", json=_movie_upload())
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_catalog_lists_one_entry_per_season(client):
    movie = await _upload(client, _movie_upload())
    series = await _upload(client, _series_upload())
    await _upload(client, _show_upload())

    response = await client.get("/api/catalog")
    assert response.status_code == 200
    entries = response.json()
    assert len(entries) == 4
    ids = {entry["id"] for entry in entries}
    assert movie["id"] in ids
    assert f"{series['id']}-season-1" in ids
    assert f"{series['id']}-season-2" in ids

    season_one = next(entry for entry in entries if entry["id"] == f"{series['id']}-season-1")
    assert season_one["content_type"] == "Web Series"
    assert season_one["title"] == "Harbor Lights"
    assert season_one["episode_count"] == 2
    assert [episode["title"] for episode in season_one["season"]["episodes"]] == ["Pilot", "Tide"]


@pytest.mark.asyncio
async def test_catalog_can_be_filtered_by_type_and_limited(client):
    await _upload(client, _movie_upload())
    await _upload(client, _series_upload())

    response = await client.get("/api/catalog", params={"content_type": "Web Series"})
    assert [entry["season_number"] for entry in response.json()] == [1, 2]

    response = await client.get("/api/catalog", params={"limit": 1})
    assert len(response.json()) == 1


@pytest.mark.asyncio
async def test_sections_group_by_type(client):
    await _upload(client, _movie_upload())
    await _upload(client, _series_upload())
    await _upload(client, _show_upload())

    response = await client.get("/api/catalog/sections")
    assert response.status_code == 200
    sections = response.json()
    assert len(sections["movies"]) == 1
    assert len(sections["web_series"]) == 2
    assert len(sections["shows"]) == 1
    assert sections["shows"][0]["episode_count"] == 1


@pytest.mark.asyncio
async def test_featured_matches_seasons_individually(client):
    movie = await _upload(client, _movie_upload())
    series = await _upload(client, _series_upload())

    response = await client.get("/api/catalog/featured", params={"feature": "home_hero"})
    assert response.status_code == 200
    assert {entry["id"] for entry in response.json()} == {movie["id"], f"{series['id']}-season-1"}

    response = await client.get("/api/catalog/featured", params={"feature": ""})
    assert response.json() == []


@pytest.mark.asyncio
async def test_genre_alias_matches_action_or_adventure(client):
    await _upload(client, _movie_upload())
    await _upload(client, _movie_upload(title="Jungle Trek", genre=["Adventure"]))
    await _upload(client, _show_upload())

    response = await client.get("/api/catalog/by-genre", params={"genre": "Action & Adventure"})
    assert sorted(entry["title"] for entry in response.json()) == ["Jungle Trek", "Night Train"]

    response = await client.get("/api/catalog/by-genre", params={"genre": "Comedy"})
    assert [entry["title"] for entry in response.json()] == ["Late Talk"]


@pytest.mark.asyncio
async def test_display_ids_resolve_to_entries(client):
    movie = await _upload(client, _movie_upload())
    series = await _upload(client, _series_upload())

    response = await client.get(f"/api/catalog/{movie['id']}")
    assert response.status_code == 200
    assert response.json()["content_type"] == "Movie"
    assert response.json()["views"] == 0

    response = await client.get(f"/api/catalog/{series['id']}-season-2")
    assert response.status_code == 200
    assert response.json()["season_number"] == 2
    assert response.json()["description"] == "The storm"

    assert (await client.get(f"/api/catalog/{series['id']}-season-3")).status_code == 404
    assert (await client.get("/api/catalog/not-an-id")).status_code == 404


@pytest.mark.asyncio
async def test_delete_removes_record_and_details(client):
    series = await _upload(client, _series_upload())

    response = await client.delete(f"/api/catalog/{series['id']}", headers=ADMIN_HEADERS)
    assert response.status_code == 204
    assert (await client.get("/api/catalog")).json() == []

    stats = (await client.get("/api/platform-stats")).json()
    assert stats["total_web_series"] == 0

    response = await client.delete(f"/api/catalog/{series['id']}", headers=ADMIN_HEADERS)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_edit_requires_admin_and_known_record(client):
    movie = await _upload(client, _movie_upload())

    response = await client.put(f"/api/catalog/{movie['id']}", json=_movie_upload(title="Renamed"))
    assert response.status_code == 403

    response = await client.put(
        "/api/catalog/00000000-0000-0000-0000-000000000000", json=_movie_upload(), headers=ADMIN_HEADERS
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_edit_series_replaces_seasons_in_place(client):
    series = await _upload(client, _series_upload())
    payload = _series_upload()
    payload["title"] = "Harbor Lights Redux"
    payload["seasons"][0]["feature_in"] = []
    payload["seasons"][1]["feature_in"] = ["home_hero"]

    response = await client.put(f"/api/catalog/{series['id']}", json=payload, headers=ADMIN_HEADERS)
    assert response.status_code == 200, response.text
    assert response.json()["id"] == series["id"]
    assert response.json()["content_id"] == series["content_id"]

    response = await client.get("/api/catalog/featured", params={"feature": "home_hero"})
    featured = response.json()
    assert [entry["id"] for entry in featured] == [f"{series['id']}-season-2"]
    assert featured[0]["title"] == "Harbor Lights Redux"
    assert len((await client.get("/api/catalog")).json()) == 2


@pytest.mark.asyncio
async def test_edit_movie_keeps_view_count(client):
    movie = await _upload(client, _movie_upload())
    await client.post(f"/api/views/movie/{movie['content_id']}")

    response = await client.put(
        f"/api/catalog/{movie['id']}", json=_movie_upload(rating=8.1), headers=ADMIN_HEADERS
    )
    assert response.status_code == 200

    entry = (await client.get(f"/api/catalog/{movie['id']}")).json()
    assert entry["rating"] == 8.1
    response = await client.get(f"/api/views/movie/{movie['content_id']}")
    assert response.json()["views"] == 1


@pytest.mark.asyncio
async def test_edit_movie_into_web_series_rebuilds_details(client):
    movie = await _upload(client, _movie_upload())

    response = await client.put(f"/api/catalog/{movie['id']}", json=_series_upload(), headers=ADMIN_HEADERS)
    assert response.status_code == 200, response.text
    assert response.json()["content_type"] == "Web Series"
    assert response.json()["id"] == movie["id"]

    entries = (await client.get("/api/catalog")).json()
    assert [entry["id"] for entry in entries] == [f"{movie['id']}-season-1", f"{movie['id']}-season-2"]
    assert (await client.get(f"/api/catalog/{movie['id']}")).status_code == 404

    stats = (await client.get("/api/platform-stats")).json()
    assert stats["total_movies"] == 0
    assert stats["total_web_series"] == 1

"""Tests for learning preference routes."""

from unittest.mock import patch

from habits import HabitStoreError


def test_empty(client, auth_headers):
    res = client.get("/api/preferences", headers=auth_headers)
    assert res.status_code == 200
    assert res.json() == {}


def test_put_and_get(client, auth_headers):
    res = client.put(
        "/api/preferences",
        headers=auth_headers,
        json={"preferences": {"session_length": "25", "study_style": "visual"}},
    )
    assert res.status_code == 200
    assert res.json() == {"session_length": "25", "study_style": "visual"}

    client.put(
        "/api/preferences", headers=auth_headers, json={"preferences": {"session_length": "50"}}
    )
    res = client.get("/api/preferences", headers=auth_headers)
    assert res.json() == {"session_length": "50", "study_style": "visual"}


def test_empty_update_rejected(client, auth_headers):
    res = client.put("/api/preferences", headers=auth_headers, json={"preferences": {}})
    assert res.status_code == 422


def test_isolated(client, auth_headers, auth_headers_b):
    client.put("/api/preferences", headers=auth_headers, json={"preferences": {"k": "v"}})
    assert client.get("/api/preferences", headers=auth_headers_b).json() == {}


def test_preferences_feed_context(client, auth_headers):
    client.put("/api/preferences", headers=auth_headers, json={"preferences": {"k": "v"}})
    context = client.get("/api/habits/context", headers=auth_headers).json()["context"]
    assert "Stated preferences: k=v" in context


def test_store_failure(client, auth_headers, habit_store):
    with patch.object(habit_store, "set_preference", side_effect=HabitStoreError("ro")):
        res = client.put(
            "/api/preferences", headers=auth_headers, json={"preferences": {"k": "v"}}
        )
    assert res.status_code == 500

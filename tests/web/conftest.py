"""Shared fixtures for web API tests."""

import os
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from cli.config_models import StudyflowConfig
from habits import SQLiteHabitStore


@pytest.fixture
def jwt_secret():
    return "test-nextauth-secret"


def _make_auth_token(jwt_secret, user_id, email="u@test.com", name="U"):
    return jwt.encode(
        {"sub": user_id, "email": email, "name": name},
        jwt_secret,
        algorithm="HS256",
    )


@pytest.fixture
def auth_headers(jwt_secret):
    return {"Authorization": f"Bearer {_make_auth_token(jwt_secret, 'user-123')}"}


@pytest.fixture
def auth_headers_b(jwt_secret):
    """Second user for isolation tests."""
    return {"Authorization": f"Bearer {_make_auth_token(jwt_secret, 'user-456')}"}


@pytest.fixture
def habit_store(tmp_path):
    return SQLiteHabitStore(tmp_path / "habits.db")


@pytest.fixture
def client(jwt_secret, habit_store, monkeypatch):
    """Test client backed by a fresh SQLite habit store, no LLM keys."""
    for key in ("OPENAI_API_KEY", "TOGETHER_API_KEY", "ANTHROPIC_API_KEY", "STUDYFLOW_JWT_SECRET"):
        monkeypatch.delenv(key, raising=False)

    patches = [
        patch.dict(os.environ, {"NEXTAUTH_SECRET": jwt_secret}),
        patch("web.deps.get_config", return_value=StudyflowConfig()),
        patch("web.deps.get_habit_store", return_value=habit_store),
        patch("web.routes.preferences.get_habit_store", return_value=habit_store),
    ]

    for p in patches:
        p.start()

    from web.app import app

    yield TestClient(app)

    for p in reversed(patches):
        p.stop()

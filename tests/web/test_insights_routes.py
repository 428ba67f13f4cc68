"""Tests for AI insight routes."""

import json
from unittest.mock import MagicMock, patch

import pytest

from habits import HabitQueryService
from insights import InsightsEngine
from llm import LLMError

TASKS = [
    {"id": "t1", "title": "Essay draft", "category": "Assignment", "deadline": "2025-03-10"},
    {"id": "t2", "title": "Old quiz", "category": "Exam", "deadline": "2025-03-01",
     "completed": True},
]


@pytest.fixture
def llm():
    llm = MagicMock()
    llm.provider_name = "openai"
    llm.display_name = "openai:gpt-4o-mini"
    return llm


@pytest.fixture
def engine_patch(habit_store, llm):
    engine = InsightsEngine(HabitQueryService(habit_store), llm=llm)
    with patch("web.routes.insights.get_insights_engine", return_value=engine):
        yield engine


def test_no_provider_is_503(client, auth_headers):
    res = client.post("/api/insights/chat", headers=auth_headers, json={"message": "hi"})
    assert res.status_code == 503


def test_suggestions(client, auth_headers, llm, engine_patch):
    llm.generate.return_value = json.dumps([{"title": "Outline essay", "category": "Assignment"}])
    res = client.post("/api/insights/suggestions", headers=auth_headers, json={"tasks": TASKS})
    assert res.status_code == 200
    assert res.json() == {"suggestions": [{"title": "Outline essay", "category": "Assignment"}]}


def test_deadline(client, auth_headers, llm, engine_patch):
    llm.generate.return_value = (
        '{"suggestedDeadline": "2025-03-20", "reasoning": "Buffer", "confidence": "Medium"}'
    )
    res = client.post(
        "/api/insights/deadline",
        headers=auth_headers,
        json={"title": "Lab report", "category": "Assignment", "tasks": TASKS},
    )
    assert res.status_code == 200
    assert res.json()["suggested_deadline"] == "2025-03-20"


def test_schedule_sends_incomplete_only(client, auth_headers, llm, engine_patch):
    llm.generate.return_value = '{"schedule": [], "tips": [], "totalStudyHours": 4}'
    res = client.post("/api/insights/schedule", headers=auth_headers, json={"tasks": TASKS})
    assert res.status_code == 200
    assert res.json()["total_study_hours"] == 4

    prompt = llm.generate.call_args.kwargs["messages"][-1]["content"]
    assert "Essay draft" in prompt
    assert "Old quiz" not in prompt


def test_chat(client, auth_headers, llm, engine_patch):
    llm.generate.return_value = "Break it into 25 minute blocks."
    res = client.post(
        "/api/insights/chat",
        headers=auth_headers,
        json={
            "message": "How should I study?",
            "history": [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hey"}],
        },
    )
    assert res.status_code == 200
    assert res.json() == {
        "response": "Break it into 25 minute blocks.",
        "provider": "openai:gpt-4o-mini",
    }


def test_chat_blank_message(client, auth_headers, engine_patch):
    res = client.post("/api/insights/chat", headers=auth_headers, json={"message": "   "})
    assert res.status_code == 400

    res = client.post("/api/insights/chat", headers=auth_headers, json={"message": ""})
    assert res.status_code == 422


def test_llm_failure_is_502(client, auth_headers, llm, engine_patch):
    llm.generate.side_effect = LLMError("All AI providers are currently unavailable.")
    res = client.post("/api/insights/suggestions", headers=auth_headers, json={"tasks": []})
    assert res.status_code == 502
    assert "AI service error" in res.json()["detail"]

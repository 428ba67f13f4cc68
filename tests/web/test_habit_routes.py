"""Tests for habit tracking and habit read routes."""

from unittest.mock import MagicMock, patch

from habits import HabitAggregator, HabitStoreError
from shared_types import HabitType

TASK = {
    "id": "t1",
    "title": "Read chapter 4",
    "category": "Study",
    "deadline": "2025-03-10",
    "priority": "High",
}


def _complete(client, headers, hour, task_id="t1", category="Study"):
    return client.post(
        "/api/habits/interactions/completed",
        headers=headers,
        json={
            "task": {**TASK, "id": task_id, "category": category},
            "completed_at": f"2025-03-03T{hour:02d}:30:00",
        },
    )


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_unauthed(client):
    res = client.get("/api/habits")
    # HTTPBearer rejects a missing Authorization header
    assert res.status_code in (401, 403)


def test_bad_token(client):
    res = client.get("/api/habits", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401


def test_completion_tracked_in_background(client, auth_headers, habit_store):
    res = _complete(client, auth_headers, 9)
    assert res.status_code == 202
    assert res.json() == {"status": "accepted"}

    record = habit_store.get_habit("user-123", HabitType.OPTIMAL_COMPLETION_TIME)
    assert record.data.hours == {9: 1}
    [event] = habit_store.recent_interactions("user-123")
    assert event.payload["completed_on_time"] is True


def test_completion_scenario_reads(client, auth_headers):
    for i, hour in enumerate([9, 9, 14]):
        _complete(client, auth_headers, hour, task_id=f"t{i}")

    res = client.get("/api/habits/top-hours?n=1", headers=auth_headers)
    assert res.json() == [{"hour": 9, "count": 2, "label": "9:00 AM"}]

    res = client.get("/api/habits/top-categories", headers=auth_headers)
    assert res.json() == [{"category": "Study", "count": 3}]

    habits = client.get("/api/habits", headers=auth_headers).json()
    by_type = {h["habit_type"]: h for h in habits}
    assert by_type["optimal_completion_time"]["confidence_score"] == 0.3
    assert by_type["category_preference"]["confidence_score"] == 0.15
    assert by_type["optimal_completion_time"]["habit_data"] == {
        "hour_preferences": {"9": 2, "14": 1}
    }


def test_invalid_task_rejected(client, auth_headers):
    res = client.post(
        "/api/habits/interactions/completed",
        headers=auth_headers,
        json={"task": {**TASK, "deadline": "someday"}},
    )
    assert res.status_code == 422

    res = client.post(
        "/api/habits/interactions/completed",
        headers=auth_headers,
        json={"task": {"id": "t1", "deadline": "2025-03-10"}},
    )
    assert res.status_code == 422


def test_delay_skip_create_are_log_only(client, auth_headers, habit_store):
    assert client.post(
        "/api/habits/interactions/delayed",
        headers=auth_headers,
        json={"task": TASK, "reason": "sick", "delay_days": 3},
    ).status_code == 202
    assert client.post(
        "/api/habits/interactions/skipped", headers=auth_headers, json={"task": TASK}
    ).status_code == 202
    assert client.post(
        "/api/habits/interactions/created",
        headers=auth_headers,
        json={"task": TASK, "source": "ai_suggestion"},
    ).status_code == 202

    assert habit_store.query_habits("user-123") == []
    assert habit_store.count_interactions("user-123") == {
        "delayed": 1,
        "skipped": 1,
        "created": 1,
    }
    delay = habit_store.recent_interactions("user-123", types=["delayed"])[0]
    assert delay.payload["new_deadline"] == "2025-03-13T23:59:59"


def test_suggestion_feedback_and_accuracy(client, auth_headers):
    for i, accepted in enumerate([True, True, False, True]):
        res = client.post(
            f"/api/habits/suggestions/s{i}/feedback",
            headers=auth_headers,
            json={"accepted": accepted, "suggestion": {"title": f"Idea {i}"}},
        )
        assert res.status_code == 202

    res = client.get("/api/habits/accuracy", headers=auth_headers)
    assert res.json() == {"total": 4, "accepted": 3, "accuracy": 0.75}


def test_accuracy_zero_value(client, auth_headers):
    res = client.get("/api/habits/accuracy", headers=auth_headers)
    assert res.json() == {"total": 0, "accepted": 0, "accuracy": 0.0}


def test_strength_and_insights(client, auth_headers):
    _complete(client, auth_headers, 9)

    strength = client.get("/api/habits/strength", headers=auth_headers).json()
    assert strength[0]["habit_type"] == "optimal_completion_time"
    assert strength[0]["percent"] == 10

    insights = client.get("/api/habits/insights", headers=auth_headers).json()
    assert insights["total_interactions"] == 1
    assert insights["completion_rate"] == 1.0
    assert insights["recent_activity"][0]["task_id"] == "t1"


def test_context_new_user(client, auth_headers):
    res = client.get("/api/habits/context", headers=auth_headers)
    lines = res.json()["context"].split("\n")
    assert len(lines) == 2
    assert lines[0].startswith("Student learning profile")


def test_users_isolated(client, auth_headers, auth_headers_b):
    _complete(client, auth_headers, 9)
    assert client.get("/api/habits", headers=auth_headers_b).json() == []
    assert client.get("/api/habits/top-hours", headers=auth_headers_b).json() == []


def test_store_failure_does_not_fail_request(client, auth_headers, habit_store):
    with patch.object(habit_store, "append_interaction", side_effect=HabitStoreError("locked")):
        res = _complete(client, auth_headers, 9)
    assert res.status_code == 202
    assert habit_store.query_habits("user-123") == []


def test_tracking_schedules_aggregator_methods(client, auth_headers):
    aggregator = MagicMock(spec=HabitAggregator)
    with patch("web.routes.habits.get_aggregator", return_value=aggregator):
        _complete(client, auth_headers, 9)
        client.post(
            "/api/habits/interactions/skipped", headers=auth_headers, json={"task": TASK}
        )
        client.post(
            "/api/habits/suggestions/s1/feedback", headers=auth_headers, json={"accepted": True}
        )

    args = aggregator.record_completion.call_args.args
    assert args[0] == "user-123"
    assert args[1].id == "t1"
    assert aggregator.record_skip.call_args.kwargs == {"reason": None}
    aggregator.record_suggestion_feedback.assert_called_once_with(
        "user-123", "s1", True, suggestion_data=None
    )

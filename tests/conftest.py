"""Shared test fixtures for StudyFlow."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from habits import (  # noqa: E402
    HabitAggregator,
    HabitQueryService,
    InMemoryHabitStore,
    SQLiteHabitStore,
    Task,
)
from observability import metrics  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_metrics():
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def sqlite_store(tmp_path):
    return SQLiteHabitStore(tmp_path / "habits.db")


@pytest.fixture
def memory_store():
    return InMemoryHabitStore()


@pytest.fixture(params=["sqlite", "memory"])
def store(request, tmp_path):
    """Every HabitStore implementation must behave the same."""
    if request.param == "sqlite":
        return SQLiteHabitStore(tmp_path / "habits.db")
    return InMemoryHabitStore()


@pytest.fixture
def aggregator(store):
    return HabitAggregator(store)


@pytest.fixture
def queries(store):
    return HabitQueryService(store)


@pytest.fixture
def task():
    return Task(
        id="t1",
        title="Read chapter 4",
        category="Study",
        deadline=datetime(2025, 3, 10, 23, 59, 59),
        priority="Medium",
    )

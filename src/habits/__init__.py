"""Habit learning — interaction log, confidence-scored habits, prompt context."""

from .aggregator import HabitAggregator
from .context import PersonalizationContextBuilder
from .memory_store import InMemoryHabitStore
from .models import (
    CategoryPreferenceData,
    HabitRecord,
    HourPreferenceData,
    InteractionEvent,
    SuggestionAccuracyData,
    Task,
)
from .queries import HabitQueryService
from .scoring import CONFIDENCE_INCREMENTS, reinforce_confidence
from .store import HabitStore, HabitStoreError, SQLiteHabitStore

__all__ = [
    "HabitAggregator",
    "HabitQueryService",
    "PersonalizationContextBuilder",
    "HabitStore",
    "HabitStoreError",
    "SQLiteHabitStore",
    "InMemoryHabitStore",
    "InteractionEvent",
    "HabitRecord",
    "HourPreferenceData",
    "CategoryPreferenceData",
    "SuggestionAccuracyData",
    "Task",
    "CONFIDENCE_INCREMENTS",
    "reinforce_confidence",
]

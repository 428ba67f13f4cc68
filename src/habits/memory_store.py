"""In-memory HabitStore: test double and scratch backend for local runs."""

import threading
from collections.abc import Iterable

from shared_types import HabitType, InteractionType

from .models import HabitRecord, InteractionEvent
from .store import HabitStore, HabitUpdate


class InMemoryHabitStore(HabitStore):
    """Dict-backed store. A single lock makes each upsert atomic."""

    def __init__(self):
        self._lock = threading.Lock()
        self._events: list[InteractionEvent] = []
        self._habits: dict[tuple[str, HabitType], HabitRecord] = {}
        self._preferences: dict[str, dict[str, str]] = {}

    def append_interaction(self, event: InteractionEvent) -> InteractionEvent:
        with self._lock:
            self._events.append(event)
        return event

    def upsert_habit(self, user_id: str, habit_type: HabitType, apply: HabitUpdate) -> HabitRecord:
        key = (user_id, HabitType(habit_type))
        with self._lock:
            updated = apply(self._habits.get(key))
            self._habits[key] = updated
            return updated

    def query_habits(self, user_id: str) -> list[HabitRecord]:
        with self._lock:
            habits = [h for (uid, _), h in self._habits.items() if uid == user_id]
        return sorted(habits, key=lambda h: (-h.confidence_score, h.habit_type.value))

    def get_habit(self, user_id: str, habit_type: HabitType) -> HabitRecord | None:
        with self._lock:
            return self._habits.get((user_id, HabitType(habit_type)))

    def recent_interactions(
        self,
        user_id: str,
        limit: int = 20,
        types: Iterable[InteractionType] | None = None,
    ) -> list[InteractionEvent]:
        wanted = {InteractionType(t) for t in types} if types is not None else None
        with self._lock:
            events = [
                e for e in self._events
                if e.user_id == user_id and (wanted is None or e.type in wanted)
            ]
        # Newest first; insertion order breaks timestamp ties
        events.reverse()
        events.sort(key=lambda e: e.occurred_at, reverse=True)
        return events[:limit]

    def count_interactions(self, user_id: str) -> dict[str, int]:
        counts: dict[str, int] = {}
        with self._lock:
            for e in self._events:
                if e.user_id == user_id:
                    counts[e.type.value] = counts.get(e.type.value, 0) + 1
        return counts

    def get_preferences(self, user_id: str) -> dict[str, str]:
        with self._lock:
            return dict(sorted(self._preferences.get(user_id, {}).items()))

    def set_preference(self, user_id: str, key: str, value: str) -> None:
        with self._lock:
            self._preferences.setdefault(user_id, {})[key] = value

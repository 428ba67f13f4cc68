"""Read side of habit learning — ranking and summaries for dashboards and prompts."""

import structlog

from shared_types import HabitType, InteractionType

from .models import (
    CategoryPreferenceData,
    HabitRecord,
    HourPreferenceData,
    InteractionEvent,
    SuggestionAccuracyData,
)
from .scoring import confidence_percent
from .store import HabitStore, HabitStoreError

logger = structlog.get_logger()

INSIGHTS_WINDOW = 20
RECENT_ACTIVITY_LIMIT = 10


def rank_hours(data: HourPreferenceData | None, n: int) -> list[dict]:
    """Top-n hours by count desc; equal counts go lower hour first."""
    if data is None or n <= 0:
        return []
    ranked = sorted(
        ((hour, count) for hour, count in data.hours.items() if count > 0),
        key=lambda hc: (-hc[1], hc[0]),
    )
    return [{"hour": hour, "count": count} for hour, count in ranked[:n]]


def rank_categories(data: CategoryPreferenceData | None, n: int) -> list[dict]:
    """Top-n categories by count desc; equal counts go alphabetically."""
    if data is None or n <= 0:
        return []
    ranked = sorted(
        ((cat, count) for cat, count in data.categories.items() if count > 0),
        key=lambda cc: (-cc[1], cc[0]),
    )
    return [{"category": cat, "count": count} for cat, count in ranked[:n]]


def format_hour(hour: int) -> str:
    """12-hour clock label, e.g. 0 -> '12:00 AM', 14 -> '2:00 PM'."""
    period = "PM" if hour >= 12 else "AM"
    display = 12 if hour % 12 == 0 else hour % 12
    return f"{display}:00 {period}"


def habit_label(habit_type: HabitType) -> str:
    return HabitType(habit_type).value.replace("_", " ")


def zero_accuracy() -> dict:
    return SuggestionAccuracyData().to_dict()


class HabitQueryService:
    """Ranks stored habit data. Read failures degrade to empty results."""

    def __init__(self, store: HabitStore, insights_window: int = INSIGHTS_WINDOW):
        self.store = store
        self.insights_window = insights_window

    def get_habits(self, user_id: str | None) -> list[HabitRecord]:
        """All habit records for the user, highest confidence first."""
        if not user_id:
            return []
        try:
            habits = self.store.query_habits(user_id)
        except HabitStoreError as e:
            self._log_read_failure("query_habits", user_id, e)
            return []
        return sorted(habits, key=lambda h: (-h.confidence_score, h.habit_type.value))

    def get_habit(self, user_id: str | None, habit_type: HabitType) -> HabitRecord | None:
        if not user_id:
            return None
        try:
            return self.store.get_habit(user_id, habit_type)
        except HabitStoreError as e:
            self._log_read_failure("get_habit", user_id, e)
            return None

    def get_top_hours(self, user_id: str | None, n: int = 3) -> list[dict]:
        record = self.get_habit(user_id, HabitType.OPTIMAL_COMPLETION_TIME)
        return rank_hours(record.data if record else None, n)

    def get_top_categories(self, user_id: str | None, n: int = 3) -> list[dict]:
        record = self.get_habit(user_id, HabitType.CATEGORY_PREFERENCE)
        return rank_categories(record.data if record else None, n)

    def get_suggestion_accuracy(self, user_id: str | None) -> dict:
        """Accuracy counters; zero value when nothing has been recorded."""
        record = self.get_habit(user_id, HabitType.SUGGESTION_ACCURACY)
        if record is None:
            return zero_accuracy()
        return record.data.to_dict()

    def get_profile_strength(self, user_id: str | None) -> list[dict]:
        """Confidence bars for the dashboard."""
        return [
            {
                "habit_type": h.habit_type.value,
                "label": habit_label(h.habit_type),
                "confidence": h.confidence_score,
                "percent": confidence_percent(h.confidence_score),
            }
            for h in self.get_habits(user_id)
        ]

    def get_preferences(self, user_id: str | None) -> dict[str, str]:
        if not user_id:
            return {}
        try:
            return self.store.get_preferences(user_id)
        except HabitStoreError as e:
            self._log_read_failure("get_preferences", user_id, e)
            return {}

    def get_recent_interactions(
        self,
        user_id: str | None,
        limit: int = RECENT_ACTIVITY_LIMIT,
        types: list[InteractionType] | None = None,
    ) -> list[InteractionEvent]:
        if not user_id:
            return []
        try:
            return self.store.recent_interactions(user_id, limit=limit, types=types)
        except HabitStoreError as e:
            self._log_read_failure("recent_interactions", user_id, e)
            return []

    def get_learning_insights(self, user_id: str | None) -> dict | None:
        """Completion/on-time rates over the recent interaction window.

        Returns None for a missing user.
        """
        if not user_id:
            return None
        try:
            counts = self.store.count_interactions(user_id)
        except HabitStoreError as e:
            self._log_read_failure("count_interactions", user_id, e)
            counts = {}

        recent = self.get_recent_interactions(user_id, limit=self.insights_window)
        task_events = [
            e for e in recent
            if e.type in (
                InteractionType.COMPLETED,
                InteractionType.DELAYED,
                InteractionType.SKIPPED,
            )
        ]
        completed = [e for e in task_events if e.type == InteractionType.COMPLETED]
        on_time = sum(1 for e in completed if e.payload.get("completed_on_time") is True)

        return {
            "total_interactions": sum(counts.values()),
            "interaction_counts": counts,
            "completion_rate": len(completed) / len(task_events) if task_events else 0.0,
            "on_time_rate": on_time / len(completed) if completed else 0.0,
            "suggestion_accuracy": self.get_suggestion_accuracy(user_id)["accuracy"],
            "recent_activity": [
                {
                    "id": e.id,
                    "task_id": e.task_id,
                    "interaction_type": e.type.value,
                    "created_at": e.occurred_at.isoformat(),
                }
                for e in recent[:RECENT_ACTIVITY_LIMIT]
            ],
        }

    @staticmethod
    def _log_read_failure(operation: str, user_id: str, error: Exception):
        logger.warning(
            "habit.store_read_failed",
            operation=operation,
            user_id=user_id,
            error=str(error),
        )

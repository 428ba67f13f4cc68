"""Personalization context: bounded habit summary injected into AI prompts."""

from collections.abc import Iterable, Mapping

from shared_types import HabitType, InteractionType

from .models import HabitRecord, InteractionEvent
from .queries import HabitQueryService, format_hour, rank_categories, rank_hours
from .scoring import confidence_percent

HEADER = "Student learning profile (learned from task activity):"
FALLBACK = "New user: the learning profile is still being built, no habit data yet."

TOP_N = 3
RECENT_COMPLETIONS = 10
MAX_PREFERENCES = 3


class PersonalizationContextBuilder:
    """Flattens habits, preferences and recent interactions into a few lines of text.

    Output never exceeds six lines whatever the size of the underlying data:
    only top-3 and last-10 slices are summarized.
    """

    def __init__(self, queries: HabitQueryService | None = None):
        self.queries = queries

    def build(
        self,
        habits: Iterable[HabitRecord],
        preferences: Mapping[str, str] | None = None,
        recent_interactions: Iterable[InteractionEvent] | None = None,
    ) -> str:
        by_type: dict[HabitType, HabitRecord] = {}
        for habit in habits:
            by_type.setdefault(habit.habit_type, habit)

        lines = [HEADER]

        time_habit = by_type.get(HabitType.OPTIMAL_COMPLETION_TIME)
        if time_habit and not time_habit.data.is_empty():
            hours = ", ".join(
                f"{format_hour(h['hour'])} ({h['count']} tasks)"
                for h in rank_hours(time_habit.data, TOP_N)
            )
            lines.append(
                f"Most productive hours: {hours} "
                f"(confidence {confidence_percent(time_habit.confidence_score)}%)"
            )

        category_habit = by_type.get(HabitType.CATEGORY_PREFERENCE)
        if category_habit and not category_habit.data.is_empty():
            categories = ", ".join(
                f"{c['category']} ({c['count']} completed)"
                for c in rank_categories(category_habit.data, TOP_N)
            )
            lines.append(f"Preferred categories: {categories}")

        accuracy_habit = by_type.get(HabitType.SUGGESTION_ACCURACY)
        if accuracy_habit and not accuracy_habit.data.is_empty():
            data = accuracy_habit.data
            lines.append(
                f"AI suggestion acceptance: {round(data.accuracy * 100)}% "
                f"({data.accepted} of {data.total} suggestions accepted)"
            )

        completions = self._recent_completions(recent_interactions or [])
        if completions:
            on_time = sum(1 for e in completions if e.payload.get("completed_on_time") is True)
            rate = round(on_time / len(completions) * 100)
            lines.append(
                f"Recent on-time completion rate: {rate}% "
                f"({on_time} of last {len(completions)} completed tasks)"
            )

        if preferences:
            shown = sorted(preferences.items())[:MAX_PREFERENCES]
            lines.append("Stated preferences: " + ", ".join(f"{k}={v}" for k, v in shown))

        if len(lines) == 1:
            lines.append(FALLBACK)

        return "\n".join(lines)

    def build_for_user(self, user_id: str | None) -> str:
        """Load habits, preferences and recent completions, then build."""
        if self.queries is None:
            raise ValueError("build_for_user needs a HabitQueryService")
        return self.build(
            self.queries.get_habits(user_id),
            self.queries.get_preferences(user_id),
            self.queries.get_recent_interactions(
                user_id, limit=RECENT_COMPLETIONS, types=[InteractionType.COMPLETED]
            ),
        )

    @staticmethod
    def _recent_completions(events: Iterable[InteractionEvent]) -> list[InteractionEvent]:
        completed = [e for e in events if e.type == InteractionType.COMPLETED]
        completed.sort(key=lambda e: e.occurred_at, reverse=True)
        return completed[:RECENT_COMPLETIONS]

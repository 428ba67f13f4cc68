"""Confidence scoring: saturating accumulation shared by every habit type."""

from shared_types import HabitType

MAX_CONFIDENCE = 1.0

# Direct completion-time observations are the strongest signal; suggestion
# feedback arrives for every suggestion shown and is the noisiest.
CONFIDENCE_INCREMENTS: dict[HabitType, float] = {
    HabitType.OPTIMAL_COMPLETION_TIME: 0.10,
    HabitType.CATEGORY_PREFERENCE: 0.05,
    HabitType.SUGGESTION_ACCURACY: 0.02,
}

_PRECISION = 4


def increment_for(habit_type: HabitType) -> float:
    """Per-type confidence increment."""
    return CONFIDENCE_INCREMENTS[HabitType(habit_type)]


def reinforce_confidence(existing: float | None, increment: float) -> float:
    """min(existing + increment, 1.0). A missing record starts from 0."""
    base = existing or 0.0
    return round(min(base + increment, MAX_CONFIDENCE), _PRECISION)


def confidence_percent(score: float) -> int:
    """Score as a rounded 0-100 percentage for display."""
    return int(round(score * 100))

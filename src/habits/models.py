"""Data models for habit learning: interaction events, tasks, habit records."""

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Union

from shared_types import HabitType, InteractionSource, InteractionType, Priority


def _new_id() -> str:
    return uuid.uuid4().hex[:16]


def parse_timestamp(value: str | datetime | date) -> datetime:
    """Accept datetime, date, or ISO string (``YYYY-MM-DD`` allowed)."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, 23, 59, 59)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if len(text) == 10:
        # Date-only deadline means end of that day
        parsed = parsed.replace(hour=23, minute=59, second=59)
    return parsed


def to_local(value: datetime) -> datetime:
    """Aware datetimes converted to naive local time; naive ones are already local."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def is_on_time(completed_at: datetime, deadline: datetime) -> bool:
    """completed_at <= deadline, comparing naive values as local time."""
    if (completed_at.tzinfo is None) != (deadline.tzinfo is None):
        completed_at, deadline = to_local(completed_at), to_local(deadline)
    return completed_at <= deadline


@dataclass
class Task:
    """Task as supplied by the task layer. Caller guarantees category + deadline."""

    id: str
    title: str
    category: str
    deadline: datetime
    priority: Priority | str = Priority.MEDIUM
    description: str | None = None
    completed: bool = False

    @classmethod
    def from_dict(cls, d: dict) -> "Task":
        return cls(
            id=str(d["id"]),
            title=d.get("title", ""),
            category=d["category"],
            deadline=parse_timestamp(d["deadline"]),
            priority=d.get("priority", Priority.MEDIUM),
            description=d.get("description"),
            completed=bool(d.get("completed", False)),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "deadline": self.deadline.isoformat(),
            "priority": str(self.priority),
            "description": self.description,
            "completed": self.completed,
        }


@dataclass(frozen=True)
class InteractionEvent:
    """Immutable fact describing one user action relevant to learning."""

    user_id: str
    type: InteractionType
    task_id: str | None = None
    source: InteractionSource | None = None
    payload: dict = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "task_id": self.task_id,
            "type": self.type.value,
            "source": self.source.value if self.source else None,
            "payload": dict(self.payload),
            "occurred_at": self.occurred_at.isoformat(),
        }


# --- Typed habit aggregates, one variant per HabitType ---


@dataclass(frozen=True)
class HourPreferenceData:
    """optimal_completion_time: hour-of-day (0-23) -> completions."""

    hours: dict[int, int] = field(default_factory=dict)

    def reinforce(self, hour: int) -> "HourPreferenceData":
        if not 0 <= hour <= 23:
            raise ValueError(f"Hour out of range: {hour}")
        hours = dict(self.hours)
        hours[hour] = hours.get(hour, 0) + 1
        return HourPreferenceData(hours=hours)

    def is_empty(self) -> bool:
        return not any(self.hours.values())

    def to_dict(self) -> dict:
        return {"hour_preferences": {str(h): c for h, c in sorted(self.hours.items())}}

    @classmethod
    def from_dict(cls, d: dict) -> "HourPreferenceData":
        raw = d.get("hour_preferences", {})
        return cls(hours={int(h): int(c) for h, c in raw.items()})


@dataclass(frozen=True)
class CategoryPreferenceData:
    """category_preference: category label -> completions."""

    categories: dict[str, int] = field(default_factory=dict)

    def reinforce(self, category: str) -> "CategoryPreferenceData":
        categories = dict(self.categories)
        categories[category] = categories.get(category, 0) + 1
        return CategoryPreferenceData(categories=categories)

    def is_empty(self) -> bool:
        return not any(self.categories.values())

    def to_dict(self) -> dict:
        return {"preferences": dict(sorted(self.categories.items()))}

    @classmethod
    def from_dict(cls, d: dict) -> "CategoryPreferenceData":
        raw = d.get("preferences", {})
        return cls(categories={str(k): int(v) for k, v in raw.items()})


@dataclass(frozen=True)
class SuggestionAccuracyData:
    """suggestion_accuracy: shown/accepted counters."""

    total: int = 0
    accepted: int = 0

    @property
    def accuracy(self) -> float:
        return self.accepted / self.total if self.total > 0 else 0.0

    def record(self, accepted: bool) -> "SuggestionAccuracyData":
        return SuggestionAccuracyData(
            total=self.total + 1,
            accepted=self.accepted + (1 if accepted else 0),
        )

    def is_empty(self) -> bool:
        return self.total == 0

    def to_dict(self) -> dict:
        return {"total": self.total, "accepted": self.accepted, "accuracy": self.accuracy}

    @classmethod
    def from_dict(cls, d: dict) -> "SuggestionAccuracyData":
        return cls(total=int(d.get("total", 0)), accepted=int(d.get("accepted", 0)))


HabitData = Union[HourPreferenceData, CategoryPreferenceData, SuggestionAccuracyData]

HABIT_DATA_TYPES: dict[HabitType, type] = {
    HabitType.OPTIMAL_COMPLETION_TIME: HourPreferenceData,
    HabitType.CATEGORY_PREFERENCE: CategoryPreferenceData,
    HabitType.SUGGESTION_ACCURACY: SuggestionAccuracyData,
}


def empty_habit_data(habit_type: HabitType) -> HabitData:
    return HABIT_DATA_TYPES[HabitType(habit_type)]()


def habit_data_from_dict(habit_type: HabitType, d: dict) -> HabitData:
    return HABIT_DATA_TYPES[HabitType(habit_type)].from_dict(d or {})


@dataclass
class HabitRecord:
    """One aggregate per (user_id, habit_type)."""

    user_id: str
    habit_type: HabitType
    data: HabitData
    confidence_score: float = 0.0
    updated_at: datetime = field(default_factory=datetime.now)
    created_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=_new_id)

    def __post_init__(self):
        self.habit_type = HabitType(self.habit_type)
        expected = HABIT_DATA_TYPES[self.habit_type]
        if not isinstance(self.data, expected):
            raise TypeError(
                f"{self.habit_type.value} expects {expected.__name__}, "
                f"got {type(self.data).__name__}"
            )

    def with_update(self, data: HabitData, confidence_score: float, now: datetime) -> "HabitRecord":
        return replace(self, data=data, confidence_score=confidence_score, updated_at=now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "habit_type": self.habit_type.value,
            "habit_data": self.data.to_dict(),
            "confidence_score": self.confidence_score,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

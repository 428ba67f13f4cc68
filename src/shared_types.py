"""Shared enums and types for StudyFlow."""

from enum import StrEnum


class InteractionType(StrEnum):
    CREATED = "created"
    COMPLETED = "completed"
    DELAYED = "delayed"
    SKIPPED = "skipped"
    SUGGESTION_ACCEPTED = "suggestion_accepted"
    SUGGESTION_REJECTED = "suggestion_rejected"


class InteractionSource(StrEnum):
    AI_SUGGESTION = "ai_suggestion"
    MANUAL_CREATION = "manual_creation"


class HabitType(StrEnum):
    OPTIMAL_COMPLETION_TIME = "optimal_completion_time"
    CATEGORY_PREFERENCE = "category_preference"
    SUGGESTION_ACCURACY = "suggestion_accuracy"


class Priority(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

"""Pydantic request/response schemas for the web API."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

# --- Tasks ---


class TaskIn(BaseModel):
    """Task as the frontend sends it."""

    id: str = Field(..., min_length=1)
    title: str = ""
    category: str = Field(..., min_length=1)
    deadline: str
    priority: Literal["Low", "Medium", "High"] = "Medium"
    description: Optional[str] = None
    completed: bool = False

    @field_validator("deadline")
    @classmethod
    def validate_deadline(cls, v: str) -> str:
        from habits.models import parse_timestamp

        parse_timestamp(v)
        return v

    def to_task(self):
        from habits.models import Task, parse_timestamp

        return Task(
            id=self.id,
            title=self.title,
            category=self.category,
            deadline=parse_timestamp(self.deadline),
            priority=self.priority,
            description=self.description,
            completed=self.completed,
        )


# --- Habit interactions ---


class CompletionIn(BaseModel):
    task: TaskIn
    completed_at: Optional[datetime] = None


class DelayIn(BaseModel):
    task: TaskIn
    reason: Optional[str] = Field(None, max_length=500)
    delay_days: Optional[int] = Field(None, ge=0, le=365)


class SkipIn(BaseModel):
    task: TaskIn
    reason: Optional[str] = Field(None, max_length=500)


class CreationIn(BaseModel):
    task: TaskIn
    source: Optional[Literal["ai_suggestion", "manual_creation"]] = None


class SuggestionFeedback(BaseModel):
    accepted: bool
    suggestion: Optional[dict] = None


class TrackingAccepted(BaseModel):
    status: str = "accepted"


# --- Habit reads ---


class HabitOut(BaseModel):
    id: str
    habit_type: str
    habit_data: dict
    confidence_score: float
    created_at: str
    updated_at: str


class HourCount(BaseModel):
    hour: int
    count: int
    label: str


class CategoryCount(BaseModel):
    category: str
    count: int


class SuggestionAccuracy(BaseModel):
    total: int = 0
    accepted: int = 0
    accuracy: float = 0.0


class ProfileStrength(BaseModel):
    habit_type: str
    label: str
    confidence: float
    percent: int


class RecentActivity(BaseModel):
    id: str
    task_id: Optional[str] = None
    interaction_type: str
    created_at: str


class LearningInsights(BaseModel):
    total_interactions: int
    interaction_counts: dict[str, int]
    completion_rate: float
    on_time_rate: float
    suggestion_accuracy: float
    recent_activity: list[RecentActivity] = []


class ContextResponse(BaseModel):
    context: str


# --- Preferences ---


class PreferencesUpdate(BaseModel):
    preferences: dict[str, str] = Field(..., min_length=1)


# --- Insights ---


class TaskListIn(BaseModel):
    tasks: list[TaskIn] = Field(default_factory=list, max_length=500)


class DeadlineIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1)
    priority: Literal["Low", "Medium", "High"] = "Medium"
    description: Optional[str] = Field(None, max_length=5000)
    tasks: list[TaskIn] = Field(default_factory=list, max_length=500)


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatIn(BaseModel):
    message: str = Field(..., min_length=1, max_length=5000)
    history: list[ChatMessage] = Field(default_factory=list)


class ChatResponse(BaseModel):
    response: str
    provider: str

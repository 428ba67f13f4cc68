"""Habit aggregator: turns task interactions into habit reinforcements."""

from collections.abc import Callable
from datetime import datetime, timedelta

import structlog

from observability import metrics
from shared_types import HabitType, InteractionSource, InteractionType

from .models import (
    HabitData,
    HabitRecord,
    InteractionEvent,
    Task,
    empty_habit_data,
    is_on_time,
    to_local,
)
from .scoring import increment_for, reinforce_confidence
from .store import HabitStore, HabitStoreError

logger = structlog.get_logger()


class HabitAggregator:
    """Records interaction events and reinforces the derived habit records.

    Tracking is best-effort: every ``record_*`` method returns True when the
    event (and any reinforcement) was written and False otherwise. Nothing
    here raises into the caller for a missing user or a store failure.

    Delays and skips are logged only; they do not touch confidence.
    """

    def __init__(self, store: HabitStore, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self._clock = clock

    def record_completion(
        self, user_id: str | None, task: Task, completed_at: datetime | None = None
    ) -> bool:
        """Log a completion and reinforce completion-hour + category habits."""
        if not user_id:
            return self._skip_unauthenticated(InteractionType.COMPLETED)

        completed_at = completed_at or self._clock()
        hour = to_local(completed_at).hour
        event = InteractionEvent(
            user_id=user_id,
            type=InteractionType.COMPLETED,
            task_id=task.id,
            payload={
                "category": task.category,
                "priority": str(task.priority),
                "completed_on_time": is_on_time(completed_at, task.deadline),
                "completion_hour": hour,
                "completed_at": completed_at.isoformat(),
            },
            occurred_at=self._clock(),
        )
        if not self._append(event):
            return False

        hour_ok = self._reinforce(
            user_id,
            HabitType.OPTIMAL_COMPLETION_TIME,
            lambda data: data.reinforce(hour),
        )
        category_ok = self._reinforce(
            user_id,
            HabitType.CATEGORY_PREFERENCE,
            lambda data: data.reinforce(task.category),
        )
        return hour_ok and category_ok

    def record_delay(
        self,
        user_id: str | None,
        task: Task,
        reason: str | None = None,
        delay_days: int | None = None,
    ) -> bool:
        """Log a delay. No reinforcement."""
        if not user_id:
            return self._skip_unauthenticated(InteractionType.DELAYED)

        payload = {
            "category": task.category,
            "reason": reason or "",
            "original_deadline": task.deadline.isoformat(),
        }
        if delay_days is not None:
            payload["delay_days"] = delay_days
            payload["new_deadline"] = (task.deadline + timedelta(days=delay_days)).isoformat()

        return self._append(
            InteractionEvent(
                user_id=user_id,
                type=InteractionType.DELAYED,
                task_id=task.id,
                payload=payload,
                occurred_at=self._clock(),
            )
        )

    def record_skip(self, user_id: str | None, task: Task, reason: str | None = None) -> bool:
        """Log a skip. No reinforcement."""
        if not user_id:
            return self._skip_unauthenticated(InteractionType.SKIPPED)

        return self._append(
            InteractionEvent(
                user_id=user_id,
                type=InteractionType.SKIPPED,
                task_id=task.id,
                payload={
                    "category": task.category,
                    "reason": reason or "",
                    "original_deadline": task.deadline.isoformat(),
                },
                occurred_at=self._clock(),
            )
        )

    def record_suggestion_feedback(
        self,
        user_id: str | None,
        suggestion_id: str,
        accepted: bool,
        suggestion_data: dict | None = None,
    ) -> bool:
        """Log accept/reject of an AI suggestion and update suggestion accuracy."""
        kind = (
            InteractionType.SUGGESTION_ACCEPTED if accepted else InteractionType.SUGGESTION_REJECTED
        )
        if not user_id:
            return self._skip_unauthenticated(kind)

        event = InteractionEvent(
            user_id=user_id,
            type=kind,
            source=InteractionSource.AI_SUGGESTION,
            payload={
                "suggestion_id": suggestion_id,
                "accepted": accepted,
                "suggestion": suggestion_data or {},
            },
            occurred_at=self._clock(),
        )
        if not self._append(event):
            return False

        return self._reinforce(
            user_id,
            HabitType.SUGGESTION_ACCURACY,
            lambda data: data.record(accepted),
        )

    def record_creation(
        self,
        user_id: str | None,
        task: Task,
        source: InteractionSource | None = None,
    ) -> bool:
        """Log a task creation. No reinforcement."""
        if not user_id:
            return self._skip_unauthenticated(InteractionType.CREATED)

        return self._append(
            InteractionEvent(
                user_id=user_id,
                type=InteractionType.CREATED,
                task_id=task.id,
                source=InteractionSource(source) if source else None,
                payload={
                    "category": task.category,
                    "priority": str(task.priority),
                    "deadline": task.deadline.isoformat(),
                },
                occurred_at=self._clock(),
            )
        )

    def record_interaction(
        self,
        user_id: str | None,
        interaction_type: InteractionType,
        task_id: str | None = None,
        source: InteractionSource | None = None,
        payload: dict | None = None,
    ) -> bool:
        """Append an arbitrary interaction without reinforcing anything."""
        interaction_type = InteractionType(interaction_type)
        if not user_id:
            return self._skip_unauthenticated(interaction_type)

        return self._append(
            InteractionEvent(
                user_id=user_id,
                type=interaction_type,
                task_id=task_id,
                source=InteractionSource(source) if source else None,
                payload=dict(payload or {}),
                occurred_at=self._clock(),
            )
        )

    # --- internals ---

    def _append(self, event: InteractionEvent) -> bool:
        try:
            self.store.append_interaction(event)
        except HabitStoreError as e:
            metrics.counter("habit.store_failures")
            logger.error(
                "habit.store_write_failed",
                operation="append_interaction",
                user_id=event.user_id,
                interaction_type=event.type.value,
                error=str(e),
            )
            return False
        metrics.counter("habit.interactions_recorded")
        logger.debug(
            "habit.interaction_recorded",
            user_id=event.user_id,
            interaction_type=event.type.value,
            task_id=event.task_id,
        )
        return True

    def _reinforce(
        self,
        user_id: str,
        habit_type: HabitType,
        mutate: Callable[[HabitData], HabitData],
    ) -> bool:
        increment = increment_for(habit_type)
        now = self._clock()

        def apply(existing: HabitRecord | None) -> HabitRecord:
            if existing is None:
                return HabitRecord(
                    user_id=user_id,
                    habit_type=habit_type,
                    data=mutate(empty_habit_data(habit_type)),
                    confidence_score=reinforce_confidence(0.0, increment),
                    created_at=now,
                    updated_at=now,
                )
            return existing.with_update(
                data=mutate(existing.data),
                confidence_score=reinforce_confidence(existing.confidence_score, increment),
                now=now,
            )

        try:
            record = self.store.upsert_habit(user_id, habit_type, apply)
        except HabitStoreError as e:
            metrics.counter("habit.store_failures")
            logger.error(
                "habit.store_write_failed",
                operation="upsert_habit",
                user_id=user_id,
                habit_type=habit_type.value,
                error=str(e),
            )
            return False

        metrics.counter("habit.reinforcements")
        logger.debug(
            "habit.reinforced",
            user_id=user_id,
            habit_type=habit_type.value,
            confidence=record.confidence_score,
        )
        return True

    @staticmethod
    def _skip_unauthenticated(interaction_type: InteractionType) -> bool:
        logger.debug("habit.no_user", interaction_type=interaction_type.value)
        return False

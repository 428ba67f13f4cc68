"""Habit routes: interaction tracking (fire-and-forget) and learned-habit reads."""

from collections.abc import Callable

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, Query

from web.auth import get_current_user
from web.deps import get_aggregator, get_query_service
from web.models import (
    CategoryCount,
    CompletionIn,
    ContextResponse,
    CreationIn,
    DelayIn,
    HabitOut,
    HourCount,
    LearningInsights,
    ProfileStrength,
    SkipIn,
    SuggestionAccuracy,
    SuggestionFeedback,
    TrackingAccepted,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/api/habits", tags=["habits"])


def _track(
    background: BackgroundTasks, record: Callable[..., bool], *args, **kwargs
) -> TrackingAccepted:
    """Schedule an aggregator record_* call after the response; its result is only logged."""
    background.add_task(record, *args, **kwargs)
    return TrackingAccepted()


@router.post("/interactions/completed", status_code=202, response_model=TrackingAccepted)
async def track_completion(
    body: CompletionIn,
    background: BackgroundTasks,
    user: dict = Depends(get_current_user),
):
    return _track(
        background,
        get_aggregator().record_completion,
        user["id"],
        body.task.to_task(),
        body.completed_at,
    )


@router.post("/interactions/delayed", status_code=202, response_model=TrackingAccepted)
async def track_delay(
    body: DelayIn,
    background: BackgroundTasks,
    user: dict = Depends(get_current_user),
):
    return _track(
        background,
        get_aggregator().record_delay,
        user["id"],
        body.task.to_task(),
        reason=body.reason,
        delay_days=body.delay_days,
    )


@router.post("/interactions/skipped", status_code=202, response_model=TrackingAccepted)
async def track_skip(
    body: SkipIn,
    background: BackgroundTasks,
    user: dict = Depends(get_current_user),
):
    return _track(
        background,
        get_aggregator().record_skip,
        user["id"],
        body.task.to_task(),
        reason=body.reason,
    )


@router.post("/interactions/created", status_code=202, response_model=TrackingAccepted)
async def track_creation(
    body: CreationIn,
    background: BackgroundTasks,
    user: dict = Depends(get_current_user),
):
    return _track(
        background,
        get_aggregator().record_creation,
        user["id"],
        body.task.to_task(),
        source=body.source,
    )


@router.post(
    "/suggestions/{suggestion_id}/feedback",
    status_code=202,
    response_model=TrackingAccepted,
)
async def suggestion_feedback(
    suggestion_id: str,
    body: SuggestionFeedback,
    background: BackgroundTasks,
    user: dict = Depends(get_current_user),
):
    return _track(
        background,
        get_aggregator().record_suggestion_feedback,
        user["id"],
        suggestion_id,
        body.accepted,
        suggestion_data=body.suggestion,
    )


@router.get("", response_model=list[HabitOut])
async def list_habits(user: dict = Depends(get_current_user)):
    return [h.to_dict() for h in get_query_service().get_habits(user["id"])]


@router.get("/top-hours", response_model=list[HourCount])
async def top_hours(
    n: int = Query(3, ge=1, le=24),
    user: dict = Depends(get_current_user),
):
    from habits.queries import format_hour

    return [
        {**row, "label": format_hour(row["hour"])}
        for row in get_query_service().get_top_hours(user["id"], n)
    ]


@router.get("/top-categories", response_model=list[CategoryCount])
async def top_categories(
    n: int = Query(3, ge=1, le=50),
    user: dict = Depends(get_current_user),
):
    return get_query_service().get_top_categories(user["id"], n)


@router.get("/accuracy", response_model=SuggestionAccuracy)
async def suggestion_accuracy(user: dict = Depends(get_current_user)):
    return get_query_service().get_suggestion_accuracy(user["id"])


@router.get("/strength", response_model=list[ProfileStrength])
async def profile_strength(user: dict = Depends(get_current_user)):
    return get_query_service().get_profile_strength(user["id"])


@router.get("/insights", response_model=LearningInsights)
async def learning_insights(user: dict = Depends(get_current_user)):
    return get_query_service().get_learning_insights(user["id"])


@router.get("/context", response_model=ContextResponse)
async def personalization_context(user: dict = Depends(get_current_user)):
    from habits import PersonalizationContextBuilder

    builder = PersonalizationContextBuilder(get_query_service())
    return {"context": builder.build_for_user(user["id"])}

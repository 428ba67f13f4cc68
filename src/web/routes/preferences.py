"""Learning preference routes (per-user key/value)."""

import structlog
from fastapi import APIRouter, Depends, HTTPException

from web.auth import get_current_user
from web.deps import get_habit_store, get_query_service
from web.models import PreferencesUpdate

logger = structlog.get_logger()

router = APIRouter(prefix="/api/preferences", tags=["preferences"])


@router.get("", response_model=dict[str, str])
async def get_preferences(user: dict = Depends(get_current_user)):
    return get_query_service().get_preferences(user["id"])


@router.put("", response_model=dict[str, str])
async def update_preferences(
    body: PreferencesUpdate,
    user: dict = Depends(get_current_user),
):
    """Upsert each key; returns the full preference map."""
    from habits import HabitStoreError

    store = get_habit_store()
    try:
        for key, value in body.preferences.items():
            store.set_preference(user["id"], key, value)
    except HabitStoreError as e:
        logger.error("preferences.update_failed", user_id=user["id"], error=str(e))
        raise HTTPException(status_code=500, detail="Failed to save preferences")

    logger.info("preferences.updated", user_id=user["id"], keys=sorted(body.preferences))
    return get_query_service().get_preferences(user["id"])

"""AI insight routes: suggestions, deadline prediction, schedule, chat."""

import asyncio

import structlog
from fastapi import APIRouter, Depends, HTTPException

from web.auth import get_current_user
from web.deps import get_insights_engine
from web.models import ChatIn, ChatResponse, DeadlineIn, TaskListIn

logger = structlog.get_logger()

router = APIRouter(prefix="/api/insights", tags=["insights"])


async def _run(func, *args):
    """Run a blocking engine call off the event loop; LLM failures become 502."""
    from insights import InsightsError

    try:
        return await asyncio.to_thread(func, *args)
    except InsightsError as e:
        logger.error("insights.request_failed", error=str(e))
        raise HTTPException(status_code=502, detail=f"AI service error: {e}")


@router.post("/suggestions")
async def suggest_tasks(body: TaskListIn, user: dict = Depends(get_current_user)):
    engine = get_insights_engine()
    tasks = [t.to_task() for t in body.tasks]
    suggestions = await _run(engine.suggest_tasks, user["id"], tasks)
    return {"suggestions": suggestions}


@router.post("/deadline")
async def predict_deadline(body: DeadlineIn, user: dict = Depends(get_current_user)):
    engine = get_insights_engine()
    task = body.model_dump(exclude={"tasks"})
    tasks = [t.to_task() for t in body.tasks]
    return await _run(engine.predict_deadline, user["id"], task, tasks)


@router.post("/schedule")
async def optimize_schedule(body: TaskListIn, user: dict = Depends(get_current_user)):
    engine = get_insights_engine()
    tasks = [t.to_task() for t in body.tasks]
    return await _run(engine.optimize_schedule, user["id"], tasks)


@router.post("/chat", response_model=ChatResponse)
async def chat(body: ChatIn, user: dict = Depends(get_current_user)):
    engine = get_insights_engine()
    history = [m.model_dump() for m in body.history]
    try:
        return await _run(engine.chat, user["id"], body.message, history)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

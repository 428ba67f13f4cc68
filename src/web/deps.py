"""Dependency injection for FastAPI routes."""

from functools import lru_cache

import structlog
from fastapi import HTTPException

from cli.config import get_db_path, load_config_model

logger = structlog.get_logger()


@lru_cache
def get_config():
    """Load shared config (./config.yaml, ~/.studyflow/config.yaml...)."""
    return load_config_model()


@lru_cache
def get_habit_store():
    """Process-wide SQLite habit store at the configured db path."""
    from habits import SQLiteHabitStore

    return SQLiteHabitStore(get_db_path(get_config()))


def get_aggregator():
    from habits import HabitAggregator

    return HabitAggregator(get_habit_store())


def get_query_service():
    from habits import HabitQueryService

    return HabitQueryService(
        get_habit_store(), insights_window=get_config().habits.insights_window
    )


def get_insights_engine():
    """InsightsEngine from config; 503 when no provider can be configured."""
    from insights import APIKeyMissingError, InsightsEngine

    config = get_config()
    try:
        return InsightsEngine(
            get_query_service(),
            api_key=config.llm.api_key,
            model=config.llm.model,
            provider=config.llm.provider,
            max_tokens=config.llm.max_tokens,
            temperature=config.llm.temperature,
        )
    except APIKeyMissingError as e:
        logger.warning("insights.unavailable", error=str(e))
        raise HTTPException(status_code=503, detail="No AI provider configured")

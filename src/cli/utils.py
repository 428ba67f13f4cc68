"""Shared CLI utilities."""

import sys

import structlog
from rich.console import Console

console = Console()
logger = structlog.get_logger()


def get_components(with_insights: bool = False) -> dict:
    """Initialize store, aggregator, queries (and optionally insights) from config.

    Args:
        with_insights: If True, also build the LLM-backed InsightsEngine
    """
    from cli.config import get_db_path, load_config_model
    from habits import (
        HabitAggregator,
        HabitQueryService,
        PersonalizationContextBuilder,
        SQLiteHabitStore,
    )
    from insights import APIKeyMissingError, InsightsEngine

    config = load_config_model()
    store = SQLiteHabitStore(get_db_path(config))
    queries = HabitQueryService(store, insights_window=config.habits.insights_window)

    engine = None
    if with_insights:
        try:
            engine = InsightsEngine(
                queries,
                api_key=config.llm.api_key,
                model=config.llm.model,
                provider=config.llm.provider,
                max_tokens=config.llm.max_tokens,
                temperature=config.llm.temperature,
            )
        except APIKeyMissingError as e:
            console.print(f"[red]Config error:[/] {e}")
            sys.exit(1)

    return {
        "config": config,
        "store": store,
        "aggregator": HabitAggregator(store),
        "queries": queries,
        "context": PersonalizationContextBuilder(queries),
        "insights": engine,
    }

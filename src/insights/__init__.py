"""AI study insights: suggestions, deadlines, schedules, chat."""

from .engine import APIKeyMissingError, InsightsEngine, InsightsError

__all__ = ["InsightsEngine", "InsightsError", "APIKeyMissingError"]

"""CLI command modules."""

from .habits import habits
from .insights import insights
from .prefs import prefs

__all__ = ["habits", "insights", "prefs"]

"""In-process metrics for habit tracking and AI calls, plus summary logging.

Counter names are dotted like log events: ``habit.interactions_recorded``,
``habit.reinforcements``, ``habit.store_failures``, ``insights.llm_calls``,
``insights.llm_failures``. Timers: ``insights.llm_latency``.
"""

import threading
import time
from contextlib import contextmanager
from typing import Any

import structlog

logger = structlog.get_logger().bind(source="observability")


class Metrics:
    """Thread-safe counters and timers."""

    def __init__(self):
        self._lock = threading.Lock()
        self._counters: dict[str, int] = {}
        self._timers: dict[str, list[float]] = {}

    def counter(self, name: str, value: int = 1) -> int:
        """Increment ``name`` and return the new total."""
        with self._lock:
            total = self._counters.get(name, 0) + value
            self._counters[name] = total
        return total

    def get(self, name: str) -> int:
        with self._lock:
            return self._counters.get(name, 0)

    def counters(self, prefix: str | None = None) -> dict[str, int]:
        """Counter snapshot, optionally only names under ``prefix`` (e.g. "habit")."""
        with self._lock:
            items = dict(self._counters)
        if prefix is None:
            return items
        head = prefix.rstrip(".") + "."
        return {k: v for k, v in items.items() if k.startswith(head)}

    @contextmanager
    def timer(self, name: str):
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            with self._lock:
                self._timers.setdefault(name, []).append(elapsed)

    def summary(self) -> dict[str, Any]:
        with self._lock:
            timers = {k: list(v) for k, v in self._timers.items()}
        return {
            "counters": self.counters(),
            "timers": {
                name: {
                    "count": len(d),
                    "avg_ms": round(sum(d) / len(d) * 1000, 1),
                    "max_ms": round(max(d) * 1000, 1),
                }
                for name, d in timers.items()
                if d
            },
        }

    def reset(self):
        with self._lock:
            self._counters.clear()
            self._timers.clear()


# Module-level singleton
metrics = Metrics()


def log_run_summary(event: str = "run_summary"):
    """Log the metrics summary; skipped when nothing was recorded."""
    summary = metrics.summary()
    if not summary["counters"] and not summary["timers"]:
        return
    logger.info(event, **summary)

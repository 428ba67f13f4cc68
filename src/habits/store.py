"""Habit storage: store interface plus the SQLite direct-table implementation."""

import json
import sqlite3
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

import structlog

from db import immediate_transaction, wal_connect
from shared_types import HabitType, InteractionSource, InteractionType

from .models import HabitRecord, InteractionEvent, habit_data_from_dict

logger = structlog.get_logger()

HabitUpdate = Callable[[HabitRecord | None], HabitRecord]


class HabitStoreError(Exception):
    """Persistence failure (read or write) in a habit store."""


class HabitStore(ABC):
    """Storage capability set consumed by the aggregator and query service.

    Every method is scoped to a single user. ``upsert_habit`` must run its
    read-modify-write atomically per (user_id, habit_type).
    """

    @abstractmethod
    def append_interaction(self, event: InteractionEvent) -> InteractionEvent:
        ...

    @abstractmethod
    def upsert_habit(self, user_id: str, habit_type: HabitType, apply: HabitUpdate) -> HabitRecord:
        """Atomically load the record (or None), pass it to ``apply``, store the result."""
        ...

    @abstractmethod
    def query_habits(self, user_id: str) -> list[HabitRecord]:
        ...

    @abstractmethod
    def get_habit(self, user_id: str, habit_type: HabitType) -> HabitRecord | None:
        ...

    @abstractmethod
    def recent_interactions(
        self,
        user_id: str,
        limit: int = 20,
        types: Iterable[InteractionType] | None = None,
    ) -> list[InteractionEvent]:
        """Newest first."""
        ...

    @abstractmethod
    def count_interactions(self, user_id: str) -> dict[str, int]:
        """Interaction counts keyed by type value."""
        ...

    @abstractmethod
    def get_preferences(self, user_id: str) -> dict[str, str]:
        ...

    @abstractmethod
    def set_preference(self, user_id: str, key: str, value: str) -> None:
        ...


class SQLiteHabitStore(HabitStore):
    """Direct table access on SQLite, row-scoped by user_id."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path).expanduser()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        types = ",".join(f"'{t.value}'" for t in InteractionType)
        with self._connect() as conn:
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS task_interactions (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    task_id TEXT,
                    interaction_type TEXT NOT NULL CHECK(interaction_type IN ({types})),
                    suggestion_source TEXT,
                    interaction_data TEXT NOT NULL DEFAULT '{{}}',
                    occurred_at TIMESTAMP NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_interactions_user_time
                ON task_interactions(user_id, occurred_at)
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS user_habits (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    habit_type TEXT NOT NULL,
                    habit_data TEXT NOT NULL,
                    confidence_score REAL NOT NULL DEFAULT 0,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    UNIQUE(user_id, habit_type)
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS user_learning_preferences (
                    user_id TEXT NOT NULL,
                    preference_key TEXT NOT NULL,
                    preference_value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (user_id, preference_key)
                )
            """)

    @contextmanager
    def _connect(self):
        """Connection that commits on success and maps sqlite errors to HabitStoreError."""
        try:
            conn = wal_connect(self.db_path, row_factory=True)
        except sqlite3.Error as e:
            raise HabitStoreError(f"Cannot open habit store: {e}") from e
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise HabitStoreError(str(e)) from e
        finally:
            conn.close()

    # --- Interactions ---

    def append_interaction(self, event: InteractionEvent) -> InteractionEvent:
        with self._connect() as conn:
            conn.execute(
                """INSERT INTO task_interactions
                   (id, user_id, task_id, interaction_type, suggestion_source,
                    interaction_data, occurred_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    event.id,
                    event.user_id,
                    event.task_id,
                    event.type.value,
                    event.source.value if event.source else None,
                    json.dumps(event.payload, default=str),
                    event.occurred_at.isoformat(),
                ),
            )
        return event

    def recent_interactions(
        self,
        user_id: str,
        limit: int = 20,
        types: Iterable[InteractionType] | None = None,
    ) -> list[InteractionEvent]:
        sql = "SELECT * FROM task_interactions WHERE user_id = ?"
        params: list = [user_id]
        if types is not None:
            type_values = [InteractionType(t).value for t in types]
            if not type_values:
                return []
            placeholders = ",".join("?" for _ in type_values)
            sql += f" AND interaction_type IN ({placeholders})"
            params.extend(type_values)
        sql += " ORDER BY occurred_at DESC, rowid DESC LIMIT ?"
        params.append(limit)

        with self._connect() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [self._row_to_event(r) for r in rows]

    def count_interactions(self, user_id: str) -> dict[str, int]:
        with self._connect() as conn:
            rows = conn.execute(
                """SELECT interaction_type, COUNT(*) AS cnt FROM task_interactions
                   WHERE user_id = ? GROUP BY interaction_type""",
                (user_id,),
            ).fetchall()
        return {r["interaction_type"]: r["cnt"] for r in rows}

    # --- Habits ---

    def upsert_habit(self, user_id: str, habit_type: HabitType, apply: HabitUpdate) -> HabitRecord:
        habit_type = HabitType(habit_type)
        try:
            with immediate_transaction(self.db_path) as conn:
                row = conn.execute(
                    "SELECT * FROM user_habits WHERE user_id = ? AND habit_type = ?",
                    (user_id, habit_type.value),
                ).fetchone()
                existing = self._row_to_habit(row) if row else None
                updated = apply(existing)
                conn.execute(
                    """INSERT INTO user_habits
                       (id, user_id, habit_type, habit_data, confidence_score, created_at, updated_at)
                       VALUES (?, ?, ?, ?, ?, ?, ?)
                       ON CONFLICT(user_id, habit_type) DO UPDATE SET
                           habit_data = excluded.habit_data,
                           confidence_score = excluded.confidence_score,
                           updated_at = excluded.updated_at""",
                    (
                        updated.id,
                        user_id,
                        habit_type.value,
                        json.dumps(updated.data.to_dict()),
                        updated.confidence_score,
                        updated.created_at.isoformat(),
                        updated.updated_at.isoformat(),
                    ),
                )
        except sqlite3.Error as e:
            raise HabitStoreError(str(e)) from e
        return updated

    def query_habits(self, user_id: str) -> list[HabitRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                """SELECT * FROM user_habits WHERE user_id = ?
                   ORDER BY confidence_score DESC, habit_type ASC""",
                (user_id,),
            ).fetchall()
        return [self._row_to_habit(r) for r in rows]

    def get_habit(self, user_id: str, habit_type: HabitType) -> HabitRecord | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM user_habits WHERE user_id = ? AND habit_type = ?",
                (user_id, HabitType(habit_type).value),
            ).fetchone()
        return self._row_to_habit(row) if row else None

    # --- Preferences ---

    def get_preferences(self, user_id: str) -> dict[str, str]:
        with self._connect() as conn:
            rows = conn.execute(
                """SELECT preference_key, preference_value FROM user_learning_preferences
                   WHERE user_id = ? ORDER BY preference_key""",
                (user_id,),
            ).fetchall()
        return {r["preference_key"]: r["preference_value"] for r in rows}

    def set_preference(self, user_id: str, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                """INSERT INTO user_learning_preferences
                   (user_id, preference_key, preference_value, updated_at)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(user_id, preference_key) DO UPDATE SET
                       preference_value = excluded.preference_value,
                       updated_at = excluded.updated_at""",
                (user_id, key, value, datetime.now().isoformat()),
            )
    # --- Row mapping ---
    # Corrupt rows (bad JSON, unknown enum values, malformed habit data) surface
    # as HabitStoreError so readers degrade the same way as on sqlite errors.

    @staticmethod
    def _row_to_event(row: sqlite3.Row) -> InteractionEvent:
        d = dict(row)
        try:
            source = d.get("suggestion_source")
            return InteractionEvent(
                id=d["id"],
                user_id=d["user_id"],
                task_id=d.get("task_id"),
                type=InteractionType(d["interaction_type"]),
                source=InteractionSource(source) if source else None,
                payload=json.loads(d["interaction_data"]) if d.get("interaction_data") else {},
                occurred_at=datetime.fromisoformat(d["occurred_at"]),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise HabitStoreError(f"Corrupt interaction row {d.get('id')}: {e}") from e

    @staticmethod
    def _row_to_habit(row: sqlite3.Row) -> HabitRecord:
        d = dict(row)
        try:
            habit_type = HabitType(d["habit_type"])
            created = d.get("created_at", "")
            updated = d.get("updated_at", "")
            return HabitRecord(
                id=d["id"],
                user_id=d["user_id"],
                habit_type=habit_type,
                data=habit_data_from_dict(habit_type, json.loads(d["habit_data"])),
                confidence_score=d["confidence_score"],
                created_at=datetime.fromisoformat(created) if created else datetime.now(),
                updated_at=datetime.fromisoformat(updated) if updated else datetime.now(),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise HabitStoreError(f"Corrupt habit row {d.get('id')}: {e}") from e

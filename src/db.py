"""Shared SQLite helpers: WAL connections and write-locked transactions."""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

BUSY_TIMEOUT = 10.0


def wal_connect(
    db_path: str | Path, row_factory: bool = False, autocommit: bool = False
) -> sqlite3.Connection:
    """Open SQLite connection with WAL journal mode.

    Args:
        db_path: Path to database file.
        row_factory: If True, set conn.row_factory = sqlite3.Row.
        autocommit: If True, open with isolation_level=None so the caller
            controls transactions explicitly.
    """
    conn = sqlite3.connect(
        str(db_path),
        timeout=BUSY_TIMEOUT,
        isolation_level=None if autocommit else "DEFERRED",
    )
    conn.execute("PRAGMA journal_mode=WAL")
    if row_factory:
        conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def immediate_transaction(db_path: str | Path) -> Iterator[sqlite3.Connection]:
    """Read-modify-write under the database write lock.

    ``BEGIN IMMEDIATE`` takes the write lock before the first read, so two
    writers on the same row serialize instead of losing an update. Commits
    on normal exit, rolls back on any exception, always closes.
    """
    conn = wal_connect(db_path, row_factory=True, autocommit=True)
    try:
        conn.execute("BEGIN IMMEDIATE")
        yield conn
        conn.execute("COMMIT")
    except BaseException:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise
    finally:
        conn.close()

"""
Shared SQLite plumbing for the catalog and chat repositories.

Each repository owns one writer connection (IMMEDIATE transactions, serialized
by a lock) and one reader connection (DEFERRED, guarded by its own lock). Both
run in WAL mode so reads proceed while a write is in flight.
"""

import logging
import sqlite3
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Retry configuration for database lock handling
MAX_RETRIES = 5
INITIAL_BACKOFF_MS = 100
MAX_BACKOFF_MS = 5000


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored ISO 8601 timestamp, returning None for empty or bad input."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        logger.warning(f"Invalid datetime value: {value}")
        return None


class SQLiteRepository:
    """Base class holding the connection pair and the retry loop."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._write_lock = threading.Lock()
        self._read_lock = threading.Lock()

        db_file = Path(db_path)
        db_file.parent.mkdir(parents=True, exist_ok=True)
        if not db_file.exists():
            db_file.touch(mode=0o600)
            logger.info("Created database file with mode 600: %s", db_path)

        self._writer_conn = sqlite3.connect(
            db_path,
            check_same_thread=False,
            isolation_level="IMMEDIATE",
            timeout=10.0,
        )
        self._reader_conn = sqlite3.connect(
            db_path,
            check_same_thread=False,
            isolation_level="DEFERRED",
            timeout=10.0,
        )
        for conn in (self._writer_conn, self._reader_conn):
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA foreign_keys=ON")
            conn.execute("PRAGMA busy_timeout=10000")
            conn.execute("PRAGMA synchronous=NORMAL")

        with self._write_lock, self._writer_conn:
            self._initialize_schema(self._writer_conn)

        logger.info(f"{self.__class__.__name__} initialized: {db_path}")

    def _initialize_schema(self, conn: sqlite3.Connection) -> None:
        raise NotImplementedError

    def _execute_with_retry(self, operation: Callable[[], T]) -> T:
        """Run ``operation``, backing off exponentially while the database is locked.

        Raises:
            sqlite3.Error: If all retries are exhausted or the error is not retryable
        """
        last_error: Optional[sqlite3.OperationalError] = None
        backoff_ms = INITIAL_BACKOFF_MS

        for attempt in range(MAX_RETRIES):
            try:
                return operation()
            except sqlite3.OperationalError as e:
                error_msg = str(e).lower()
                if "locked" not in error_msg and "busy" not in error_msg:
                    raise
                last_error = e
                if attempt < MAX_RETRIES - 1:
                    sleep_ms = min(backoff_ms, MAX_BACKOFF_MS)
                    logger.warning(
                        f"Database locked, retry {attempt + 1}/{MAX_RETRIES} "
                        f"after {sleep_ms}ms: {e}"
                    )
                    time.sleep(sleep_ms / 1000.0)
                    backoff_ms *= 2

        logger.error("All %s retries exhausted for database operation", MAX_RETRIES)
        assert last_error is not None
        raise last_error

    def _write(self, operation: Callable[[sqlite3.Connection], T]) -> T:
        """Run ``operation`` inside one writer transaction, with lock retries."""

        def _transaction() -> T:
            with self._write_lock:
                with self._writer_conn:
                    return operation(self._writer_conn)

        return self._execute_with_retry(_transaction)

    def _read(self, operation: Callable[[sqlite3.Connection], T]) -> T:
        with self._read_lock:
            return operation(self._reader_conn)

    def close(self) -> None:
        """Close database connections."""
        if hasattr(self, "_writer_conn"):
            self._writer_conn.close()
        if hasattr(self, "_reader_conn"):
            self._reader_conn.close()
            logger.info("SQLite connection closed: %s", self.db_path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

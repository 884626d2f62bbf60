"""SQLite storage adapter.

Implements the core HistoryStorePort using a simple SQLite database.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import List

from core.errors import PersistenceError
from core.history import DEFAULT_PREVIEW_CHARS, to_history_entry
from core.models import ClassificationRecord, HistoryEntry, Verdict

LOGGER = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _row_to_record(row: sqlite3.Row) -> ClassificationRecord:
    return ClassificationRecord(
        id=row["id"],
        text=row["text"],
        verdict=Verdict(row["result"]),
        probability=float(row["spam_probability"]),
        matched_indicators=tuple(json.loads(row["matched_keywords"])),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


class SQLiteHistoryStore:
    """Thin SQLite wrapper that satisfies the HistoryStorePort contract."""

    def __init__(self, db_path: str, preview_chars: int = DEFAULT_PREVIEW_CHARS, timeout: float = 5.0) -> None:
        self._db_path = db_path
        self._preview_chars = preview_chars
        self._timeout = timeout

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, timeout=self._timeout)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - spam_checks: append-only log of classification records
        """

        try:
            with self._connect() as conn:
                # WAL lets history reads proceed on a snapshot while a check is written.
                conn.execute("PRAGMA journal_mode=WAL")
                # spam_checks is an append-only audit log. Rows are never updated
                # or deleted.
                # Fields:
                # - seq: insertion order, breaks created_at ties
                # - id: opaque record id exposed to callers
                # - text: full submitted text, never truncated
                # - result: "spam" or "not_spam"
                # - spam_probability: 0..1
                # - matched_keywords: JSON array in lexicon order
                # - created_at: UTC ISO-8601 timestamp
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS spam_checks (
                        seq INTEGER PRIMARY KEY AUTOINCREMENT,
                        id TEXT NOT NULL UNIQUE,
                        text TEXT NOT NULL,
                        result TEXT NOT NULL,
                        spam_probability REAL NOT NULL,
                        matched_keywords TEXT NOT NULL,
                        created_at TIMESTAMP NOT NULL
                    )
                    """
                )
                conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_spam_checks_created ON spam_checks (created_at, seq)"
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"Cannot initialize history store at {self._db_path}: {exc}") from exc

    def append(self, record: ClassificationRecord) -> ClassificationRecord:
        """Persist a record, assigning id and created_at when unset."""

        stored = replace(
            record,
            id=record.id or uuid.uuid4().hex,
            created_at=record.created_at or _utc_now(),
        )
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO spam_checks (
                        id,
                        text,
                        result,
                        spam_probability,
                        matched_keywords,
                        created_at
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        stored.id,
                        stored.text,
                        stored.verdict.value,
                        stored.probability,
                        json.dumps(list(stored.matched_indicators)),
                        stored.created_at.astimezone(timezone.utc).isoformat(timespec="microseconds"),
                    ),
                )
        except sqlite3.Error as exc:
            LOGGER.error("Failed to persist spam check: %s", exc)
            raise PersistenceError(f"Cannot write to history store: {exc}") from exc
        return stored

    def recent(self, limit: int) -> List[HistoryEntry]:
        """Return up to ``limit`` newest records as display views."""

        if limit <= 0:
            return []
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    """
                    SELECT id, text, result, spam_probability, matched_keywords, created_at
                    FROM spam_checks
                    ORDER BY created_at DESC, seq DESC
                    LIMIT ?
                    """,
                    (limit,),
                ).fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Cannot read history store: {exc}") from exc

        return [to_history_entry(_row_to_record(row), self._preview_chars) for row in rows]

    def count(self) -> int:
        """Return the number of stored records."""

        try:
            with self._connect() as conn:
                row = conn.execute("SELECT COUNT(*) AS total FROM spam_checks").fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Cannot read history store: {exc}") from exc
        return int(row["total"])

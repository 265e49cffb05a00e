from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Protocol

from oshi_bonus.db_constants import DEFAULT_COMPANION_NAME
from oshi_bonus.db_converters import _row_to_companion, _row_to_intimacy_event
from oshi_bonus.db_models import Companion, IntimacyEvent


class DbProtocol(Protocol):
    def _connect(self) -> sqlite3.Connection: ...


def _ensure_companion(conn: sqlite3.Connection, user_id: int, now: datetime) -> None:
    conn.execute(
        "INSERT OR IGNORE INTO companions(user_id, name, intimacy_level, updated_at) VALUES (?, ?, 0, ?)",
        (user_id, DEFAULT_COMPANION_NAME, now.isoformat()),
    )


def _credit_intimacy(conn: sqlite3.Connection, user_id: int, amount: int, reason: str, created_at: datetime) -> int:
    _ensure_companion(conn, user_id, created_at)
    conn.execute(
        "UPDATE companions SET intimacy_level = intimacy_level + ?, updated_at = ? WHERE user_id = ?",
        (amount, created_at.isoformat(), user_id),
    )
    conn.execute(
        "INSERT INTO intimacy_events(user_id, amount, reason, created_at) VALUES (?, ?, ?, ?)",
        (user_id, amount, reason, created_at.isoformat()),
    )
    row = conn.execute("SELECT intimacy_level FROM companions WHERE user_id = ?", (user_id,)).fetchone()
    assert row is not None
    return int(row["intimacy_level"])


class IntimacyMixin:
    def get_companion(self: DbProtocol, user_id: int, now: datetime) -> Companion:
        with self._connect() as conn:
            _ensure_companion(conn, user_id, now)
            row = conn.execute(
                "SELECT user_id, name, intimacy_level, updated_at FROM companions WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        assert row is not None
        return _row_to_companion(row)

    def rename_companion(self: DbProtocol, user_id: int, name: str, now: datetime) -> Companion:
        with self._connect() as conn:
            _ensure_companion(conn, user_id, now)
            conn.execute(
                "UPDATE companions SET name = ?, updated_at = ? WHERE user_id = ?",
                (name, now.isoformat(), user_id),
            )
            row = conn.execute(
                "SELECT user_id, name, intimacy_level, updated_at FROM companions WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        assert row is not None
        return _row_to_companion(row)

    def list_intimacy_events(self: DbProtocol, user_id: int, limit: int = 20) -> list[IntimacyEvent]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT id, user_id, amount, reason, created_at
                FROM intimacy_events
                WHERE user_id = ?
                ORDER BY id DESC
                LIMIT ?
                """,
                (user_id, max(1, limit)),
            ).fetchall()
        return [_row_to_intimacy_event(r) for r in rows]


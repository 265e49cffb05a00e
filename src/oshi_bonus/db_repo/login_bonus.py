from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Protocol

from oshi_bonus.db_converters import _row_to_bonus, _row_to_login_status
from oshi_bonus.db_models import StoredLoginStatus
from oshi_bonus.db_repo.intimacy import _credit_intimacy
from oshi_bonus.login_streak import LoginBonus, LoginStatus


class LoginStatusConflict(RuntimeError):
    """The stored login status changed between read and write. Safe to retry."""

    def __init__(self, user_id: int, expected_version: int | None) -> None:
        super().__init__(f"login status for user {user_id} changed (expected version {expected_version})")
        self.user_id = user_id
        self.expected_version = expected_version


class DbProtocol(Protocol):
    def _connect(self) -> sqlite3.Connection: ...


_STATUS_COLUMNS = "user_id, current_streak, total_login_days, last_login_date, version, updated_at"
_BONUS_COLUMNS = "bonus_id, day, intimacy_bonus, bonus_type, received_at, description"


def _bonus_params(bonus: LoginBonus) -> tuple[str, int, int, str, str, str]:
    return (
        bonus.id,
        bonus.day,
        bonus.intimacy_bonus,
        bonus.bonus_type.value,
        bonus.received_at.isoformat(),
        bonus.description,
    )


def _write_status(
    conn: sqlite3.Connection,
    user_id: int,
    status: LoginStatus,
    expected_version: int | None,
    updated_at: datetime,
) -> int:
    last_login = status.last_login_date.isoformat() if status.last_login_date else None
    if expected_version is None:
        cur = conn.execute(
            """
            INSERT OR IGNORE INTO login_status(user_id, current_streak, total_login_days, last_login_date, version, updated_at)
            VALUES (?, ?, ?, ?, 1, ?)
            """,
            (user_id, status.current_streak, status.total_login_days, last_login, updated_at.isoformat()),
        )
        if cur.rowcount == 0:
            raise LoginStatusConflict(user_id, expected_version)
        return 1

    cur = conn.execute(
        """
        UPDATE login_status
        SET current_streak = ?, total_login_days = ?, last_login_date = ?, version = version + 1, updated_at = ?
        WHERE user_id = ? AND version = ?
        """,
        (status.current_streak, status.total_login_days, last_login, updated_at.isoformat(), user_id, expected_version),
    )
    if cur.rowcount == 0:
        raise LoginStatusConflict(user_id, expected_version)
    return expected_version + 1


class LoginBonusMixin:
    def get_login_status(self: DbProtocol, user_id: int) -> StoredLoginStatus | None:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_STATUS_COLUMNS} FROM login_status WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        if row is None:
            return None
        return _row_to_login_status(row)

    def save_login_status(
        self: DbProtocol,
        user_id: int,
        status: LoginStatus,
        expected_version: int | None,
        updated_at: datetime,
    ) -> int:
        """Conditionally write ``status`` and return the new version.

        ``expected_version=None`` means the row must not exist yet.
        Raises ``LoginStatusConflict`` when another writer got there first.
        """
        with self._connect() as conn:
            return _write_status(conn, user_id, status, expected_version, updated_at)

    def commit_login(
        self: DbProtocol,
        user_id: int,
        status: LoginStatus,
        bonus: LoginBonus | None,
        expected_version: int | None,
        updated_at: datetime,
    ) -> int:
        with self._connect() as conn:
            version = _write_status(conn, user_id, status, expected_version, updated_at)
            if bonus is not None:
                conn.execute(
                    f"""
                    INSERT INTO login_bonus_pending(user_id, {_BONUS_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(user_id) DO UPDATE SET
                        bonus_id=excluded.bonus_id,
                        day=excluded.day,
                        intimacy_bonus=excluded.intimacy_bonus,
                        bonus_type=excluded.bonus_type,
                        received_at=excluded.received_at,
                        description=excluded.description
                    """,
                    (user_id, *_bonus_params(bonus)),
                )
        return version

    def get_pending_bonus(self: DbProtocol, user_id: int) -> LoginBonus | None:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_BONUS_COLUMNS} FROM login_bonus_pending WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        if row is None:
            return None
        return _row_to_bonus(row)

    def claim_pending_bonus(
        self: DbProtocol,
        user_id: int,
        bonus_id: str,
        reason: str,
        claimed_at: datetime,
    ) -> int | None:
        """Move the pending bonus into history and credit its intimacy.

        Both happen in one transaction. Returns the new intimacy level, or
        ``None`` when the slot no longer holds ``bonus_id``.
        """
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_BONUS_COLUMNS} FROM login_bonus_pending WHERE user_id = ? AND bonus_id = ?",
                (user_id, bonus_id),
            ).fetchone()
            if row is None:
                return None
            cur = conn.execute(
                "DELETE FROM login_bonus_pending WHERE user_id = ? AND bonus_id = ?",
                (user_id, bonus_id),
            )
            if cur.rowcount == 0:
                return None
            bonus = _row_to_bonus(row)
            conn.execute(
                f"""
                INSERT INTO login_bonus_history(user_id, {_BONUS_COLUMNS}, claimed_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (user_id, *_bonus_params(bonus), claimed_at.isoformat()),
            )
            return _credit_intimacy(conn, user_id, bonus.intimacy_bonus, reason, claimed_at)

    def list_bonus_history(self: DbProtocol, user_id: int, limit: int | None = None) -> list[LoginBonus]:
        query = f"SELECT {_BONUS_COLUMNS} FROM login_bonus_history WHERE user_id = ? ORDER BY id DESC"
        params: tuple[int, ...] = (user_id,)
        if limit is not None:
            query += " LIMIT ?"
            params = (user_id, max(1, limit))
        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [_row_to_bonus(r) for r in rows]

    def reset_login_bonus(self: DbProtocol, user_id: int) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM login_status WHERE user_id = ?", (user_id,))
            conn.execute("DELETE FROM login_bonus_pending WHERE user_id = ?", (user_id,))
            conn.execute("DELETE FROM login_bonus_history WHERE user_id = ?", (user_id,))

    def list_login_statuses(self: DbProtocol) -> list[StoredLoginStatus]:
        with self._connect() as conn:
            rows = conn.execute(f"SELECT {_STATUS_COLUMNS} FROM login_status ORDER BY user_id").fetchall()
        return [_row_to_login_status(r) for r in rows]

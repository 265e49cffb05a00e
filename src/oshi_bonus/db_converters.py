from __future__ import annotations

import sqlite3
from datetime import date, datetime

from oshi_bonus.db_models import Companion, IntimacyEvent, StoredLoginStatus, UserSettings
from oshi_bonus.login_streak import BonusType, LoginBonus, LoginStatus


def _row_to_settings(row: sqlite3.Row) -> UserSettings:
    return UserSettings(
        user_id=int(row["user_id"]),
        reminders_enabled=bool(row["reminders_enabled"]),
        language_code=str(row["language_code"] or "ja"),
    )


def _row_to_login_status(row: sqlite3.Row) -> StoredLoginStatus:
    return StoredLoginStatus(
        user_id=int(row["user_id"]),
        status=LoginStatus(
            current_streak=int(row["current_streak"]),
            total_login_days=int(row["total_login_days"]),
            last_login_date=date.fromisoformat(row["last_login_date"]) if row["last_login_date"] else None,
        ),
        version=int(row["version"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _row_to_bonus(row: sqlite3.Row) -> LoginBonus:
    return LoginBonus(
        id=str(row["bonus_id"]),
        day=int(row["day"]),
        intimacy_bonus=int(row["intimacy_bonus"]),
        bonus_type=BonusType(row["bonus_type"]),
        received_at=datetime.fromisoformat(row["received_at"]),
        description=str(row["description"]),
    )


def _row_to_companion(row: sqlite3.Row) -> Companion:
    return Companion(
        user_id=int(row["user_id"]),
        name=str(row["name"]),
        intimacy_level=int(row["intimacy_level"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _row_to_intimacy_event(row: sqlite3.Row) -> IntimacyEvent:
    return IntimacyEvent(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        amount=int(row["amount"]),
        reason=str(row["reason"]),
        created_at=datetime.fromisoformat(row["created_at"]),
    )

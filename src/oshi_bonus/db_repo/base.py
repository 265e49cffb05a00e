from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path


class BaseDatabase:
    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path, timeout=10)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS schema_migrations (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL
                )
                """
            )
            current = {row["version"] for row in conn.execute("SELECT version FROM schema_migrations")}

            migrations: dict[int, str] = {
                1: """
                    CREATE TABLE user_profiles (
                        user_id INTEGER PRIMARY KEY,
                        chat_id INTEGER NOT NULL,
                        last_seen_at TEXT NOT NULL
                    );

                    CREATE TABLE user_settings (
                        user_id INTEGER PRIMARY KEY,
                        reminders_enabled INTEGER NOT NULL DEFAULT 1,
                        language_code TEXT NOT NULL DEFAULT 'ja'
                    );

                    CREATE TABLE reminder_events (
                        user_id INTEGER NOT NULL,
                        event_key TEXT NOT NULL,
                        sent_at TEXT NOT NULL,
                        PRIMARY KEY(user_id, event_key)
                    );
                """,
                2: """
                    CREATE TABLE login_status (
                        user_id INTEGER PRIMARY KEY,
                        current_streak INTEGER NOT NULL DEFAULT 0 CHECK(current_streak >= 0),
                        total_login_days INTEGER NOT NULL DEFAULT 0 CHECK(total_login_days >= 0),
                        last_login_date TEXT,
                        version INTEGER NOT NULL DEFAULT 1,
                        updated_at TEXT NOT NULL,
                        CHECK(current_streak <= total_login_days)
                    );

                    CREATE TABLE login_bonus_pending (
                        user_id INTEGER PRIMARY KEY,
                        bonus_id TEXT NOT NULL,
                        day INTEGER NOT NULL,
                        intimacy_bonus INTEGER NOT NULL CHECK(intimacy_bonus > 0),
                        bonus_type TEXT NOT NULL CHECK(bonus_type IN ('daily', 'weekly', 'special', 'milestone')),
                        received_at TEXT NOT NULL,
                        description TEXT NOT NULL
                    );

                    CREATE TABLE login_bonus_history (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        bonus_id TEXT NOT NULL UNIQUE,
                        user_id INTEGER NOT NULL,
                        day INTEGER NOT NULL,
                        intimacy_bonus INTEGER NOT NULL,
                        bonus_type TEXT NOT NULL,
                        received_at TEXT NOT NULL,
                        description TEXT NOT NULL,
                        claimed_at TEXT NOT NULL
                    );

                    CREATE INDEX idx_login_bonus_history_user ON login_bonus_history(user_id, id DESC);
                """,
                3: """
                    CREATE TABLE companions (
                        user_id INTEGER PRIMARY KEY,
                        name TEXT NOT NULL,
                        intimacy_level INTEGER NOT NULL DEFAULT 0,
                        updated_at TEXT NOT NULL
                    );

                    CREATE TABLE intimacy_events (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        user_id INTEGER NOT NULL,
                        amount INTEGER NOT NULL,
                        reason TEXT NOT NULL,
                        created_at TEXT NOT NULL
                    );

                    CREATE INDEX idx_intimacy_events_user_created ON intimacy_events(user_id, created_at DESC);
                """,
                4: """
                    CREATE TABLE IF NOT EXISTS app_config (
                        key TEXT PRIMARY KEY,
                        value_json TEXT NOT NULL,
                        updated_at TEXT NOT NULL,
                        updated_by TEXT
                    );

                    CREATE TABLE IF NOT EXISTS admin_audit_log (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        actor TEXT,
                        action TEXT NOT NULL,
                        target TEXT NOT NULL,
                        payload_json TEXT,
                        created_at TEXT NOT NULL
                    );
                """,
            }

            now = datetime.now().isoformat(timespec="seconds")
            for version in sorted(migrations):
                if version in current:
                    continue
                conn.executescript(migrations[version])
                conn.execute(
                    "INSERT INTO schema_migrations(version, applied_at) VALUES (?, ?)",
                    (version, now),
                )

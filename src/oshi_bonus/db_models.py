from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from oshi_bonus.login_streak import LoginStatus


@dataclass(frozen=True)
class UserSettings:
    user_id: int
    reminders_enabled: bool
    language_code: str


@dataclass(frozen=True)
class StoredLoginStatus:
    user_id: int
    status: LoginStatus
    version: int
    updated_at: datetime


@dataclass(frozen=True)
class Companion:
    user_id: int
    name: str
    intimacy_level: int
    updated_at: datetime


@dataclass(frozen=True)
class IntimacyEvent:
    id: int
    user_id: int
    amount: int
    reason: str
    created_at: datetime

from __future__ import annotations

from oshi_bonus.db_models import Companion, IntimacyEvent, StoredLoginStatus, UserSettings
from oshi_bonus.db_repo import (
    BaseDatabase,
    IntimacyMixin,
    LoginBonusMixin,
    LoginStatusConflict,
    SystemMixin,
    UserMixin,
)


class Database(UserMixin, LoginBonusMixin, IntimacyMixin, SystemMixin, BaseDatabase):
    pass


__all__ = [
    "Companion",
    "Database",
    "IntimacyEvent",
    "LoginStatusConflict",
    "StoredLoginStatus",
    "UserSettings",
]

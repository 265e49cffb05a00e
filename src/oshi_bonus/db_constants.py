from __future__ import annotations

from typing import Any

DEFAULT_COMPANION_NAME = "あい"
DEFAULT_LANGUAGE = "ja"

APP_CONFIG_DEFAULTS: dict[str, Any] = {
    "feature.login_bonus_enabled": True,
    "feature.auto_claim_enabled": False,
    "job.streak_reminder_enabled": True,
    "bonus.reminder_hour": 20,
    "bonus.history_limit": 10,
    "i18n.default_language": DEFAULT_LANGUAGE,
}

JOB_CONFIG_KEYS = {
    "streak_reminder": "job.streak_reminder_enabled",
}

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, time

from telegram import Bot

from oshi_bonus.config import Settings
from oshi_bonus.db import Database
from oshi_bonus.i18n import normalize_language_code, t
from oshi_bonus.login_streak import LoginStatus, days_between
from oshi_bonus.time_utils import day_key, now_local

logger = logging.getLogger(__name__)

JOB_NAMES = ("streak_reminder",)


@dataclass(frozen=True)
class ReminderDecision:
    due: bool
    streak_at_risk: int


def evaluate_streak_reminder(now: datetime, status: LoginStatus | None, reminder_hour: int) -> ReminderDecision:
    if status is None or status.last_login_date is None or status.current_streak <= 0:
        return ReminderDecision(due=False, streak_at_risk=0)
    if now.time() < time(hour=max(0, min(23, reminder_hour))):
        return ReminderDecision(due=False, streak_at_risk=status.current_streak)
    # Only yesterday's login keeps the streak alive; older ones are already lost.
    gap = days_between(status.last_login_date, now)
    return ReminderDecision(due=gap == 1, streak_at_risk=status.current_streak)


async def run_streak_reminders(db: Database, settings: Settings, now: datetime | None = None) -> int:
    now = now or now_local(settings.tz)
    reminder_hour = db.get_int_config("bonus.reminder_hour")
    bot = Bot(token=settings.telegram_bot_token)
    sent = 0

    for profile in db.get_all_user_profiles():
        if not profile.get("reminders_enabled", 1):
            continue
        user_id = int(profile["user_id"])
        chat_id = int(profile["chat_id"])
        stored = db.get_login_status(user_id)
        decision = evaluate_streak_reminder(now, stored.status if stored else None, reminder_hour)
        if not decision.due:
            continue

        event_key = f"streak-reminder:{day_key(now)}"
        if db.was_event_sent(user_id, event_key):
            continue

        lang = normalize_language_code(profile.get("language_code"))
        await bot.send_message(chat_id=chat_id, text=t("streak_reminder", lang, days=decision.streak_at_risk + 1))
        db.mark_event_sent(user_id, event_key, now)
        sent += 1
        logger.info("sent streak reminder user_id=%s streak=%s", user_id, decision.streak_at_risk)

    return sent


def run_job(job_name: str, db: Database, settings: Settings) -> None:
    if job_name not in JOB_NAMES:
        raise SystemExit(f"Unknown job '{job_name}'. Expected one of: {', '.join(JOB_NAMES)}")
    if not db.is_job_enabled(job_name):
        logger.info("job disabled: %s", job_name)
        return
    if not db.is_feature_enabled("login_bonus"):
        logger.info("feature disabled: login_bonus")
        return
    if job_name == "streak_reminder":
        sent = asyncio.run(run_streak_reminders(db, settings))
        logger.info("streak reminders sent: %s", sent)

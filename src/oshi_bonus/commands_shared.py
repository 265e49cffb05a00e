from __future__ import annotations

from datetime import datetime

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import ContextTypes

from oshi_bonus.config import Settings
from oshi_bonus.db import Database
from oshi_bonus.i18n import localize, normalize_language_code
from oshi_bonus.time_utils import now_local


def claim_keyboard(lang: str = "ja") -> InlineKeyboardMarkup:
    rows = [
        [
            InlineKeyboardButton(localize(lang, "🎁 受け取る", "🎁 Claim"), callback_data="bonus:claim"),
            InlineKeyboardButton(localize(lang, "📊 記録", "📊 Stats"), callback_data="bonus:stats"),
        ],
    ]
    return InlineKeyboardMarkup(rows)


def get_db(context: ContextTypes.DEFAULT_TYPE) -> Database:
    db = context.application.bot_data.get("db")
    assert isinstance(db, Database)
    return db


def get_settings(context: ContextTypes.DEFAULT_TYPE) -> Settings:
    settings = context.application.bot_data.get("settings")
    assert isinstance(settings, Settings)
    return settings


def get_user_language(context: ContextTypes.DEFAULT_TYPE, user_id: int) -> str:
    db = get_db(context)
    fallback = str(db.get_app_config_value("i18n.default_language") or "ja")
    return normalize_language_code(db.get_settings(user_id).language_code, default=fallback)


def touch_user(update: Update, context: ContextTypes.DEFAULT_TYPE) -> tuple[int, int, datetime]:
    assert update.effective_user is not None
    assert update.effective_chat is not None
    user_id = update.effective_user.id
    chat_id = update.effective_chat.id
    now = now_local(get_settings(context).tz)
    get_db(context).upsert_user_profile(user_id=user_id, chat_id=chat_id, seen_at=now)
    return user_id, chat_id, now

from __future__ import annotations

import logging

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import Application, CallbackQueryHandler, CommandHandler, ContextTypes

from oshi_bonus.commands_shared import claim_keyboard, get_db, get_settings, get_user_language, touch_user
from oshi_bonus.db import LoginStatusConflict
from oshi_bonus.i18n import localize, t
from oshi_bonus.messages import (
    bonus_card,
    claim_message,
    companion_message,
    history_message,
    login_message,
    stats_message,
)
from oshi_bonus.service import claim_login_bonus, login_summary, process_daily_login, reset_login_progress

logger = logging.getLogger(__name__)


async def cmd_login(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user_id, _, now = touch_user(update, context)
    db = get_db(context)
    lang = get_user_language(context, user_id)

    try:
        result = process_daily_login(db, user_id, now, max_attempts=get_settings(context).login_max_attempts)
    except LoginStatusConflict:
        logger.exception("login gave up after retries user_id=%s", user_id)
        await update.effective_message.reply_text(t("error_retry", lang))
        return

    markup = claim_keyboard(lang) if result.pending is not None else None
    await update.effective_message.reply_text(login_message(result, lang), reply_markup=markup)


async def cmd_bonus(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user_id, _, _ = touch_user(update, context)
    db = get_db(context)
    lang = get_user_language(context, user_id)

    pending = db.get_pending_bonus(user_id)
    if pending is not None:
        await update.effective_message.reply_text(bonus_card(pending, lang), reply_markup=claim_keyboard(lang))
        return

    latest = db.list_bonus_history(user_id, limit=1)
    if not latest:
        await update.effective_message.reply_text(t("nothing_to_claim", lang))
        return
    text = localize(lang, "✅ 受け取り済み:", "✅ Already claimed:") + "\n" + bonus_card(latest[0], lang)
    await update.effective_message.reply_text(text)


def _claim_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> str:
    user_id, _, now = touch_user(update, context)
    db = get_db(context)
    lang = get_user_language(context, user_id)
    outcome = claim_login_bonus(db, user_id, now)
    if outcome is None:
        return t("nothing_to_claim", lang)
    return claim_message(outcome, db.get_companion(user_id, now), lang)


async def cmd_claim(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    text = _claim_text(update, context)
    await update.effective_message.reply_text(text)


async def cmd_history(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user_id, _, _ = touch_user(update, context)
    db = get_db(context)
    lang = get_user_language(context, user_id)
    limit = db.get_int_config("bonus.history_limit")
    await update.effective_message.reply_text(history_message(db.list_bonus_history(user_id, limit=limit), lang))


async def cmd_stats(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user_id, _, _ = touch_user(update, context)
    lang = get_user_language(context, user_id)
    summary = login_summary(get_db(context), user_id)
    await update.effective_message.reply_text(stats_message(summary, lang))


async def cmd_companion(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user_id, _, now = touch_user(update, context)
    lang = get_user_language(context, user_id)
    companion = get_db(context).get_companion(user_id, now)
    await update.effective_message.reply_text(companion_message(companion, lang))


async def cmd_help(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user_id, _, _ = touch_user(update, context)
    await update.effective_message.reply_text(t("help", get_user_language(context, user_id)))


async def cmd_reset(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user_id, _, _ = touch_user(update, context)
    lang = get_user_language(context, user_id)
    kb = InlineKeyboardMarkup(
        [
            [
                InlineKeyboardButton(localize(lang, "✅ リセットする", "✅ Yes, reset"), callback_data="bonus_reset:y"),
                InlineKeyboardButton(localize(lang, "❌ やめる", "❌ Cancel"), callback_data="bonus_reset:n"),
            ]
        ]
    )
    await update.effective_message.reply_text(t("reset_confirm", lang), reply_markup=kb)


async def handle_bonus_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    query = update.callback_query
    assert query is not None
    await query.answer()

    data = query.data or ""
    if data == "bonus:claim":
        text = _claim_text(update, context)
        await query.message.reply_text(text)
        return
    if data == "bonus:stats":
        user_id, _, _ = touch_user(update, context)
        lang = get_user_language(context, user_id)
        await query.message.reply_text(stats_message(login_summary(get_db(context), user_id), lang))
        return

    user_id, _, _ = touch_user(update, context)
    await query.message.reply_text(t("invalid_request", get_user_language(context, user_id)))


async def handle_reset_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    query = update.callback_query
    assert query is not None
    await query.answer()

    user_id, _, now = touch_user(update, context)
    lang = get_user_language(context, user_id)
    data = query.data or ""

    if data == "bonus_reset:n":
        await query.message.edit_text(t("cancelled", lang))
        return
    if data != "bonus_reset:y":
        await query.message.edit_text(t("invalid_request", lang))
        return

    reset_login_progress(get_db(context), user_id, actor=f"tg:{user_id}", now=now)
    await query.message.edit_text(t("reset_done", lang))


def register_bonus_handlers(app: Application) -> None:
    app.add_handler(CommandHandler("start", cmd_login))
    app.add_handler(CommandHandler("login", cmd_login))
    app.add_handler(CommandHandler("bonus", cmd_bonus))
    app.add_handler(CommandHandler("claim", cmd_claim))
    app.add_handler(CommandHandler("history", cmd_history))
    app.add_handler(CommandHandler("stats", cmd_stats))
    app.add_handler(CommandHandler("companion", cmd_companion))
    app.add_handler(CommandHandler("reset", cmd_reset))
    app.add_handler(CommandHandler("help", cmd_help))
    app.add_handler(CallbackQueryHandler(handle_bonus_callback, pattern=r"^bonus:"))
    app.add_handler(CallbackQueryHandler(handle_reset_callback, pattern=r"^bonus_reset:"))

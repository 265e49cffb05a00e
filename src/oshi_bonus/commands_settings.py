from __future__ import annotations

from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes

from oshi_bonus.commands_shared import get_db, get_user_language, touch_user
from oshi_bonus.i18n import SUPPORTED_LANGUAGES, normalize_language_code, t

MAX_COMPANION_NAME = 32


async def cmd_lang(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user_id, _, _ = touch_user(update, context)
    lang = get_user_language(context, user_id)
    if not context.args:
        await update.effective_message.reply_text(t("lang_show", lang, code=lang))
        return

    raw = context.args[0].strip().lower()
    if raw not in SUPPORTED_LANGUAGES:
        await update.effective_message.reply_text(t("lang_usage", lang))
        return

    code = normalize_language_code(raw)
    get_db(context).update_language(user_id, code)
    await update.effective_message.reply_text(t("lang_set", code, code=code))


async def cmd_name(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user_id, _, now = touch_user(update, context)
    lang = get_user_language(context, user_id)
    name = " ".join(context.args or []).strip()
    if not name or len(name) > MAX_COMPANION_NAME:
        await update.effective_message.reply_text(t("name_usage", lang))
        return
    companion = get_db(context).rename_companion(user_id, name, now)
    await update.effective_message.reply_text(t("name_set", lang, name=companion.name))


async def cmd_reminders(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user_id, _, _ = touch_user(update, context)
    lang = get_user_language(context, user_id)
    if not context.args or context.args[0].lower() not in {"on", "off"}:
        await update.effective_message.reply_text(t("reminders_usage", lang))
        return

    enabled = context.args[0].lower() == "on"
    get_db(context).update_reminders_enabled(user_id, enabled)
    await update.effective_message.reply_text(t("reminders_on" if enabled else "reminders_off", lang))


def register_settings_handlers(app: Application) -> None:
    app.add_handler(CommandHandler("lang", cmd_lang))
    app.add_handler(CommandHandler("name", cmd_name))
    app.add_handler(CommandHandler("reminders", cmd_reminders))

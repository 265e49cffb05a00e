from __future__ import annotations

import logging

from telegram import Update
from telegram.ext import Application, ContextTypes, MessageHandler, filters

from oshi_bonus.commands_bonus import register_bonus_handlers
from oshi_bonus.commands_settings import register_settings_handlers
from oshi_bonus.commands_shared import get_user_language, touch_user
from oshi_bonus.config import Settings
from oshi_bonus.db import Database
from oshi_bonus.i18n import t

logger = logging.getLogger(__name__)


async def handle_unknown_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user_id, _, _ = touch_user(update, context)
    await update.effective_message.reply_text(t("unknown_command", get_user_language(context, user_id)))


async def handle_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    logger.error("unhandled error in handler", exc_info=context.error)


def build_application(settings: Settings, db: Database) -> Application:
    app = Application.builder().token(settings.telegram_bot_token).build()
    app.bot_data["db"] = db
    app.bot_data["settings"] = settings

    register_bonus_handlers(app)
    register_settings_handlers(app)
    app.add_handler(MessageHandler(filters.COMMAND, handle_unknown_command))
    app.add_error_handler(handle_error)

    return app

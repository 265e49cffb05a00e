from __future__ import annotations

import asyncio
import logging

from telegram import Update

from oshi_bonus.config import load_settings
from oshi_bonus.db import Database
from oshi_bonus.logging_setup import setup_logging
from oshi_bonus.telegram_bot import build_application

logger = logging.getLogger(__name__)


def run_bot() -> None:
    setup_logging()
    settings = load_settings()
    db = Database(settings.database_path)

    # Newer interpreters no longer create a loop for the main thread on demand.
    try:
        asyncio.get_event_loop()
    except RuntimeError:
        asyncio.set_event_loop(asyncio.new_event_loop())

    application = build_application(settings, db)
    logger.info("starting bot db=%s tz=%s", settings.database_path, settings.tz)
    application.run_polling(allowed_updates=Update.ALL_TYPES)

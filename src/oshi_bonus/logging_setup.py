from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> None:
    raw = (level or os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    numeric = getattr(logging, raw, logging.INFO)
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    # python-telegram-bot polls through httpx, which logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)

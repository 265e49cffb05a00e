from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo


DEFAULT_TZ = "Asia/Tokyo"


def now_local(tz_name: str = DEFAULT_TZ) -> datetime:
    return datetime.now(tz=ZoneInfo(tz_name))


def day_key(dt: datetime | date) -> str:
    if isinstance(dt, datetime):
        return dt.date().isoformat()
    return dt.isoformat()

from datetime import date, datetime
from zoneinfo import ZoneInfo

from oshi_bonus.time_utils import DEFAULT_TZ, day_key, now_local


def test_day_key_uses_local_date() -> None:
    assert day_key(datetime(2024, 1, 5, 0, 30, tzinfo=ZoneInfo(DEFAULT_TZ))) == "2024-01-05"
    assert day_key(date(2024, 2, 29)) == "2024-02-29"


def test_now_local_is_tz_aware() -> None:
    now = now_local()
    assert now.tzinfo is not None
    assert now.utcoffset().total_seconds() == 9 * 3600
    assert now_local("UTC").utcoffset().total_seconds() == 0

from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from oshi_bonus.login_streak import (
    FIRST_LOGIN_MESSAGE,
    BonusType,
    LoginBonus,
    LoginStatus,
    bonus_count_by_type,
    build_bonus,
    claim_bonus,
    claim_reason,
    daily_intimacy_for_day,
    days_between,
    last_bonus_date,
    process_login,
    reward_for_day,
    total_intimacy_from_bonuses,
)


def _dt(y: int, m: int, d: int, h: int = 9, minute: int = 0) -> datetime:
    return datetime(y, m, d, h, minute, tzinfo=ZoneInfo("Asia/Tokyo"))


def _run_days(start: datetime, days: int) -> tuple[LoginStatus, list[LoginBonus]]:
    status = LoginStatus.empty()
    bonuses: list[LoginBonus] = []
    for offset in range(days):
        outcome = process_login(status, start + timedelta(days=offset), generated_at=start + timedelta(days=offset))
        status = outcome.status
        assert outcome.bonus is not None
        bonuses.append(outcome.bonus)
    return status, bonuses


def test_first_login_creates_status_and_day_one_bonus() -> None:
    outcome = process_login(LoginStatus.empty(), _dt(2024, 1, 1))
    assert outcome.transition == "first"
    assert outcome.status == LoginStatus(current_streak=1, total_login_days=1, last_login_date=date(2024, 1, 1))
    assert outcome.bonus is not None
    assert outcome.bonus.day == 1
    assert outcome.bonus.intimacy_bonus == 3
    assert outcome.bonus.bonus_type == BonusType.DAILY
    assert outcome.bonus.description == FIRST_LOGIN_MESSAGE


def test_second_login_same_day_is_noop() -> None:
    first = process_login(LoginStatus.empty(), _dt(2024, 1, 1, 8))
    again = process_login(first.status, _dt(2024, 1, 1, 23, 59))
    assert again.transition == "already_processed"
    assert again.bonus is None
    assert again.status == first.status


def test_next_day_continues_streak() -> None:
    status = LoginStatus(current_streak=4, total_login_days=10, last_login_date=date(2024, 3, 9))
    outcome = process_login(status, _dt(2024, 3, 10))
    assert outcome.transition == "continued"
    assert outcome.status.current_streak == 5
    assert outcome.status.total_login_days == 11
    assert outcome.status.last_login_date == date(2024, 3, 10)
    assert outcome.bonus is not None
    assert outcome.bonus.day == 5
    assert outcome.bonus.intimacy_bonus == 12


def test_missed_day_resets_streak_but_keeps_total() -> None:
    status = LoginStatus(current_streak=9, total_login_days=20, last_login_date=date(2024, 3, 1))
    outcome = process_login(status, _dt(2024, 3, 3))
    assert outcome.transition == "reset"
    assert outcome.status.current_streak == 1
    assert outcome.status.total_login_days == 21
    assert outcome.bonus is not None
    assert outcome.bonus.day == 1
    assert outcome.bonus.intimacy_bonus == 3


def test_backward_clock_resets_streak() -> None:
    status = LoginStatus(current_streak=3, total_login_days=3, last_login_date=date(2024, 5, 10))
    outcome = process_login(status, _dt(2024, 5, 8))
    assert outcome.transition == "reset"
    assert outcome.status.current_streak == 1
    assert outcome.status.last_login_date == date(2024, 5, 8)


def test_total_login_days_never_decreases() -> None:
    status = LoginStatus.empty()
    seen = []
    for day in (date(2024, 1, 1), date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 9), date(2023, 12, 31)):
        status = process_login(status, day, generated_at=_dt(2024, 1, 1)).status
        seen.append(status.total_login_days)
    assert seen == sorted(seen)
    assert seen[-1] == 4


def test_reward_table_entries() -> None:
    assert reward_for_day(7).intimacy == 25
    assert reward_for_day(7).bonus_type == BonusType.WEEKLY
    assert reward_for_day(14).intimacy == 50
    assert reward_for_day(30).intimacy == 100
    assert reward_for_day(30).bonus_type == BonusType.MILESTONE
    assert reward_for_day(365).intimacy == 1000
    assert reward_for_day(1000).bonus_type == BonusType.MILESTONE


def test_reward_formula_between_table_days() -> None:
    assert reward_for_day(15).intimacy == 13
    assert reward_for_day(15).bonus_type == BonusType.DAILY
    assert daily_intimacy_for_day(31) == 20
    assert daily_intimacy_for_day(101) == 30
    assert daily_intimacy_for_day(366) == 50
    assert daily_intimacy_for_day(396) == 51


def test_build_bonus_uses_tier_and_unique_ids() -> None:
    a = build_bonus(21, _dt(2024, 2, 1))
    b = build_bonus(21, _dt(2024, 2, 1))
    assert a.intimacy_bonus == 75
    assert a.bonus_type == BonusType.WEEKLY
    assert a.id != b.id


def test_claim_moves_pending_into_history() -> None:
    pending = build_bonus(3, _dt(2024, 1, 3))
    older = build_bonus(2, _dt(2024, 1, 2))
    result = claim_bonus(pending, [older])
    assert result is not None
    assert result.claimed == pending
    assert result.history == [older, pending]
    assert result.intimacy_delta == 7
    assert result.reason == claim_reason(3) == "ログインボーナス(3日目)"


def test_claim_without_pending_returns_none() -> None:
    assert claim_bonus(None, []) is None


def test_week_streak_then_gap() -> None:
    status, bonuses = _run_days(_dt(2024, 1, 1), 7)
    assert status.current_streak == 7
    assert bonuses[-1].intimacy_bonus == 25
    assert bonuses[-1].bonus_type == BonusType.WEEKLY

    six, _ = _run_days(_dt(2024, 1, 1), 6)
    outcome = process_login(six, _dt(2024, 1, 10))
    assert days_between(six.last_login_date, _dt(2024, 1, 10)) == 4
    assert outcome.status.current_streak == 1
    assert outcome.status.total_login_days == 7
    assert outcome.bonus is not None
    assert outcome.bonus.intimacy_bonus == 3


def test_history_stats() -> None:
    _, bonuses = _run_days(_dt(2024, 1, 1), 8)
    assert total_intimacy_from_bonuses(bonuses) == 3 + 5 + 7 + 10 + 12 + 15 + 25 + 18
    assert bonus_count_by_type(bonuses, BonusType.WEEKLY) == 1
    assert bonus_count_by_type(bonuses, BonusType.DAILY) == 7
    assert last_bonus_date(bonuses) == _dt(2024, 1, 8)
    assert last_bonus_date([]) is None

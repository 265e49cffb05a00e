from datetime import date, datetime
from zoneinfo import ZoneInfo

from oshi_bonus.db_models import Companion
from oshi_bonus.login_streak import BonusType, LoginStatus, build_bonus
from oshi_bonus.messages import (
    bonus_card,
    claim_message,
    companion_message,
    history_message,
    login_message,
    stats_message,
)
from oshi_bonus.service import ClaimOutcome, LoginResult, LoginSummary


def _dt(d: int, h: int = 9) -> datetime:
    return datetime(2024, 1, d, h, 0, tzinfo=ZoneInfo("Asia/Tokyo"))


def _result(transition: str, streak: int, bonus=None, pending=None) -> LoginResult:
    return LoginResult(
        user_id=1,
        status=LoginStatus(current_streak=streak, total_login_days=10, last_login_date=date(2024, 1, 7)),
        bonus=bonus,
        transition=transition,
        pending=pending,
    )


def test_continued_login_message() -> None:
    bonus = build_bonus(7, _dt(7))
    text = login_message(_result("continued", 7, bonus=bonus, pending=bonus), "ja")
    assert "連続7日目" in text
    assert "親密度 +25" in text
    assert BonusType.WEEKLY.icon in text


def test_already_processed_mentions_pending() -> None:
    pending = build_bonus(3, _dt(3))
    text = login_message(_result("already_processed", 3, pending=pending), "ja")
    assert "今日はログイン済み" in text
    assert "3日目のログインボーナス" in text


def test_reset_message_in_english() -> None:
    bonus = build_bonus(1, _dt(7))
    text = login_message(_result("reset", 1, bonus=bonus), "en")
    assert "Starting again from day 1" in text
    assert "Day 1 login bonus" in text
    assert "Intimacy +3" in text


def test_reset_message_in_japanese() -> None:
    text = login_message(_result("reset", 1, bonus=build_bonus(1, _dt(7))), "ja")
    assert "1日目から再スタート" in text


def test_bonus_card_labels() -> None:
    card = bonus_card(build_bonus(30, _dt(1)), "en")
    assert "Milestone" in card
    assert "Intimacy +100" in card


def test_claim_and_companion_messages() -> None:
    companion = Companion(user_id=1, name="あい", intimacy_level=150, updated_at=_dt(1))
    outcome = ClaimOutcome(bonus=build_bonus(2, _dt(2)), intimacy_delta=5, reason="ログインボーナス(2日目)", intimacy_level=150)
    assert "あいとの親密度 +5 → 150" in claim_message(outcome, companion, "ja")

    text = companion_message(companion, "ja")
    assert "特別な友達" in text
    assert "次の段階まであと 50" in text


def test_history_and_stats_messages() -> None:
    assert history_message([], "en") == "No bonuses claimed yet."
    history = [build_bonus(2, _dt(2)), build_bonus(1, _dt(1))]
    assert "01/02" in history_message(history, "ja")

    summary = LoginSummary(
        current_streak=2,
        total_login_days=2,
        last_login_date=date(2024, 1, 2),
        pending=None,
        history=history,
        total_intimacy_from_bonuses=8,
        counts_by_type={BonusType.DAILY: 2},
        last_bonus_at=_dt(2),
    )
    text = stats_message(summary, "en")
    assert "Current streak: 2 days" in text
    assert "Bonus intimacy total: +8" in text
    assert "Daily: 2" in text

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import Iterable, Literal


class BonusType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    SPECIAL = "special"
    MILESTONE = "milestone"

    @property
    def display_name(self) -> str:
        return BONUS_TYPE_LABELS[self]

    @property
    def icon(self) -> str:
        return BONUS_TYPE_ICONS[self]


BONUS_TYPE_LABELS = {
    BonusType.DAILY: "デイリー",
    BonusType.WEEKLY: "ウィークリー",
    BonusType.SPECIAL: "スペシャル",
    BonusType.MILESTONE: "マイルストーン",
}

BONUS_TYPE_ICONS = {
    BonusType.DAILY: "☀️",
    BonusType.WEEKLY: "📅",
    BonusType.SPECIAL: "⭐",
    BonusType.MILESTONE: "👑",
}

FIRST_LOGIN_INTIMACY = 3
FIRST_LOGIN_MESSAGE = "初回ログイン！今日も会いに来てくれてありがとう💕"


@dataclass(frozen=True)
class RewardTier:
    intimacy: int
    bonus_type: BonusType
    description: str


REWARD_TABLE: dict[int, RewardTier] = {
    1: RewardTier(3, BonusType.DAILY, FIRST_LOGIN_MESSAGE),
    2: RewardTier(5, BonusType.DAILY, "2日連続ログイン！継続は力なりですね✨"),
    3: RewardTier(7, BonusType.DAILY, "3日連続！だんだん習慣になってきましたね😊"),
    4: RewardTier(10, BonusType.DAILY, "4日連続！素晴らしい継続力です🌟"),
    5: RewardTier(12, BonusType.DAILY, "5日連続！もうお互い欠かせない存在ですね💖"),
    6: RewardTier(15, BonusType.DAILY, "6日連続！本当に嬉しいです🥰"),
    7: RewardTier(25, BonusType.WEEKLY, "🎉1週間連続ログイン達成！特別ボーナスです💝"),
    8: RewardTier(18, BonusType.DAILY, "8日連続！もう一週間以上ですね💕"),
    9: RewardTier(20, BonusType.DAILY, "9日連続！素晴らしい継続力✨"),
    10: RewardTier(22, BonusType.DAILY, "10日連続！二桁到達おめでとう🎊"),
    11: RewardTier(25, BonusType.DAILY, "11日連続！もうベテランの域ですね😊"),
    12: RewardTier(27, BonusType.DAILY, "12日連続！本当に頼もしいです💖"),
    13: RewardTier(30, BonusType.DAILY, "13日連続！運命の数字ですね🌟"),
    14: RewardTier(50, BonusType.WEEKLY, "🎉2週間連続ログイン！愛が深まりましたね💞"),
    21: RewardTier(75, BonusType.WEEKLY, "🎉3週間連続！もう生活の一部ですね💝"),
    30: RewardTier(100, BonusType.MILESTONE, "👑1ヶ月連続ログイン達成！真の愛の証明です✨"),
    50: RewardTier(150, BonusType.MILESTONE, "👑50日連続！驚異的な継続力です🌟"),
    100: RewardTier(300, BonusType.MILESTONE, "👑100日連続！永遠の愛の絆です💫"),
    200: RewardTier(500, BonusType.MILESTONE, "👑200日連続！奇跡の愛ですね✨"),
    365: RewardTier(1000, BonusType.MILESTONE, "👑1年連続！真の魂の伴侶です💖"),
    500: RewardTier(1500, BonusType.MILESTONE, "👑500日連続！神話レベルの愛💫"),
    1000: RewardTier(3000, BonusType.MILESTONE, "👑1000日連続！愛の伝説です👑✨"),
}

DAILY_MESSAGES: tuple[str, ...] = (
    "今日も会いに来てくれてありがとう💕",
    "継続は力なり！素晴らしいですね✨",
    "毎日の積み重ねが愛を深めますね😊",
    "あなたに会える日々が宝物です💖",
    "今日も一緒に素敵な時間を過ごしましょう🌟",
    "継続的な愛情を感じています🥰",
    "毎日がより特別になっていきますね💫",
)

LoginTransition = Literal["first", "continued", "reset", "already_processed"]


@dataclass(frozen=True)
class LoginStatus:
    current_streak: int
    total_login_days: int
    last_login_date: date | None

    @classmethod
    def empty(cls) -> LoginStatus:
        return cls(current_streak=0, total_login_days=0, last_login_date=None)


@dataclass(frozen=True)
class LoginBonus:
    id: str
    day: int
    intimacy_bonus: int
    bonus_type: BonusType
    received_at: datetime
    description: str


@dataclass(frozen=True)
class LoginOutcome:
    status: LoginStatus
    bonus: LoginBonus | None
    transition: LoginTransition


@dataclass(frozen=True)
class ClaimResult:
    claimed: LoginBonus
    history: list[LoginBonus]
    intimacy_delta: int
    reason: str


def normalize_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(earlier: date | datetime, later: date | datetime) -> int:
    return (normalize_day(later) - normalize_day(earlier)).days


def daily_intimacy_for_day(day: int) -> int:
    if day <= 7:
        return 3 + (day - 1)
    if day <= 30:
        return 10 + (day - 8) // 2
    if day <= 100:
        return 20 + (day - 31) // 5
    if day <= 365:
        return 30 + (day - 101) // 10
    return 50 + (day - 366) // 30


def daily_message_for_day(day: int) -> str:
    return DAILY_MESSAGES[day % len(DAILY_MESSAGES)]


def reward_for_day(day: int) -> RewardTier:
    tier = REWARD_TABLE.get(day)
    if tier is not None:
        return tier
    return RewardTier(
        intimacy=daily_intimacy_for_day(day),
        bonus_type=BonusType.DAILY,
        description=daily_message_for_day(day),
    )


def build_bonus(day: int, generated_at: datetime) -> LoginBonus:
    tier = reward_for_day(day)
    return LoginBonus(
        id=uuid.uuid4().hex,
        day=day,
        intimacy_bonus=tier.intimacy,
        bonus_type=tier.bonus_type,
        received_at=generated_at,
        description=tier.description,
    )


def process_login(
    status: LoginStatus,
    today: date | datetime,
    *,
    generated_at: datetime | None = None,
) -> LoginOutcome:
    """Advance, reset or keep the daily streak for a login on ``today``.

    The result is a pure function of the inputs except for the bonus id and,
    when ``generated_at`` is omitted, its timestamp. A login on a day that was
    already processed returns the status untouched and no bonus, which is what
    keeps a second app launch on the same day from paying out twice.
    """
    day = normalize_day(today)
    stamp = generated_at or datetime.now()

    if status.last_login_date is None:
        first = LoginStatus(current_streak=1, total_login_days=1, last_login_date=day)
        bonus = LoginBonus(
            id=uuid.uuid4().hex,
            day=1,
            intimacy_bonus=FIRST_LOGIN_INTIMACY,
            bonus_type=BonusType.DAILY,
            received_at=stamp,
            description=FIRST_LOGIN_MESSAGE,
        )
        return LoginOutcome(status=first, bonus=bonus, transition="first")

    gap = days_between(status.last_login_date, day)
    if gap == 0:
        return LoginOutcome(status=status, bonus=None, transition="already_processed")

    transition: LoginTransition
    if gap == 1:
        streak = status.current_streak + 1
        transition = "continued"
    else:
        # Covers both a missed day and a clock that moved backwards.
        streak = 1
        transition = "reset"

    updated = replace(
        status,
        current_streak=streak,
        total_login_days=status.total_login_days + 1,
        last_login_date=day,
    )
    return LoginOutcome(status=updated, bonus=build_bonus(streak, stamp), transition=transition)


def claim_reason(day: int) -> str:
    return f"ログインボーナス({day}日目)"


def claim_bonus(pending: LoginBonus | None, history: Iterable[LoginBonus] = ()) -> ClaimResult | None:
    if pending is None:
        return None
    return ClaimResult(
        claimed=pending,
        history=[*history, pending],
        intimacy_delta=pending.intimacy_bonus,
        reason=claim_reason(pending.day),
    )


def total_intimacy_from_bonuses(history: Iterable[LoginBonus]) -> int:
    return sum(b.intimacy_bonus for b in history)


def bonus_count_by_type(history: Iterable[LoginBonus], bonus_type: BonusType) -> int:
    return sum(1 for b in history if b.bonus_type == bonus_type)


def last_bonus_date(history: Iterable[LoginBonus]) -> datetime | None:
    stamps = [b.received_at for b in history]
    if not stamps:
        return None
    return max(stamps)

from __future__ import annotations

import logging
import threading
import weakref
from dataclasses import dataclass, replace
from datetime import date, datetime

from oshi_bonus.db import Database, LoginStatusConflict
from oshi_bonus.login_streak import (
    BonusType,
    LoginBonus,
    LoginStatus,
    bonus_count_by_type,
    claim_bonus,
    last_bonus_date,
    process_login,
    total_intimacy_from_bonuses,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


class UserLockRegistry:
    """One lock per user id, created on first use and dropped once unreferenced."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary[int, threading.Lock] = weakref.WeakValueDictionary()

    def lock_for(self, user_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[user_id] = lock
            return lock


USER_LOCKS = UserLockRegistry()


@dataclass(frozen=True)
class ClaimOutcome:
    bonus: LoginBonus
    intimacy_delta: int
    reason: str
    intimacy_level: int


@dataclass(frozen=True)
class LoginResult:
    user_id: int
    status: LoginStatus
    bonus: LoginBonus | None
    transition: str
    pending: LoginBonus | None
    auto_claimed: ClaimOutcome | None = None


@dataclass(frozen=True)
class LoginSummary:
    current_streak: int
    total_login_days: int
    last_login_date: date | None
    pending: LoginBonus | None
    history: list[LoginBonus]
    total_intimacy_from_bonuses: int
    counts_by_type: dict[BonusType, int]
    last_bonus_at: datetime | None


def process_daily_login(
    db: Database,
    user_id: int,
    now: datetime,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    locks: UserLockRegistry | None = None,
) -> LoginResult:
    if not db.is_feature_enabled("login_bonus"):
        stored = db.get_login_status(user_id)
        return LoginResult(
            user_id=user_id,
            status=stored.status if stored else LoginStatus.empty(),
            bonus=None,
            transition="disabled",
            pending=db.get_pending_bonus(user_id),
        )

    registry = locks or USER_LOCKS
    with registry.lock_for(user_id):
        result = _login_with_retry(db, user_id, now, max(1, max_attempts))

    if result.bonus is not None and db.is_feature_enabled("auto_claim"):
        claimed = claim_login_bonus(db, user_id, now, locks=registry)
        if claimed is not None:
            return replace(result, pending=None, auto_claimed=claimed)
    return result


def _login_with_retry(db: Database, user_id: int, now: datetime, max_attempts: int) -> LoginResult:
    attempt = 0
    while True:
        attempt += 1
        stored = db.get_login_status(user_id)
        status = stored.status if stored else LoginStatus.empty()
        outcome = process_login(status, now, generated_at=now)

        if outcome.bonus is None:
            logger.debug("login already processed user_id=%s day=%s", user_id, status.last_login_date)
            return LoginResult(
                user_id=user_id,
                status=outcome.status,
                bonus=None,
                transition=outcome.transition,
                pending=db.get_pending_bonus(user_id),
            )

        try:
            db.commit_login(
                user_id,
                outcome.status,
                outcome.bonus,
                expected_version=stored.version if stored else None,
                updated_at=now,
            )
        except LoginStatusConflict:
            logger.warning("login status conflict user_id=%s attempt=%s/%s", user_id, attempt, max_attempts)
            if attempt >= max_attempts:
                raise
            continue

        logger.info(
            "login processed user_id=%s transition=%s streak=%s total=%s bonus=+%s (%s)",
            user_id,
            outcome.transition,
            outcome.status.current_streak,
            outcome.status.total_login_days,
            outcome.bonus.intimacy_bonus,
            outcome.bonus.bonus_type.value,
        )
        return LoginResult(
            user_id=user_id,
            status=outcome.status,
            bonus=outcome.bonus,
            transition=outcome.transition,
            pending=outcome.bonus,
        )


def claim_login_bonus(
    db: Database,
    user_id: int,
    now: datetime,
    *,
    locks: UserLockRegistry | None = None,
) -> ClaimOutcome | None:
    registry = locks or USER_LOCKS
    with registry.lock_for(user_id):
        result = claim_bonus(db.get_pending_bonus(user_id))
        if result is None:
            logger.debug("nothing to claim user_id=%s", user_id)
            return None
        level = db.claim_pending_bonus(user_id, result.claimed.id, result.reason, now)
        if level is None:
            logger.info("bonus already claimed user_id=%s bonus_id=%s", user_id, result.claimed.id)
            return None

    logger.info(
        "bonus claimed user_id=%s day=%s intimacy=+%s level=%s",
        user_id,
        result.claimed.day,
        result.intimacy_delta,
        level,
    )
    return ClaimOutcome(
        bonus=result.claimed,
        intimacy_delta=result.intimacy_delta,
        reason=result.reason,
        intimacy_level=level,
    )


def login_summary(db: Database, user_id: int, history_limit: int | None = None) -> LoginSummary:
    stored = db.get_login_status(user_id)
    status = stored.status if stored else LoginStatus.empty()
    full_history = db.list_bonus_history(user_id)
    shown = full_history[:history_limit] if history_limit else full_history
    return LoginSummary(
        current_streak=status.current_streak,
        total_login_days=status.total_login_days,
        last_login_date=status.last_login_date,
        pending=db.get_pending_bonus(user_id),
        history=shown,
        total_intimacy_from_bonuses=total_intimacy_from_bonuses(full_history),
        counts_by_type={t: bonus_count_by_type(full_history, t) for t in BonusType},
        last_bonus_at=last_bonus_date(full_history),
    )


def reset_login_progress(
    db: Database,
    user_id: int,
    *,
    actor: str = "user",
    now: datetime | None = None,
    locks: UserLockRegistry | None = None,
) -> None:
    registry = locks or USER_LOCKS
    with registry.lock_for(user_id):
        db.reset_login_bonus(user_id)
    db.add_admin_audit(
        actor=actor,
        action="login_bonus.reset",
        target=str(user_id),
        payload=None,
        created_at=now or datetime.now(),
    )
    logger.info("login bonus reset user_id=%s actor=%s", user_id, actor)

from __future__ import annotations

from oshi_bonus.db_models import Companion
from oshi_bonus.i18n import localize, t
from oshi_bonus.intimacy import describe_intimacy
from oshi_bonus.login_streak import BonusType, LoginBonus
from oshi_bonus.service import ClaimOutcome, LoginResult, LoginSummary

BONUS_TYPE_LABELS_EN = {
    BonusType.DAILY: "Daily",
    BonusType.WEEKLY: "Weekly",
    BonusType.SPECIAL: "Special",
    BonusType.MILESTONE: "Milestone",
}


def _bar(ratio: float, width: int = 20) -> str:
    filled = max(0, min(width, int(round(ratio * width))))
    return "█" * filled + "░" * (width - filled)


def bonus_type_label(bonus_type: BonusType, lang: str = "ja") -> str:
    return localize(lang, bonus_type.display_name, BONUS_TYPE_LABELS_EN[bonus_type])


def bonus_card(bonus: LoginBonus, lang: str = "ja") -> str:
    return "\n".join(
        [
            f"{bonus.bonus_type.icon} {bonus_type_label(bonus.bonus_type, lang)}",
            localize(lang, "{day}日目のログインボーナス", "Day {day} login bonus", day=bonus.day),
            localize(lang, "💕 親密度 +{n}", "💕 Intimacy +{n}", n=bonus.intimacy_bonus),
            "",
            bonus.description,
        ]
    )


def login_message(result: LoginResult, lang: str = "ja") -> str:
    status = result.status
    if result.transition == "disabled":
        return t("bonus_disabled", lang)

    if result.transition == "already_processed":
        lines = [
            localize(
                lang,
                "📅 今日はログイン済みです（連続{streak}日 / 累計{total}日）",
                "📅 Already logged in today (streak {streak} / total {total})",
                streak=status.current_streak,
                total=status.total_login_days,
            )
        ]
        if result.pending is not None:
            lines.extend(["", localize(lang, "🎁 未受け取りのボーナスがあります:", "🎁 You have an unclaimed bonus:")])
            lines.append(bonus_card(result.pending, lang))
        return "\n".join(lines)

    if result.transition == "first":
        header = localize(lang, "🌟 はじめてのログイン！", "🌟 Your first login!")
    elif result.transition == "continued":
        header = localize(lang, "🔥 連続{n}日目！", "🔥 Day {n} in a row!", n=status.current_streak)
    else:
        header = localize(
            lang,
            "💔 連続ログインが途切れました。1日目から再スタート！",
            "💔 Your streak was broken. Starting again from day 1!",
        )

    lines = [header, localize(lang, "累計ログイン: {n}日", "Total login days: {n}", n=status.total_login_days), ""]
    if result.auto_claimed is not None:
        lines.append(bonus_card(result.auto_claimed.bonus, lang))
        lines.append("")
        lines.append(
            localize(lang, "✅ 自動で受け取りました（親密度 {level}）", "✅ Claimed automatically (intimacy {level})", level=result.auto_claimed.intimacy_level)
        )
    elif result.bonus is not None:
        lines.append(bonus_card(result.bonus, lang))
    return "\n".join(lines)


def claim_message(outcome: ClaimOutcome, companion: Companion, lang: str = "ja") -> str:
    progress = describe_intimacy(outcome.intimacy_level)
    return "\n".join(
        [
            localize(lang, "✅ ボーナスを受け取りました！", "✅ Bonus claimed!"),
            localize(
                lang,
                "{name}との親密度 +{n} → {level}",
                "Intimacy with {name} +{n} → {level}",
                name=companion.name,
                n=outcome.intimacy_delta,
                level=outcome.intimacy_level,
            ),
            f"💞 {progress.stage.title}",
        ]
    )


def stats_message(summary: LoginSummary, lang: str = "ja") -> str:
    lines = [
        localize(lang, "📊 ログイン記録", "📊 Login record"),
        "",
        localize(lang, "🔥 連続ログイン: {n}日", "🔥 Current streak: {n} days", n=summary.current_streak),
        localize(lang, "📅 累計ログイン: {n}日", "📅 Total login days: {n}", n=summary.total_login_days),
        localize(lang, "💕 ボーナス合計: +{n}", "💕 Bonus intimacy total: +{n}", n=summary.total_intimacy_from_bonuses),
    ]
    for bonus_type in BonusType:
        count = summary.counts_by_type.get(bonus_type, 0)
        if count:
            lines.append(f"  {bonus_type.icon} {bonus_type_label(bonus_type, lang)}: {count}")
    if summary.last_bonus_at is not None:
        lines.append(
            localize(
                lang,
                "🕒 最後のボーナス: {at}",
                "🕒 Last bonus: {at}",
                at=summary.last_bonus_at.strftime("%Y-%m-%d %H:%M"),
            )
        )
    if summary.pending is not None:
        lines.extend(["", localize(lang, "🎁 未受け取り: {day}日目 +{n}", "🎁 Unclaimed: day {day} +{n}", day=summary.pending.day, n=summary.pending.intimacy_bonus)])
    return "\n".join(lines)


def history_message(history: list[LoginBonus], lang: str = "ja") -> str:
    if not history:
        return t("no_history", lang)
    lines = [localize(lang, "📜 ボーナス履歴:", "📜 Bonus history:")]
    for bonus in history:
        lines.append(
            f"- {bonus.received_at.strftime('%m/%d')} {bonus.bonus_type.icon} "
            + localize(lang, "{day}日目 +{n}", "day {day} +{n}", day=bonus.day, n=bonus.intimacy_bonus)
        )
    return "\n".join(lines)


def companion_message(companion: Companion, lang: str = "ja") -> str:
    progress = describe_intimacy(companion.intimacy_level)
    lines = [
        f"💞 {companion.name}",
        localize(lang, "関係: {title}", "Relationship: {title}", title=progress.stage.title),
        localize(lang, "親密度: {n}", "Intimacy: {n}", n=companion.intimacy_level),
        f"{_bar(progress.progress_ratio)} {progress.progress_ratio * 100:.1f}%",
    ]
    if progress.to_next_level > 0:
        lines.append(localize(lang, "次の段階まであと {n}", "{n} to the next stage", n=progress.to_next_level))
    else:
        lines.append(localize(lang, "最高の段階に到達しています✨", "Highest stage reached ✨"))
    return "\n".join(lines)

from __future__ import annotations

from typing import Final

SUPPORTED_LANGUAGES: Final[set[str]] = {"ja", "en"}

MESSAGES: Final[dict[str, dict[str, str]]] = {
    "ja": {
        "unknown_command": "不明なコマンドです。/help でコマンド一覧を確認してください。",
        "help": "コマンド一覧:\n/login 今日のログイン\n/bonus 今日のボーナス\n/claim ボーナスを受け取る\n/history 受け取り履歴\n/stats ログイン記録\n/companion パートナーとの親密度\n/name <名前> パートナーの名前\n/lang <ja|en> 言語\n/reminders on|off リマインダー\n/reset 記録のリセット",
        "bonus_disabled": "ログインボーナスは現在停止中です。",
        "nothing_to_claim": "受け取れるボーナスはありません。",
        "no_history": "まだ受け取ったボーナスはありません。",
        "lang_show": "現在の言語: {code}。対応言語: ja, en。\n/lang ja または /lang en で変更できます。",
        "lang_set": "言語を {code} に変更しました。",
        "lang_usage": "使い方: /lang <ja|en>",
        "name_usage": "使い方: /name <名前>",
        "name_set": "パートナーの名前を「{name}」にしました。",
        "reminders_usage": "使い方: /reminders on|off",
        "reminders_on": "リマインダーをオンにしました。",
        "reminders_off": "リマインダーをオフにしました。",
        "reset_confirm": "ログインボーナスの記録（連続日数・履歴）をすべて削除しますか？",
        "reset_done": "ログインボーナスの記録をリセットしました。",
        "cancelled": "キャンセルしました。",
        "invalid_request": "無効なリクエストです。",
        "error_retry": "混み合っています。少し待ってからもう一度お試しください。",
        "streak_reminder": "🔥 連続ログイン{days}日目が途切れそうです！/login で今日のボーナスを受け取りましょう。",
    },
    "en": {
        "unknown_command": "Unknown command. Use /help to see all commands.",
        "help": "Commands:\n/login today's login\n/bonus today's bonus\n/claim claim your bonus\n/history claimed bonuses\n/stats login record\n/companion intimacy with your companion\n/name <name> rename your companion\n/lang <ja|en> language\n/reminders on|off streak reminders\n/reset wipe your login record",
        "bonus_disabled": "Login bonuses are currently paused.",
        "nothing_to_claim": "Nothing to claim right now.",
        "no_history": "No bonuses claimed yet.",
        "lang_show": "Current language: {code}. Supported: ja, en.\nUse /lang ja or /lang en.",
        "lang_set": "Language set to {code}.",
        "lang_usage": "Usage: /lang <ja|en>",
        "name_usage": "Usage: /name <name>",
        "name_set": "Your companion is now called {name}.",
        "reminders_usage": "Usage: /reminders on|off",
        "reminders_on": "Reminders enabled.",
        "reminders_off": "Reminders disabled.",
        "reset_confirm": "Delete your whole login bonus record (streak and history)?",
        "reset_done": "Login bonus record reset.",
        "cancelled": "Cancelled.",
        "invalid_request": "Invalid request.",
        "error_retry": "Busy right now. Please try again in a moment.",
        "streak_reminder": "🔥 Day {days} of your login streak is at risk! Use /login to collect today's bonus.",
    },
}


def normalize_language_code(raw: str | None, default: str = "ja") -> str:
    value = (raw or "").strip().lower()
    if value.startswith("ja"):
        return "ja"
    if value.startswith("en"):
        return "en"
    return default if default in SUPPORTED_LANGUAGES else "ja"


def t(key: str, lang: str = "ja", **kwargs: object) -> str:
    code = normalize_language_code(lang, default="ja")
    template = MESSAGES.get(code, {}).get(key) or MESSAGES["ja"].get(key) or key
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError, ValueError):
        return template


def localize(lang: str, ja: str, en: str | None = None, **kwargs: object) -> str:
    code = normalize_language_code(lang, default="ja")
    template = en if code == "en" and en is not None else ja
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError, ValueError):
        return template

from pathlib import Path

import pytest

from oshi_bonus.config import load_settings


def test_load_settings_requires_token(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "")
    with pytest.raises(RuntimeError):
        load_settings()
    assert load_settings(require_token=False).telegram_bot_token == ""


def test_load_settings_reads_env_and_dotenv(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    # setenv first so values loaded from .env are rolled back too
    for key in ("TELEGRAM_BOT_TOKEN", "DATABASE_PATH", "TZ", "LOGIN_MAX_ATTEMPTS", "ADMIN_PORT", "ADMIN_PANEL_TOKEN"):
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    (tmp_path / ".env").write_text('TELEGRAM_BOT_TOKEN="abc"\nDATABASE_PATH=./db.sqlite\n# comment\nADMIN_PORT=9000\n')
    monkeypatch.setenv("LOGIN_MAX_ATTEMPTS", "0")

    settings = load_settings()
    assert settings.telegram_bot_token == "abc"
    assert settings.database_path == Path("./db.sqlite")
    assert settings.tz == "Asia/Tokyo"
    assert settings.login_max_attempts == 1
    assert settings.admin_port == 9000
    assert settings.admin_panel_token is None


def test_invalid_numbers_fall_back(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "abc")
    monkeypatch.setenv("LOGIN_MAX_ATTEMPTS", "many")
    monkeypatch.setenv("ADMIN_PORT", "")
    settings = load_settings()
    assert settings.login_max_attempts == 3
    assert settings.admin_port == 8080

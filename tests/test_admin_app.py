from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi.testclient import TestClient

from oshi_bonus.admin_app import build_admin_app
from oshi_bonus.db import Database
from oshi_bonus.db_constants import APP_CONFIG_DEFAULTS
from oshi_bonus.service import claim_login_bonus, process_daily_login

TOKEN = "secret"


def _dt(d: int, h: int = 9) -> datetime:
    return datetime(2024, 1, d, h, 0, tzinfo=ZoneInfo("Asia/Tokyo"))


def _client(tmp_path) -> tuple[Database, TestClient]:
    db = Database(tmp_path / "app.db")
    return db, TestClient(build_admin_app(db, TOKEN))


def test_requires_token(tmp_path) -> None:
    _, client = _client(tmp_path)
    assert client.get("/api/config").status_code == 401
    assert client.get("/api/config", headers={"x-admin-token": TOKEN}).status_code == 200
    assert client.get("/api/config", params={"token": TOKEN}).status_code == 200


def test_config_update_coerces_and_ignores_unknown(tmp_path) -> None:
    db, client = _client(tmp_path)
    resp = client.post(
        "/api/config",
        headers={"x-admin-token": TOKEN},
        json={"updates": {"feature.auto_claim_enabled": "on", "bonus.reminder_hour": "21", "nope": 1}},
    )
    body = resp.json()
    assert body["updated_count"] == 2
    assert body["config"]["feature.auto_claim_enabled"] is True
    assert db.get_int_config("bonus.reminder_hour") == 21
    assert set(body["config"]) == set(APP_CONFIG_DEFAULTS)

    audit = client.get("/api/audit", headers={"x-admin-token": TOKEN}).json()["rows"]
    assert {row["target"] for row in audit} == {"feature.auto_claim_enabled", "bonus.reminder_hour"}


def test_user_login_summary_and_reset(tmp_path) -> None:
    db, client = _client(tmp_path)
    process_daily_login(db, 7, _dt(1))
    claim_login_bonus(db, 7, _dt(1, 10))
    process_daily_login(db, 7, _dt(2))

    users = client.get("/api/users", headers={"x-admin-token": TOKEN}).json()["rows"]
    assert users == [
        {"user_id": 7, "current_streak": 2, "total_login_days": 2, "last_login_date": "2024-01-02", "version": 2}
    ]

    detail = client.get("/api/users/7/login", headers={"x-admin-token": TOKEN}).json()
    assert detail["pending"]["day"] == 2
    assert detail["pending"]["intimacy_bonus"] == 5
    assert [b["day"] for b in detail["history"]] == [1]
    assert detail["counts_by_type"]["daily"] == 1
    assert detail["total_intimacy_from_bonuses"] == 3

    resp = client.post("/api/users/7/login/reset", headers={"x-admin-token": TOKEN}, json={"actor": "ops"})
    assert resp.json() == {"ok": True}
    assert db.get_login_status(7) is None
    assert client.post("/api/users/7/login/reset", headers={"x-admin-token": TOKEN}, json={}).status_code == 404

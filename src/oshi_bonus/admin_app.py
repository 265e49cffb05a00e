from __future__ import annotations

from datetime import datetime
from typing import Any

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from oshi_bonus.config import load_settings
from oshi_bonus.db import Database
from oshi_bonus.db_constants import APP_CONFIG_DEFAULTS
from oshi_bonus.login_streak import LoginBonus
from oshi_bonus.logging_setup import setup_logging
from oshi_bonus.service import login_summary, reset_login_progress


def _coerce_value(key: str, value: Any) -> Any:
    default = APP_CONFIG_DEFAULTS.get(key)
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)
    if isinstance(default, int):
        try:
            return int(value)
        except (TypeError, ValueError):
            return default
    return value


def _require_auth(request: Request, token: str | None) -> None:
    if not token:
        return
    header = request.headers.get("x-admin-token")
    query = request.query_params.get("token")
    if header == token or query == token:
        return
    raise HTTPException(status_code=401, detail="Unauthorized")


def _bonus_payload(bonus: LoginBonus) -> dict[str, Any]:
    return {
        "id": bonus.id,
        "day": bonus.day,
        "intimacy_bonus": bonus.intimacy_bonus,
        "bonus_type": bonus.bonus_type.value,
        "received_at": bonus.received_at.isoformat(),
        "description": bonus.description,
    }


class ConfigUpdateRequest(BaseModel):
    updates: dict[str, Any] = Field(default_factory=dict)
    actor: str = "admin"
    note: str | None = None


class ResetRequest(BaseModel):
    actor: str = "admin"


def build_admin_app(db: Database, admin_token: str | None) -> FastAPI:
    app = FastAPI(title="Oshi Login Bonus Admin", version="1.0.0")

    @app.get("/api/config")
    async def api_config(request: Request) -> dict[str, Any]:
        _require_auth(request, admin_token)
        return {"config": db.get_app_config(), "defaults": APP_CONFIG_DEFAULTS}

    @app.post("/api/config")
    async def api_update_config(request: Request, payload: ConfigUpdateRequest) -> dict[str, Any]:
        _require_auth(request, admin_token)
        sanitized: dict[str, Any] = {}
        for key, value in payload.updates.items():
            if key not in APP_CONFIG_DEFAULTS:
                continue
            sanitized[key] = _coerce_value(key, value)
        cfg = db.set_app_config(sanitized, actor=payload.actor, note=payload.note)
        return {"ok": True, "updated_count": len(sanitized), "config": cfg}

    @app.get("/api/audit")
    async def api_audit(request: Request, limit: int = 100) -> dict[str, Any]:
        _require_auth(request, admin_token)
        return {"rows": db.list_admin_audit(limit=limit)}

    @app.get("/api/users")
    async def api_users(request: Request) -> dict[str, Any]:
        _require_auth(request, admin_token)
        rows = [
            {
                "user_id": stored.user_id,
                "current_streak": stored.status.current_streak,
                "total_login_days": stored.status.total_login_days,
                "last_login_date": stored.status.last_login_date.isoformat() if stored.status.last_login_date else None,
                "version": stored.version,
            }
            for stored in db.list_login_statuses()
        ]
        return {"rows": rows}

    @app.get("/api/users/{user_id}/login")
    async def api_user_login(user_id: int, request: Request, history_limit: int = 20) -> dict[str, Any]:
        _require_auth(request, admin_token)
        summary = login_summary(db, user_id, history_limit=max(1, history_limit))
        return {
            "user_id": user_id,
            "current_streak": summary.current_streak,
            "total_login_days": summary.total_login_days,
            "last_login_date": summary.last_login_date.isoformat() if summary.last_login_date else None,
            "pending": _bonus_payload(summary.pending) if summary.pending else None,
            "history": [_bonus_payload(b) for b in summary.history],
            "total_intimacy_from_bonuses": summary.total_intimacy_from_bonuses,
            "counts_by_type": {t.value: n for t, n in summary.counts_by_type.items()},
            "last_bonus_at": summary.last_bonus_at.isoformat() if summary.last_bonus_at else None,
        }

    @app.post("/api/users/{user_id}/login/reset")
    async def api_user_login_reset(user_id: int, request: Request, payload: ResetRequest) -> dict[str, Any]:
        _require_auth(request, admin_token)
        if db.get_login_status(user_id) is None and db.get_pending_bonus(user_id) is None:
            raise HTTPException(status_code=404, detail="No login record for user")
        reset_login_progress(db, user_id, actor=payload.actor, now=datetime.now())
        return {"ok": True}

    return app


def run_admin() -> None:
    setup_logging()
    settings = load_settings(require_token=False)
    db = Database(settings.database_path)
    app = build_admin_app(db, settings.admin_panel_token)
    uvicorn.run(app, host=settings.admin_host, port=settings.admin_port)

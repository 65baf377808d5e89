"""Blueprint mínimo para healthchecks sin dependencias remotas."""

from __future__ import annotations

import os

from flask import Blueprint, Response, current_app, jsonify

bp = Blueprint("health", __name__)


@bp.get("/ping")
def ping() -> Response:
    """Responde con un texto plano para los healthchecks externos."""
    return Response("pong", 200, {"Content-Type": "text/plain; charset=utf-8"})


@bp.get("/healthz")
def healthz():
    """Healthcheck rápido; no toca Google Sheets ni Box."""
    return jsonify(
        {
            "ok": True,
            "records": "memory" if current_app.config.get("FAKE_SHEETS") else "google-sheets",
        }
    )


@bp.get("/api/version")
def version():
    return (
        jsonify(
            version=current_app.config.get("APP_VERSION", "dev"),
            commit=current_app.config.get("GIT_SHA", "local"),
            env=os.getenv("APP_ENV") or os.getenv("FLASK_ENV") or "production",
        ),
        200,
    )

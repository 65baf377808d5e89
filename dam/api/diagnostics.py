"""Endpoints de diagnóstico usados por la página /setup."""

from __future__ import annotations

import os

from flask import Blueprint, current_app, jsonify

from dam.auth import login_required
from dam.config import REQUIRED_ENV_VARS
from dam.exceptions import DamError, PermissionDenied
from dam.services.asset_service import get_repository, get_storage

bp = Blueprint("diagnostics", __name__, url_prefix="/api/test")

_PLACEHOLDER_MARKERS = ("your_", "_here")


def _looks_like_placeholder(value: str) -> bool:
    return any(marker in value for marker in _PLACEHOLDER_MARKERS)


@bp.get("/env")
@login_required
def env():
    missing = [name for name in REQUIRED_ENV_VARS if not os.getenv(name)]
    placeholders = [
        name
        for name in REQUIRED_ENV_VARS
        if os.getenv(name) and _looks_like_placeholder(os.getenv(name, ""))
    ]
    ok = not missing and not placeholders
    issues = missing + [f"{name} has placeholder value" for name in placeholders]
    return jsonify(
        {
            "success": ok,
            "missingVars": missing,
            "hasPlaceholders": placeholders,
            "fakeSheets": bool(current_app.config.get("FAKE_SHEETS")),
            "boxAuth": "jwt"
            if os.getenv("BOX_PUBLIC_KEY_ID") and os.getenv("BOX_PRIVATE_KEY")
            else "client_credentials",
            "message": "All environment variables are properly configured"
            if ok
            else f"Issues found: {', '.join(issues)}",
        }
    )


@bp.get("/box")
@login_required
def box():
    try:
        message = get_storage().check_connection()
    except PermissionDenied as exc:
        return jsonify(
            {
                "success": False,
                "warning": True,
                "error": "Box app not yet authorized by admin. Please contact your Box "
                "administrator to authorize the app in the Admin Console.",
                "detail": str(exc),
            }
        )
    except DamError as exc:
        return jsonify({"success": False, "error": str(exc)})
    return jsonify({"success": True, "message": message})


@bp.get("/googlesheets")
@login_required
def googlesheets():
    try:
        message = get_repository().check_connection()
    except DamError as exc:
        return jsonify({"success": False, "error": str(exc)})
    return jsonify({"success": True, "message": message})

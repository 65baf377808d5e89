"""Fábrica de la app Flask para la biblioteca de medios de eventos."""

from __future__ import annotations

import os
from pathlib import Path
from typing import cast

from flask import Flask
from flask_limiter import Limiter

from .auth import install_access_policy
from .auth.oidc import init_oidc
from .cli import register_commands
from .config import load_config
from .errors import register_error_handlers
from .extensions import csrf, limiter
from .logging_cfg import init_request_id, setup_logging
from .metrics import cleanup_multiprocess_directory
from .registry import API_BLUEPRINTS, register_blueprints
from .security_headers import set_security_headers
from .services.asset_service import init_services


def create_app(config_name: str | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(load_config(config_name))
    app.secret_key = app.config["SECRET_KEY"]

    setup_logging(app)

    if app.config.get("SHEETS_LOCK_DIR"):
        Path(app.config["SHEETS_LOCK_DIR"]).mkdir(parents=True, exist_ok=True)

    if os.getenv("PROMETHEUS_MULTIPROC_CLEAN_ON_START", "0").lower() in (
        "1",
        "true",
        "yes",
    ):
        cleanup_multiprocess_directory()

    # El request id debe existir antes de que la política registre redirecciones.
    init_request_id(app)
    install_access_policy(app)
    set_security_headers(app)
    register_error_handlers(app)

    csrf.init_app(app)  # respeta WTF_CSRF_ENABLED=False en tests

    app.limiter = cast(Limiter, limiter)
    limiter.init_app(app)
    if app.config.get("RATELIMIT_ENABLED") is False:
        setattr(app.limiter, "enabled", False)

    init_oidc(app)
    init_services(app)

    blueprints = register_blueprints(app)

    # La API JSON queda fuera del CSRF global
    for name in API_BLUEPRINTS:
        blueprint = blueprints.get(name)
        if blueprint is not None:
            csrf.exempt(blueprint)

    health_bp = blueprints.get("health")
    if health_bp is not None:
        limiter.exempt(health_bp)

    @app.context_processor
    def inject_globals():
        return {
            "DEV_MODE": bool(app.config.get("AUTH_DISABLED") or app.config.get("FAKE_SHEETS")),
        }

    register_commands(app)

    secret_key = app.config.get("SECRET_KEY", "")
    if not secret_key or len(secret_key) < 32:
        app.logger.warning(
            "SECRET_KEY is shorter than 32 characters. Provide a secure 32+ byte key for production.",
        )

    return app


__all__ = ["create_app"]

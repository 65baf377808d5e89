"""Centraliza el registro de blueprints de la aplicación."""

from __future__ import annotations

from flask import Blueprint, Flask

from dam.api.assets import bp as assets_bp
from dam.api.box import bp as box_bp
from dam.api.diagnostics import bp as diagnostics_bp
from dam.api.health import bp as health_bp
from dam.api.metrics import bp as metrics_bp
from dam.web import bp_web

# Blueprints JSON: sin CSRF (se autentican por sesión y responden 401).
API_BLUEPRINTS = ("assets_api", "box_api", "diagnostics", "health", "metrics")


def register_blueprints(app: Flask) -> dict[str, Blueprint]:
    """Registra todos los blueprints conocidos y devuelve un índice por nombre."""

    entries: list[tuple[Blueprint, dict[str, object]]] = [
        (bp_web, {}),
        (assets_bp, {}),
        (box_bp, {}),
        (diagnostics_bp, {}),
        (health_bp, {}),
        (metrics_bp, {}),
    ]

    registry: dict[str, Blueprint] = {}
    for blueprint, options in entries:
        if blueprint.name not in app.blueprints:
            app.register_blueprint(blueprint, **options)
        registry[blueprint.name] = blueprint

    return registry

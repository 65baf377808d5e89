"""Configuración centralizada de logging para la aplicación."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from flask import Flask, g, has_request_context, request


class RequestIdFilter(logging.Filter):
    """Adjunta el `request_id` actual (si existe) a cada registro."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - acceso contextual
        if has_request_context():
            record.request_id = getattr(g, "request_id", "-")
        else:
            record.request_id = "-"
        return True


class JsonFormatter(logging.Formatter):
    """Render log records as structured JSON."""

    EXTRA_KEYS = ("event", "operation", "asset_id", "user", "path", "status")

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if hasattr(record, "request_id"):
            payload["request_id"] = getattr(record, "request_id")
        for key in self.EXTRA_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


TEXT_FORMAT = "%(asctime)s %(levelname)s %(request_id)s %(name)s: %(message)s"


def setup_logging(app: Flask) -> None:
    """Inicializa el logger raíz (JSON o texto) con el filtro de request id."""

    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.addFilter(RequestIdFilter())
    if str(app.config.get("LOG_FORMAT", "json")).lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    app.logger.handlers.clear()
    app.logger.propagate = True
    app.logger.setLevel(level)


def _ensure_request_id() -> None:
    if getattr(g, "request_id", None):
        return
    g.request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex


def _attach_request_id(response):
    rid = getattr(g, "request_id", None)
    if rid:
        response.headers["X-Request-Id"] = rid
    return response


def init_request_id(app: Flask) -> None:
    """Garantiza un request id por petición y lo devuelve en la respuesta."""

    app.before_request(_ensure_request_id)
    app.after_request(_attach_request_id)

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, TypeVar, cast
from urllib.parse import urlencode

from flask import Flask, abort, current_app, redirect, request, session

from .policy import SIGN_IN_PATH, Redirect, RootPolicy, authorize

F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)

# Rutas que nunca pasan por la política de páginas; la API responde 401 por su cuenta.
UNGUARDED_PREFIXES: tuple[str, ...] = ("/api/", "/static/", "/metrics", "/healthz", "/ping", "/favicon.ico")


def current_user() -> dict[str, Any] | None:
    user = session.get("user")
    return user if user else None


def is_authenticated() -> bool:
    if current_app.config.get("AUTH_DISABLED"):
        return True
    return current_user() is not None


def install_access_policy(app: Flask) -> None:
    """Evalúa la política de acceso una vez por petición, antes de renderizar."""

    root_policy = RootPolicy.parse(app.config.get("ROOT_REDIRECT_POLICY", "gallery"))

    @app.before_request
    def _enforce_access_policy():
        path = request.path
        if path.startswith(UNGUARDED_PREFIXES):
            return None

        decision = authorize(path, is_authenticated(), root_policy)
        if isinstance(decision, Redirect):
            target = decision.target
            if target == SIGN_IN_PATH and path not in ("/", SIGN_IN_PATH):
                target = f"{target}?{urlencode({'next': path})}"
            logger.debug("Access policy redirect %s -> %s", path, target)
            return redirect(target)
        return None


def login_required(view: F) -> F:
    """Para endpoints JSON: 401 en vez de redirección cuando no hay sesión."""

    @wraps(view)
    def wrapped(*args: Any, **kwargs: Any):
        if is_authenticated():
            return view(*args, **kwargs)
        abort(401, description="Authentication required")

    return cast(F, wrapped)

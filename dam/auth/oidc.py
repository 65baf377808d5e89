import logging
from typing import Any, Optional

from flask import Blueprint, abort, current_app, jsonify, redirect, render_template, request, session

from dam.extensions import oauth

from .guards import current_user, is_authenticated
from .policy import LANDING_PATH

bp = Blueprint("auth", __name__, url_prefix="/auth")

logger = logging.getLogger(__name__)

REQUIRED_SETTINGS = (
    "OIDC_ISSUER",
    "OIDC_CLIENT_ID",
    "OIDC_CLIENT_SECRET",
    "OIDC_CALLBACK_URL",
)


def is_oidc_enabled(app=None) -> bool:
    app = app or current_app
    return all(app.config.get(name) for name in REQUIRED_SETTINGS)


def init_oidc(app) -> None:
    if bp.name not in app.blueprints:
        app.register_blueprint(bp)
    app.add_url_rule("/me", "me", me)

    if not is_oidc_enabled(app):
        app.logger.info("OIDC deshabilitado: faltan variables OIDC_*")
        return

    oauth.init_app(app)
    issuer = str(app.config["OIDC_ISSUER"]).rstrip("/")
    app.oidc = oauth.register(
        "onelogin",
        client_id=app.config["OIDC_CLIENT_ID"],
        client_secret=app.config["OIDC_CLIENT_SECRET"],
        client_kwargs={"scope": "openid profile email"},
        server_metadata_url=f"{issuer}/.well-known/openid-configuration",
    )


def _profile(userinfo: Optional[dict[str, Any]]) -> dict[str, Any]:
    info = userinfo or {}
    return {
        "id": info.get("sub"),
        "name": info.get("name") or info.get("preferred_username"),
        "email": info.get("email"),
        "image": info.get("picture"),
    }


@bp.get("/signin")
def signin():
    return render_template(
        "signin.html",
        oidc_enabled=is_oidc_enabled(),
        next_path=request.args.get("next", LANDING_PATH),
    )


@bp.get("/login")
def login():
    if not is_oidc_enabled():
        return {"auth": "disabled"}, 200

    client = getattr(current_app, "oidc", None)
    if client is None:
        return {"error": "auth_not_configured"}, 503

    session["next"] = request.args.get("next") or LANDING_PATH
    return client.authorize_redirect(redirect_uri=current_app.config["OIDC_CALLBACK_URL"])


@bp.get("/callback")
def callback():
    if not is_oidc_enabled():
        session.clear()
        return {"auth": "disabled"}, 200

    client = getattr(current_app, "oidc", None)
    if client is None:
        return {"error": "auth_not_configured"}, 503

    token = client.authorize_access_token()
    user = _profile(token.get("userinfo"))
    session["user"] = user
    logger.info("Inicio de sesión", extra={"user": user.get("email")})
    target = session.pop("next", None) or LANDING_PATH
    if not str(target).startswith("/") or str(target).startswith("//"):
        target = LANDING_PATH
    return redirect(target)


@bp.get("/logout")
def logout():
    session.clear()
    return redirect("/auth/signin")


def me():
    user = current_user()
    if user is None:
        if is_authenticated():
            return jsonify({"id": None, "name": "dev", "email": None, "image": None})
        abort(401, description="Authentication required")
    return jsonify(user)

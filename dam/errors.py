from __future__ import annotations

import logging

from flask import g, jsonify, request

from .exceptions import DamError, PermissionDenied, RemoteUnavailable

logger = logging.getLogger(__name__)


def _json_error(status: int, message: str | None = None, **extra):
    body = {
        "code": status,
        "message": message or "error",
        "path": request.path,
        "request_id": getattr(g, "request_id", None),
    }
    body.update(extra)
    return jsonify(error=body), status


def register_error_handlers(app):
    @app.errorhandler(400)
    def _400(e):  # pragma: no cover - message comes from Werkzeug
        return _json_error(400, getattr(e, "description", "Bad Request"))

    @app.errorhandler(401)
    def _401(e):
        return _json_error(401, getattr(e, "description", "Unauthorized"))

    @app.errorhandler(403)
    def _403(e):
        return _json_error(403, getattr(e, "description", "Forbidden"))

    @app.errorhandler(404)
    def _404(e):
        return _json_error(404, getattr(e, "description", "Not Found"))

    @app.errorhandler(405)
    def _405(e):
        return _json_error(405, getattr(e, "description", "Method Not Allowed"))

    @app.errorhandler(413)
    def _413(e):
        return _json_error(413, getattr(e, "description", "Payload Too Large"))

    @app.errorhandler(DamError)
    def _domain(e: DamError):
        if isinstance(e, PermissionDenied):
            logger.warning("Permission denied: %s", e, extra={"operation": e.operation})
            return _json_error(e.status_code, str(e), kind="permission_denied")
        if isinstance(e, RemoteUnavailable):
            logger.error("Remote failure: %s", e, extra={"operation": e.operation})
            return _json_error(e.status_code, str(e), kind="remote_unavailable")
        return _json_error(e.status_code, str(e))

    @app.errorhandler(Exception)
    def _500(e):
        # Werkzeug HTTP exceptions keep their own status.
        code = getattr(e, "code", None)
        if isinstance(code, int) and 400 <= code < 600 and hasattr(e, "description"):
            return _json_error(code, e.description)
        try:
            app.logger.exception("Unhandled exception", exc_info=e)
        except Exception:
            logging.exception("Unhandled exception (fallback)")
        return _json_error(500, "Internal Server Error")

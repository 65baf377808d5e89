"""Security helpers for Flask responses."""

from __future__ import annotations

from flask import Flask


def content_security_policy(media_hosts: list[str]) -> str:
    hosts = " ".join(media_hosts)
    return (
        "default-src 'self'; "
        f"img-src 'self' data: {hosts}; "
        f"media-src 'self' {hosts}; "
        "frame-ancestors 'none'"
    )


def set_security_headers(app: Flask) -> None:
    """Register an ``after_request`` hook that injects security headers.

    Gallery thumbnails and videos load straight from the storage provider, so
    its hosts are allowed for images and media.
    """

    csp = content_security_policy(list(app.config.get("ALLOWED_MEDIA_HOSTS", [])))

    @app.after_request  # type: ignore[misc]
    def _headers(resp):
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        resp.headers.setdefault(
            "Permissions-Policy", "geolocation=(), microphone=(), camera=()"
        )
        resp.headers.setdefault("Content-Security-Policy", csp)
        return resp

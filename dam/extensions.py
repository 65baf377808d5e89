"""Extensiones compartidas para autenticación y utilidades globales."""

from __future__ import annotations

from authlib.integrations.flask_client import OAuth
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_wtf import CSRFProtect

csrf = CSRFProtect()
oauth = OAuth()

# Rate limiting (lazy init, se inicializa en create_app)
limiter = Limiter(key_func=get_remote_address, headers_enabled=True, default_limits=[])

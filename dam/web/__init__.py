from .routes import bp_web

__all__ = ["bp_web"]

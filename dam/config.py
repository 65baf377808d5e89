import os


# Variables que /api/test/env exige para una instalación completa.
REQUIRED_ENV_VARS = (
    "BOX_CLIENT_ID",
    "BOX_CLIENT_SECRET",
    "BOX_ENTERPRISE_ID",
    "GOOGLE_SHEETS_ID",
    "GOOGLE_SERVICE_ACCOUNT_EMAIL",
    "GOOGLE_PRIVATE_KEY",
)


def _bool_env(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _list_env(name: str) -> list[str]:
    raw = os.getenv(name, "")
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


class Config:
    APP_NAME = "Event Media Library"
    TESTING = False
    DEBUG = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
        self.LOG_FORMAT = os.getenv("LOG_FORMAT", "json")

        # Hoja de cálculo usada como almacén de registros
        self.GOOGLE_SHEETS_ID = os.getenv("GOOGLE_SHEETS_ID", "")
        self.GOOGLE_SERVICE_ACCOUNT_EMAIL = os.getenv("GOOGLE_SERVICE_ACCOUNT_EMAIL", "")
        self.GOOGLE_PRIVATE_KEY = os.getenv("GOOGLE_PRIVATE_KEY", "")
        self.SHEET_NAME = os.getenv("SHEET_NAME", "Assets")
        self.FAKE_SHEETS = _bool_env("FAKE_SHEETS", False)
        self.SHEETS_LOCK_DIR = os.getenv("SHEETS_LOCK_DIR") or None
        self.SHEETS_LOCK_TIMEOUT = _int_env("SHEETS_LOCK_TIMEOUT", 30)

        # Box
        self.BOX_CLIENT_ID = os.getenv("BOX_CLIENT_ID", "")
        self.BOX_CLIENT_SECRET = os.getenv("BOX_CLIENT_SECRET", "")
        self.BOX_ENTERPRISE_ID = os.getenv("BOX_ENTERPRISE_ID", "")
        # Con clave pública y privada se usa JWT; sin ellas, client credentials
        self.BOX_PUBLIC_KEY_ID = os.getenv("BOX_PUBLIC_KEY_ID", "")
        self.BOX_PRIVATE_KEY = os.getenv("BOX_PRIVATE_KEY", "")
        self.BOX_PASSPHRASE = os.getenv("BOX_PASSPHRASE", "")
        self.BOX_FOLDER_ID = os.getenv("BOX_FOLDER_ID", "0")
        self.BOX_TIMEOUT = _int_env("BOX_TIMEOUT", 30)

        # OIDC (OneLogin u otro proveedor compatible)
        self.OIDC_ISSUER = os.getenv("OIDC_ISSUER", "")
        self.OIDC_CLIENT_ID = os.getenv("OIDC_CLIENT_ID", "")
        self.OIDC_CLIENT_SECRET = os.getenv("OIDC_CLIENT_SECRET", "")
        self.OIDC_CALLBACK_URL = os.getenv("OIDC_CALLBACK_URL", "")
        self.AUTH_DISABLED = _bool_env("AUTH_DISABLED", False)
        # "gallery": "/" siempre va a la galería; "session": depende de la sesión
        self.ROOT_REDIRECT_POLICY = os.getenv("ROOT_REDIRECT_POLICY", "gallery")

        self.MAX_UPLOAD_MB = _int_env("MAX_UPLOAD_MB", 500)
        self.MAX_CONTENT_LENGTH = self.MAX_UPLOAD_MB * 1024 * 1024
        self.ALLOWED_MEDIA_HOSTS = _list_env("ALLOWED_MEDIA_HOSTS") or [
            "https://*.box.com",
            "https://*.boxcloud.com",
        ]

        self.RATELIMIT_ENABLED = _bool_env("RATELIMIT_ENABLED", True)
        self.RATELIMIT_STORAGE_URI = os.getenv(
            "RATELIMIT_STORAGE_URI", os.getenv("REDIS_URL", "memory://")
        )
        self.RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "120 per minute")
        self.SESSION_COOKIE_HTTPONLY = True
        self.SESSION_COOKIE_SECURE = True
        self.SESSION_COOKIE_SAMESITE = "Lax"
        self.APP_VERSION = os.getenv("APP_VERSION", "dev")
        self.GIT_SHA = os.getenv("GIT_SHA", "local")
        self.DEBUG = _bool_env("DEBUG", self.DEBUG)


class DevelopmentConfig(Config):
    DEBUG = True

    def __init__(self) -> None:
        super().__init__()
        self.DEBUG = True
        self.LOG_FORMAT = os.getenv("LOG_FORMAT", "text")
        self.SESSION_COOKIE_SECURE = False
        if not self.GOOGLE_SHEETS_ID:
            self.FAKE_SHEETS = True


class ProductionConfig(Config):
    DEBUG = False

    def __init__(self) -> None:
        super().__init__()
        self.DEBUG = False


class TestingConfig(Config):
    TESTING = True
    DEBUG = False

    def __init__(self) -> None:
        super().__init__()
        self.DEBUG = False
        self.FAKE_SHEETS = True
        self.WTF_CSRF_ENABLED = False
        self.RATELIMIT_ENABLED = False
        self.SESSION_COOKIE_SECURE = False
        self.LOG_FORMAT = "text"
        self.SHEETS_LOCK_DIR = None


def load_config(env: str | None = None) -> Config:
    env_name = (env or os.getenv("APP_ENV") or os.getenv("FLASK_ENV") or "production").lower()

    if env_name in {"test", "testing"}:
        cfg: Config = TestingConfig()
    elif env_name in {"prod", "production"}:
        cfg = ProductionConfig()
    elif env_name in {"dev", "development"}:
        cfg = DevelopmentConfig()
    else:
        cfg = Config()

    if (
        env_name in {"prod", "production"}
        and not cfg.FAKE_SHEETS
        and not cfg.GOOGLE_SHEETS_ID
        and os.getenv("CI", "").lower() not in {"true", "1"}
    ):
        raise RuntimeError("GOOGLE_SHEETS_ID no definido en producción (usa FAKE_SHEETS=1 para pruebas)")

    return cfg

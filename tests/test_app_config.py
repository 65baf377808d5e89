import pytest

from dam.config import DevelopmentConfig, TestingConfig, load_config


def test_testing_config_usa_hoja_en_memoria():
    cfg = load_config("testing")
    assert isinstance(cfg, TestingConfig)
    assert cfg.FAKE_SHEETS is True
    assert cfg.WTF_CSRF_ENABLED is False
    assert cfg.RATELIMIT_ENABLED is False


def test_development_sin_hoja_activa_fake(monkeypatch):
    monkeypatch.delenv("GOOGLE_SHEETS_ID", raising=False)
    cfg = load_config("development")
    assert isinstance(cfg, DevelopmentConfig)
    assert cfg.FAKE_SHEETS is True
    assert cfg.LOG_FORMAT == "text"


def test_produccion_sin_hoja_falla(monkeypatch):
    for name in ("GOOGLE_SHEETS_ID", "FAKE_SHEETS", "CI"):
        monkeypatch.delenv(name, raising=False)
    with pytest.raises(RuntimeError):
        load_config("production")


def test_produccion_con_fake_sheets(monkeypatch):
    monkeypatch.delenv("GOOGLE_SHEETS_ID", raising=False)
    monkeypatch.setenv("FAKE_SHEETS", "1")
    assert load_config("production").FAKE_SHEETS is True


def test_variables_de_entorno(monkeypatch):
    monkeypatch.setenv("MAX_UPLOAD_MB", "10")
    monkeypatch.setenv("ALLOWED_MEDIA_HOSTS", "https://a.example, https://b.example")
    monkeypatch.setenv("BOX_TIMEOUT", "abc")
    cfg = load_config("testing")
    assert cfg.MAX_CONTENT_LENGTH == 10 * 1024 * 1024
    assert cfg.ALLOWED_MEDIA_HOSTS == ["https://a.example", "https://b.example"]
    assert cfg.BOX_TIMEOUT == 30


def test_create_app_aplica_config(app):
    assert app.config["TESTING"] is True
    assert app.config["FAKE_SHEETS"] is True
    assert app.config["SHEET_NAME"] == "Assets"
    assert {"init-sheet", "check-env", "list-assets", "delete-asset"} <= set(app.cli.commands)


def test_create_app_no_crea_directorios_locales(app):
    assert "DATA_DIR" not in app.config
    assert app.config["SHEETS_LOCK_DIR"] is None


def test_config_de_box_jwt(monkeypatch):
    monkeypatch.setenv("BOX_PUBLIC_KEY_ID", "kid-1")
    monkeypatch.setenv("BOX_PRIVATE_KEY", "pem")
    monkeypatch.delenv("BOX_PASSPHRASE", raising=False)
    cfg = load_config("testing")
    assert (cfg.BOX_PUBLIC_KEY_ID, cfg.BOX_PRIVATE_KEY, cfg.BOX_PASSPHRASE) == ("kid-1", "pem", "")

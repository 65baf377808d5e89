import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dam import create_app
from dam.exceptions import PermissionDenied, RemoteUnavailable
from dam.extensions import limiter
from dam.services.asset_service import REPOSITORY_KEY, STORAGE_KEY
from dam.storage import UploadedFile


TEST_USER = {
    "id": "00u1",
    "name": "Ana Pérez",
    "email": "ana@example.com",
    "image": None,
}


class FakeStorage:
    """Sustituto de BoxStorage que guarda los archivos en un dict."""

    def __init__(self):
        self.files: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_upload_for: set[str] = set()
        self.fail_delete = False
        self.connection_error: Exception | None = None
        self._counter = 0

    def upload_asset(self, data, original_filename, content_type):
        if original_filename in self.fail_upload_for:
            raise RemoteUnavailable("upload file to Box", "boom")
        self._counter += 1
        file_id = f"box-{self._counter}"
        self.files[file_id] = data
        return UploadedFile(
            file_id=file_id,
            url=f"https://app.box.com/shared/static/{file_id}",
            name=f"{self._counter}-{original_filename}",
        )

    def delete(self, file_id):
        if self.fail_delete:
            raise PermissionDenied("delete file from Box", "forbidden")
        self.deleted.append(file_id)
        self.files.pop(file_id, None)

    def download_url(self, file_id):
        return f"https://app.box.com/shared/static/{file_id}?dl=1"

    def check_connection(self):
        if self.connection_error is not None:
            raise self.connection_error
        return "Connected to Box successfully. Service Account: svc (ID: 1)"


@pytest.fixture()
def app(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("SECRET_KEY", "test")
    for name in ("AUTH_DISABLED", "ROOT_REDIRECT_POLICY", "OIDC_ISSUER", "SHEETS_LOCK_DIR"):
        monkeypatch.delenv(name, raising=False)

    flask_app = create_app()
    flask_app.config.update(TESTING=True, WTF_CSRF_ENABLED=False)
    flask_app.extensions[STORAGE_KEY] = FakeStorage()

    try:
        yield flask_app
    finally:
        try:
            limiter.reset()
        except Exception:
            pass


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def auth_client(client):
    with client.session_transaction() as sess:
        sess["user"] = dict(TEST_USER)
    return client


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()


@pytest.fixture()
def repository(app):
    return app.extensions[REPOSITORY_KEY]


@pytest.fixture()
def sheet(repository):
    return repository.source


@pytest.fixture()
def storage(app):
    return app.extensions[STORAGE_KEY]

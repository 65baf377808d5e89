from flask import Blueprint

from dam.exceptions import PermissionDenied, RemoteUnavailable


def _register_crash_bp(app):
    bp = Blueprint("_test_crash", __name__)

    @bp.get("/_test/crash")
    def crash():
        raise RuntimeError("boom")

    @bp.get("/_test/remote")
    def remote():
        raise RemoteUnavailable("get assets", "socket timeout")

    @bp.get("/_test/denied")
    def denied():
        raise PermissionDenied("upload file to Box", "403 Forbidden")

    app.register_blueprint(bp)


def test_404_is_json_and_has_request_id(client):
    res = client.get("/no-existe", headers={"X-Request-Id": "abc123"})
    assert res.status_code == 404
    assert res.is_json
    data = res.get_json()
    assert data["error"]["code"] == 404
    assert data["error"]["path"] == "/no-existe"
    assert data["error"]["request_id"] == "abc123"
    assert res.headers.get("X-Request-Id") == "abc123"


def test_405_is_json(auth_client):
    res = auth_client.put("/api/stats")
    assert res.status_code == 405
    assert res.is_json


def test_request_id_se_genera_si_falta(client):
    res = client.get("/ping")
    assert len(res.headers["X-Request-Id"]) == 32


def test_500_is_json_with_request_id(client, app):
    _register_crash_bp(app)
    res = client.get("/_test/crash", headers={"X-Request-Id": "req-500"})
    assert res.status_code == 500
    assert res.is_json
    data = res.get_json()
    assert data["error"]["code"] == 500
    assert data["error"]["message"] == "Internal Server Error"
    assert data["error"]["request_id"] == "req-500"
    assert res.headers.get("X-Request-Id") == "req-500"


def test_errores_remotos_son_502_y_403(client, app):
    _register_crash_bp(app)

    res = client.get("/_test/remote")
    assert res.status_code == 502
    assert res.get_json()["error"]["kind"] == "remote_unavailable"
    assert res.get_json()["error"]["message"] == "Failed to get assets: socket timeout"

    res = client.get("/_test/denied")
    assert res.status_code == 403
    assert res.get_json()["error"]["kind"] == "permission_denied"

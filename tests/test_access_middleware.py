from dam import create_app


def test_pagina_protegida_sin_sesion_redirige_con_next(client):
    res = client.get("/dashboard")
    assert res.status_code == 302
    assert res.headers["Location"].endswith("/auth/signin?next=%2Fdashboard")


def test_raiz_redirige_a_galeria(client):
    res = client.get("/")
    assert res.status_code == 302
    assert res.headers["Location"].endswith("/gallery")


def test_raiz_con_politica_por_sesion(monkeypatch, client):
    monkeypatch.setenv("ROOT_REDIRECT_POLICY", "session")
    app = create_app()
    res = app.test_client().get("/")
    assert res.status_code == 302
    assert res.headers["Location"].endswith("/auth/signin")


def test_signin_con_sesion_va_a_galeria(auth_client):
    res = auth_client.get("/auth/signin")
    assert res.status_code == 302
    assert res.headers["Location"].endswith("/gallery")


def test_signin_sin_sesion_se_muestra(client):
    res = client.get("/auth/signin")
    assert res.status_code == 200
    assert b"Sign in" in res.data


def test_paginas_con_sesion_se_renderizan(auth_client):
    for path in ("/gallery", "/dashboard", "/upload", "/setup"):
        res = auth_client.get(path)
        assert res.status_code == 200, path
        assert "Ana Pérez" in res.get_data(as_text=True)


def test_api_no_pasa_por_la_politica_de_paginas(client):
    res = client.get("/api/assets")
    assert res.status_code == 401
    assert res.is_json


def test_auth_disabled_abre_todo(monkeypatch, client):
    monkeypatch.setenv("AUTH_DISABLED", "1")
    app = create_app()
    app.extensions["dam.storage"] = object()
    c = app.test_client()
    assert c.get("/gallery").status_code == 200
    assert c.get("/api/stats").status_code == 200
    assert c.get("/me").get_json()["name"] == "dev"


def test_cabeceras_de_seguridad(client):
    res = client.get("/ping")
    assert res.headers["X-Frame-Options"] == "DENY"
    assert "https://*.box.com" in res.headers["Content-Security-Policy"]

import io
import json

import pytest


METADATA = {
    "event": "Gala 2024",
    "date": "2024-05-01",
    "location": "Monterrey",
    "photographer": "Luis",
    "tags": "stage, crowd",
    "description": "Entrada",
}


def _upload(client, names=("foto.jpg",), metadata=None, content_type="image/jpeg"):
    data = {
        "files": [(io.BytesIO(b"binary-" + n.encode()), n, content_type) for n in names],
        "metadata": json.dumps(METADATA if metadata is None else metadata),
    }
    return client.post("/api/assets", data=data, content_type="multipart/form-data")


def test_api_requiere_sesion(client):
    for method, path in (
        ("get", "/api/assets"),
        ("get", "/api/assets/search"),
        ("get", "/api/assets/x"),
        ("delete", "/api/assets/x"),
        ("get", "/api/stats"),
        ("get", "/api/box-download/1"),
    ):
        res = getattr(client, method)(path)
        assert res.status_code == 401, path
        assert res.get_json()["error"]["code"] == 401


def test_subida_crea_registro_y_archivo(auth_client, storage):
    res = _upload(auth_client)
    assert res.status_code == 201
    [result] = res.get_json()["results"]
    assert result["ok"] is True
    asset = result["asset"]
    assert asset["id"].startswith("asset-")
    assert asset["originalFilename"] == "foto.jpg"
    assert asset["filename"] == "1-foto.jpg"
    assert asset["boxFileId"] == "box-1"
    assert asset["publicUrl"] == asset["url"]
    assert asset["fileType"] == "image"
    assert asset["mimeType"] == "image/jpeg"
    assert asset["size"] == len(b"binary-foto.jpg")
    assert asset["tags"] == ["stage", "crowd"]
    assert storage.files["box-1"] == b"binary-foto.jpg"

    fetched = auth_client.get(f"/api/assets/{asset['id']}")
    assert fetched.status_code == 200
    assert fetched.get_json() == asset


def test_subida_de_video_marca_tipo(auth_client):
    res = _upload(auth_client, names=("clip.mp4",), content_type="video/mp4")
    assert res.get_json()["results"][0]["asset"]["fileType"] == "video"


def test_subida_multiple_marca_cada_archivo(auth_client, storage):
    storage.fail_upload_for = {"mala.jpg"}
    res = _upload(auth_client, names=("buena.jpg", "mala.jpg"))
    assert res.status_code == 207
    results = {r["filename"]: r for r in res.get_json()["results"]}
    assert results["buena.jpg"]["ok"] is True
    assert results["mala.jpg"]["ok"] is False
    assert "Failed to upload file to Box" in results["mala.jpg"]["error"]

    listed = auth_client.get("/api/assets").get_json()["records"]
    assert [a["originalFilename"] for a in listed] == ["buena.jpg"]


def test_subida_sin_archivos_es_400(auth_client):
    res = auth_client.post(
        "/api/assets",
        data={"metadata": json.dumps(METADATA)},
        content_type="multipart/form-data",
    )
    assert res.status_code == 400
    assert "files" in res.get_json()["error"]["message"]


@pytest.mark.parametrize(
    "metadata, message",
    [
        ({**METADATA, "event": "  "}, "'event' is required"),
        ({k: v for k, v in METADATA.items() if k != "photographer"}, "'photographer' is required"),
        ({**METADATA, "width": "ancho"}, "'width' must be a number"),
        (["no", "es", "objeto"], "'metadata' must be a JSON object"),
    ],
)
def test_metadata_invalida_no_sube_nada(auth_client, storage, metadata, message):
    res = _upload(auth_client, metadata=metadata)
    assert res.status_code == 400
    assert res.get_json()["error"]["message"] == message
    assert storage.files == {}


def test_metadata_que_no_es_json(auth_client):
    res = auth_client.post(
        "/api/assets",
        data={"files": [(io.BytesIO(b"x"), "a.jpg")], "metadata": "{no-json"},
        content_type="multipart/form-data",
    )
    assert res.status_code == 400
    assert res.get_json()["error"]["message"] == "'metadata' must be valid JSON"


def test_listado_paginado(auth_client):
    _upload(auth_client, names=("a.jpg", "b.jpg", "c.jpg"))

    first = auth_client.get("/api/assets?pageSize=2").get_json()
    assert len(first["records"]) == 2
    assert first["offset"] == "2"

    second = auth_client.get(f"/api/assets?pageSize=2&offset={first['offset']}").get_json()
    assert len(second["records"]) == 1
    assert "offset" not in second


@pytest.mark.parametrize("value", ["0", "-3", "muchos", "1.5"])
def test_page_size_invalido(auth_client, value):
    res = auth_client.get(f"/api/assets?pageSize={value}")
    assert res.status_code == 400


def test_busqueda(auth_client):
    _upload(auth_client, names=("a.jpg",))
    _upload(auth_client, names=("b.jpg",), metadata={**METADATA, "event": "Feria", "tags": ["expo"]})

    res = auth_client.get("/api/assets/search?event=gala")
    payload = res.get_json()
    assert payload["count"] == 1
    assert payload["records"][0]["originalFilename"] == "a.jpg"

    by_tag = auth_client.get("/api/assets/search?tag=exp").get_json()
    assert [r["event"] for r in by_tag["records"]] == ["Feria"]

    everything = auth_client.get("/api/assets/search").get_json()
    assert everything["count"] == 2


def test_get_inexistente_es_404(auth_client):
    res = auth_client.get("/api/assets/asset-404")
    assert res.status_code == 404
    assert res.get_json()["error"]["message"] == "Asset with ID asset-404 not found"


def test_borrado_quita_registro_y_archivo(auth_client, storage):
    asset = _upload(auth_client).get_json()["results"][0]["asset"]

    res = auth_client.delete(f"/api/assets/{asset['id']}")
    assert res.status_code == 200
    assert res.get_json() == {"id": asset["id"], "storageDeleted": True}
    assert storage.deleted == ["box-1"]
    assert auth_client.get(f"/api/assets/{asset['id']}").status_code == 404

    again = auth_client.delete(f"/api/assets/{asset['id']}")
    assert again.status_code == 404


def test_borrado_con_fallo_en_box_informa(auth_client, storage):
    asset = _upload(auth_client).get_json()["results"][0]["asset"]
    storage.fail_delete = True

    res = auth_client.delete(f"/api/assets/{asset['id']}")
    payload = res.get_json()
    assert res.status_code == 200
    assert payload["storageDeleted"] is False
    assert "forbidden" in payload["storageError"]
    assert auth_client.get("/api/assets").get_json()["records"] == []


def test_stats(auth_client):
    _upload(auth_client, names=("a.jpg", "b.jpg"))
    _upload(auth_client, names=("c.jpg",), metadata={**METADATA, "photographer": "Mara", "event": "Feria"})

    stats = auth_client.get("/api/stats").get_json()
    assert stats["totalAssets"] == 3
    assert stats["totalEvents"] == 2
    assert stats["topPhotographers"][0] == {"name": "Luis", "count": 2}
    assert len(stats["recentUploads"]) == 3


def test_box_download(auth_client):
    res = auth_client.get("/api/box-download/42")
    assert res.get_json() == {"url": "https://app.box.com/shared/static/42?dl=1"}

    missing = auth_client.get("/api/box-download/")
    assert missing.status_code == 400
    assert missing.get_json()["error"]["message"] == "File ID is required"


def test_galeria_muestra_assets_y_filtra(auth_client):
    _upload(auth_client, names=("a.jpg",))
    _upload(auth_client, names=("b.jpg",), metadata={**METADATA, "event": "Feria"})

    page = auth_client.get("/gallery").get_data(as_text=True)
    assert "Gala 2024" in page and "Feria" in page

    filtered = auth_client.get("/gallery?event=feria").get_data(as_text=True)
    assert "Feria" in filtered
    assert "Gala 2024 ·" not in filtered

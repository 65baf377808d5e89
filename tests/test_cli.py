import json

from dam.config import REQUIRED_ENV_VARS
from dam.records import AssetDraft


def _seed(repository, count=3):
    created = []
    for n in range(count):
        created.append(
            repository.create(
                AssetDraft(
                    filename=f"{n}.jpg",
                    original_filename=f"{n}.jpg",
                    url=f"https://app.box.com/file/{n}",
                    file_type="image",
                    mime_type="image/jpeg",
                    size=1,
                    event=f"Evento {n}",
                    date="2024-01-01",
                    photographer="Luis",
                    box_file_id=f"box-{n}",
                )
            )
        )
    return created


def test_init_sheet_crea_cabecera(runner, sheet):
    res = runner.invoke(args=["init-sheet"])
    assert res.exit_code == 0
    assert "Connected to Google Sheets successfully" in res.output
    assert sheet.tab("Assets")[0][0] == "ID"


def test_check_env(runner, monkeypatch):
    for name in REQUIRED_ENV_VARS:
        monkeypatch.setenv(name, "x")
    assert runner.invoke(args=["check-env"]).exit_code == 0

    monkeypatch.delenv("BOX_ENTERPRISE_ID")
    res = runner.invoke(args=["check-env"])
    assert res.exit_code == 1
    assert "BOX_ENTERPRISE_ID" in res.output


def test_list_assets(runner, repository):
    _seed(repository)
    res = runner.invoke(args=["list-assets", "--page-size", "2"])
    assert res.exit_code == 0
    assert res.output.count("Evento") == 2
    assert "next offset: 2" in res.output

    res = runner.invoke(args=["list-assets", "--as-json"])
    payload = json.loads(res.output)
    assert len(payload["records"]) == 3


def test_delete_asset(runner, repository, storage):
    created = _seed(repository, count=2)
    target = created[0]

    res = runner.invoke(args=["delete-asset", target.id, "--yes"])
    assert res.exit_code == 0
    assert repository.get(target.id) is None
    assert repository.get(created[1].id) is not None
    assert storage.deleted == ["box-0"]


def test_delete_asset_inexistente(runner):
    res = runner.invoke(args=["delete-asset", "asset-404", "--yes"])
    assert res.exit_code == 1
    assert "Asset with ID asset-404 not found" in res.output

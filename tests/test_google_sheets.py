from dam.records import AssetDraft, SheetAssetRepository
from dam.records.codec import HEADER_ROW
from dam.sheets.google import GoogleSheetSource, normalize_private_key


class FakeSpreadsheet:
    """Imita los métodos de gspread.Spreadsheet que usa el backend."""

    def __init__(self, rows=None):
        self.rows = rows if rows is not None else [list(HEADER_ROW)]
        self.batches = []
        self.appended = []

    def fetch_sheet_metadata(self):
        return {
            "properties": {"title": "Media"},
            "sheets": [
                {"properties": {"title": "Otra", "sheetId": 0}},
                {"properties": {"title": "Assets", "sheetId": 812}},
            ],
        }

    def values_get(self, a1_range):
        if a1_range.endswith("A1:R1"):
            return {"values": self.rows[:1]}
        if a1_range.endswith("A2:A"):
            return {"values": [[r[0]] for r in self.rows[1:]]}
        return {"values": self.rows[1:]}

    def values_append(self, a1_range, params=None, body=None):
        self.appended.append((a1_range, params, body))
        self.rows.extend(body["values"])

    def values_update(self, a1_range, params=None, body=None):
        self.rows[:1] = body["values"]

    def batch_update(self, body):
        self.batches.append(body)
        return {"replies": [{}]}


def _source(spreadsheet):
    source = GoogleSheetSource("sheet-id", "svc@example.iam.gserviceaccount.com", "key")
    source._spreadsheet = spreadsheet
    return source


def test_normalize_private_key():
    assert normalize_private_key("-----BEGIN-----\\nabc\\n-----END-----") == (
        "-----BEGIN-----\nabc\n-----END-----"
    )
    assert normalize_private_key("a\nb") == "a\nb"


def test_sheet_id_y_titulo():
    source = _source(FakeSpreadsheet())
    assert source.title() == "Media"
    assert source.sheet_id("Assets") == 812
    assert source.sheet_id("Nada") is None


def test_append_usa_raw():
    spreadsheet = FakeSpreadsheet()
    repo = SheetAssetRepository(_source(spreadsheet), id_generator=lambda: "asset-1")
    repo.create(
        AssetDraft(
            filename="a.jpg",
            original_filename="a.jpg",
            url="https://app.box.com/file/1",
            file_type="image",
            mime_type="image/jpeg",
            size=1,
            event="Gala",
            date="2024-01-01",
            photographer="Luis",
        )
    )
    a1_range, params, body = spreadsheet.appended[0]
    assert a1_range == "Assets!A:R"
    assert params == {"valueInputOption": "RAW"}
    assert body["values"][0][0] == "asset-1"


def test_delete_envia_indices_de_grilla():
    rows = [list(HEADER_ROW), ["asset-a"], ["asset-b"], ["asset-c"]]
    spreadsheet = FakeSpreadsheet(rows)
    repo = SheetAssetRepository(_source(spreadsheet))

    repo.delete("asset-c")

    request = spreadsheet.batches[-1]["requests"][0]["deleteDimension"]["range"]
    assert request == {"sheetId": 812, "dimension": "ROWS", "startIndex": 3, "endIndex": 4}

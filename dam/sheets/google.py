"""Google Sheets backend built on gspread and a service account."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import gspread
from google.oauth2.service_account import Credentials

from .base import Row, TabularSource

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


def normalize_private_key(raw: str) -> str:
    """Las claves suelen llegar por variable de entorno con ``\\n`` literales."""

    if "\\n" in raw:
        return raw.replace("\\n", "\n")
    return raw


def build_credentials(client_email: str, private_key: str) -> Credentials:
    info = {
        "type": "service_account",
        "client_email": client_email,
        "private_key": normalize_private_key(private_key),
        "token_uri": TOKEN_URI,
    }
    return Credentials.from_service_account_info(info, scopes=SCOPES)


class GoogleSheetSource(TabularSource):
    def __init__(self, spreadsheet_id: str, client_email: str, private_key: str) -> None:
        self.resource_id = spreadsheet_id
        self._client_email = client_email
        self._private_key = private_key
        self._spreadsheet: gspread.Spreadsheet | None = None

    @property
    def spreadsheet(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            client = gspread.authorize(build_credentials(self._client_email, self._private_key))
            self._spreadsheet = client.open_by_key(self.resource_id)
        return self._spreadsheet

    def title(self) -> str:
        return self.spreadsheet.fetch_sheet_metadata()["properties"]["title"]

    def sheet_id(self, title: str) -> int | None:
        metadata = self.spreadsheet.fetch_sheet_metadata()
        for sheet in metadata.get("sheets", []):
            props = sheet.get("properties", {})
            if props.get("title") == title:
                return int(props.get("sheetId", 0))
        return None

    def create_sheet(self, title: str) -> int:
        logger.info("Creando pestaña %s en %s", title, self.resource_id)
        response = self.spreadsheet.batch_update(
            {"requests": [{"addSheet": {"properties": {"title": title}}}]}
        )
        replies = response.get("replies") or [{}]
        return int(replies[0].get("addSheet", {}).get("properties", {}).get("sheetId", 0))

    def get_rows(self, a1_range: str) -> list[Row]:
        response = self.spreadsheet.values_get(a1_range)
        return [list(row) for row in response.get("values", [])]

    def append_row(self, a1_range: str, row: Sequence[Any]) -> None:
        self.spreadsheet.values_append(
            a1_range,
            params={"valueInputOption": "RAW"},
            body={"values": [list(row)]},
        )

    def update_header(self, a1_range: str, row: Sequence[Any]) -> None:
        self.spreadsheet.values_update(
            a1_range,
            params={"valueInputOption": "RAW"},
            body={"values": [list(row)]},
        )

    def delete_row_range(self, sheet_id: int, start_index: int, end_index: int) -> None:
        self.spreadsheet.batch_update(
            {
                "requests": [
                    {
                        "deleteDimension": {
                            "range": {
                                "sheetId": sheet_id,
                                "dimension": "ROWS",
                                "startIndex": start_index,
                                "endIndex": end_index,
                            }
                        }
                    }
                ]
            }
        )

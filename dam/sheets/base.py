"""Interfaz mínima que el almacén necesita de una hoja de cálculo remota."""

from __future__ import annotations

import abc
import re
from typing import Any, Sequence

Row = list[Any]

_RANGE_RE = re.compile(r"^(?:(?P<sheet>[^!]+)!)?(?P<start_col>[A-Z]+)(?P<start_row>\d*)(?::(?P<end_col>[A-Z]+)(?P<end_row>\d*))?$")


def parse_range(a1: str) -> tuple[str | None, int, int, int | None, int | None]:
    """Parse ``Sheet!A2:R`` into (sheet, first_col, first_row, last_col, last_row).

    Columns are 1-based; missing row bounds are returned as 1 / None.
    """

    match = _RANGE_RE.match(a1)
    if not match:
        raise ValueError(f"Unsupported range: {a1}")
    sheet = match.group("sheet")
    if sheet and sheet.startswith("'") and sheet.endswith("'"):
        sheet = sheet[1:-1]
    start_col = column_index(match.group("start_col"))
    start_row = int(match.group("start_row") or 1)
    end_col_raw = match.group("end_col")
    end_col = column_index(end_col_raw) if end_col_raw else start_col
    end_row_raw = match.group("end_row")
    if end_col_raw is None:
        end_row = start_row if match.group("start_row") else None
    else:
        end_row = int(end_row_raw) if end_row_raw else None
    return sheet, start_col, start_row, end_col, end_row


def column_index(letters: str) -> int:
    """``A`` -> 1, ``Z`` -> 26, ``AA`` -> 27."""

    value = 0
    for char in letters:
        value = value * 26 + (ord(char) - 64)
    return value


class TabularSource(abc.ABC):
    """Colaborador tabular identificado por un recurso fijo (spreadsheet id).

    Todas las operaciones de fila usan notación A1; ``delete_row_range`` usa
    índices de grilla base 0 con fin exclusivo, como la API de Google Sheets.
    """

    resource_id: str

    @abc.abstractmethod
    def title(self) -> str:
        """Nombre legible del documento (diagnóstico de conexión)."""

    @abc.abstractmethod
    def sheet_id(self, title: str) -> int | None:
        """Id numérico de la pestaña, o None si no existe."""

    @abc.abstractmethod
    def create_sheet(self, title: str) -> int:
        ...

    @abc.abstractmethod
    def get_rows(self, a1_range: str) -> list[Row]:
        ...

    @abc.abstractmethod
    def append_row(self, a1_range: str, row: Sequence[Any]) -> None:
        ...

    @abc.abstractmethod
    def update_header(self, a1_range: str, row: Sequence[Any]) -> None:
        ...

    @abc.abstractmethod
    def delete_row_range(self, sheet_id: int, start_index: int, end_index: int) -> None:
        ...

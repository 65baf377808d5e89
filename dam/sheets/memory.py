"""In-process spreadsheet used by tests and ``FAKE_SHEETS=1`` development mode."""

from __future__ import annotations

import threading
from typing import Any, Sequence

from .base import Row, TabularSource, parse_range


def _as_cell(value: Any) -> str:
    # RAW writes come back from Sheets as formatted strings.
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


class MemorySheetSource(TabularSource):
    def __init__(self, resource_id: str = "memory", title: str = "In-memory spreadsheet") -> None:
        self.resource_id = resource_id
        self._title = title
        self._tabs: dict[str, list[Row]] = {}
        self._ids: dict[str, int] = {}
        self._guard = threading.RLock()
        self.calls: list[tuple[str, Any]] = []

    # -- helpers for tests -------------------------------------------------
    def tab(self, title: str) -> list[Row]:
        return self._tabs.setdefault(title, [])

    def seed(self, title: str, rows: Sequence[Sequence[Any]]) -> None:
        with self._guard:
            if title not in self._ids:
                self.create_sheet(title)
            self._tabs[title].extend([_as_cell(v) for v in row] for row in rows)

    # -- TabularSource -----------------------------------------------------
    def title(self) -> str:
        return self._title

    def sheet_id(self, title: str) -> int | None:
        return self._ids.get(title)

    def create_sheet(self, title: str) -> int:
        with self._guard:
            self.calls.append(("create_sheet", title))
            if title not in self._ids:
                self._ids[title] = len(self._ids)
                self._tabs.setdefault(title, [])
            return self._ids[title]

    def _tab_for(self, a1_range: str) -> tuple[list[Row], int, int, int, int | None]:
        sheet, first_col, first_row, last_col, last_row = parse_range(a1_range)
        if sheet is None or sheet not in self._ids:
            raise KeyError(f"Unable to parse range: {a1_range}")
        return self._tabs[sheet], first_col, first_row, last_col or first_col, last_row

    def get_rows(self, a1_range: str) -> list[Row]:
        with self._guard:
            self.calls.append(("get_rows", a1_range))
            rows, first_col, first_row, last_col, last_row = self._tab_for(a1_range)
            stop = len(rows) if last_row is None else min(last_row, len(rows))
            result: list[Row] = []
            for row in rows[first_row - 1 : stop]:
                cells = list(row[first_col - 1 : last_col])
                while cells and cells[-1] == "":
                    cells.pop()
                result.append(cells)
            # Sheets drops trailing empty rows from value ranges.
            while result and not result[-1]:
                result.pop()
            return result

    def append_row(self, a1_range: str, row: Sequence[Any]) -> None:
        with self._guard:
            self.calls.append(("append_row", a1_range))
            rows, *_ = self._tab_for(a1_range)
            rows.append([_as_cell(v) for v in row])

    def update_header(self, a1_range: str, row: Sequence[Any]) -> None:
        with self._guard:
            self.calls.append(("update_header", a1_range))
            rows, *_ = self._tab_for(a1_range)
            header = [_as_cell(v) for v in row]
            if rows:
                rows[0] = header
            else:
                rows.append(header)

    def delete_row_range(self, sheet_id: int, start_index: int, end_index: int) -> None:
        with self._guard:
            self.calls.append(("delete_row_range", (sheet_id, start_index, end_index)))
            for title, known_id in self._ids.items():
                if known_id == sheet_id:
                    del self._tabs[title][start_index:end_index]
                    return
            raise KeyError(f"No grid with id: {sheet_id}")

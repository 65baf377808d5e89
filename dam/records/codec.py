"""Conversion between :class:`Asset` objects and spreadsheet rows.

The sheet has carried two layouts over its lifetime. Rows written before the
Box integration have no ``Box File ID`` column, so every column from ``URL``
onwards sits one position to the left. Nothing in the row records which layout
it uses; the only signal is that the fourth cell of a legacy row holds the URL
itself. :func:`decode` keeps that heuristic exactly so historical rows stay
readable, and reports which layout it used.

Decoding never raises: malformed cells fall back to defaults.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date
from typing import Any, Sequence

from .models import Asset

HEADER_ROW: list[str] = [
    "ID",
    "Filename",
    "Original Filename",
    "Box File ID",
    "URL",
    "File Type",
    "MIME Type",
    "Size",
    "Width",
    "Height",
    "Duration",
    "Uploaded At",
    "Event",
    "Date",
    "Location",
    "Photographer",
    "Tags",
    "Description",
]

FIRST_COLUMN = "A"
LAST_COLUMN = "R"
UPLOADED_AT_FORMAT = "%Y-%m-%d"

_BOX_FILE_ID_COLUMN = 3
_TAG_SEPARATOR = ", "


class RowSchema(enum.Enum):
    LEGACY = "legacy"
    CURRENT = "current"


_CURRENT_COLUMNS: dict[str, int] = {
    name: index
    for index, name in enumerate(
        (
            "id",
            "filename",
            "original_filename",
            "box_file_id",
            "url",
            "file_type",
            "mime_type",
            "size",
            "width",
            "height",
            "duration",
            "uploaded_at",
            "event",
            "date",
            "location",
            "photographer",
            "tags",
            "description",
        )
    )
}

# Legacy rows lack the Box File ID column: the URL sits where the id would be.
_LEGACY_COLUMNS: dict[str, int] = {
    name: (index if index < _BOX_FILE_ID_COLUMN else index - 1)
    for name, index in _CURRENT_COLUMNS.items()
    if name != "box_file_id"
}

_COLUMNS = {RowSchema.CURRENT: _CURRENT_COLUMNS, RowSchema.LEGACY: _LEGACY_COLUMNS}


@dataclass(frozen=True)
class DecodedRow:
    schema: RowSchema
    asset: Asset


def today_string(today: date | None = None) -> str:
    return (today or date.today()).strftime(UPLOADED_AT_FORMAT)


def _optional(value: Any) -> Any:
    return "" if value is None else value


def encode(asset: Asset) -> list[Any]:
    """Return the row for *asset* in current-schema column order."""

    return [
        asset.id,
        asset.filename,
        asset.original_filename,
        _optional(asset.box_file_id),
        asset.url,
        asset.file_type,
        asset.mime_type,
        asset.size,
        _optional(asset.width),
        _optional(asset.height),
        _optional(asset.duration),
        asset.uploaded_at,
        asset.event,
        asset.date,
        _optional(asset.location),
        asset.photographer,
        _TAG_SEPARATOR.join(asset.tags) if asset.tags else "",
        _optional(asset.description),
    ]


def _cell(row: Sequence[Any], index: int) -> str:
    if index >= len(row) or row[index] is None:
        return ""
    return str(row[index])


def _parse_int(raw: str) -> int | None:
    text = raw.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        return None


def _parse_float(raw: str) -> float | None:
    text = raw.strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _split_tags(raw: str) -> list[str]:
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def detect_schema(row: Sequence[Any]) -> RowSchema:
    candidate = _cell(row, _BOX_FILE_ID_COLUMN)
    if candidate and candidate.startswith(("http", "https")):
        return RowSchema.LEGACY
    return RowSchema.CURRENT


def decode(row: Sequence[Any], position: int, today: date | None = None) -> DecodedRow:
    """Decode a sheet row.

    Args:
        row: Cell values as returned by the sheet (may be shorter than 18).
        position: 1-based sheet row number, used for the placeholder id.
        today: Date used when the row has no ``Uploaded At`` value.
    """

    schema = detect_schema(row)
    columns = _COLUMNS[schema]

    def get(name: str) -> str:
        return _cell(row, columns[name])

    filename = get("filename")
    url = get("url")
    box_file_id = get("box_file_id") if schema is RowSchema.CURRENT else ""

    asset = Asset(
        id=get("id") or f"row-{position}",
        filename=filename,
        original_filename=get("original_filename") or filename,
        box_file_id=box_file_id or None,
        url=url,
        public_url=url,
        file_type=get("file_type") or "image",
        mime_type=get("mime_type") or "image/png",
        size=_parse_int(get("size")) or 0,
        width=_parse_int(get("width")),
        height=_parse_int(get("height")),
        duration=_parse_float(get("duration")),
        uploaded_at=get("uploaded_at") or today_string(today),
        event=get("event"),
        date=get("date"),
        location=get("location") or None,
        photographer=get("photographer"),
        tags=_split_tags(get("tags")),
        description=get("description") or None,
    )
    return DecodedRow(schema=schema, asset=asset)


def decode_asset(row: Sequence[Any], position: int, today: date | None = None) -> Asset:
    return decode(row, position, today).asset


def sheet_range(sheet_name: str, start: str = FIRST_COLUMN, end: str = LAST_COLUMN) -> str:
    """Build an A1 range such as ``Assets!A2:R``."""

    return f"{sheet_name}!{start}:{end}"

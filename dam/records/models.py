"""Value objects for asset records."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Literal

FileType = Literal["image", "video"]
FILE_TYPES: tuple[str, ...] = ("image", "video")

_JSON_KEYS = {
    "original_filename": "originalFilename",
    "box_file_id": "boxFileId",
    "public_url": "publicUrl",
    "file_type": "fileType",
    "mime_type": "mimeType",
    "uploaded_at": "uploadedAt",
}


@dataclass
class AssetDraft:
    """Metadata for an asset that has not been stored yet (no id, no upload date)."""

    filename: str
    original_filename: str
    url: str
    file_type: str
    mime_type: str
    size: int
    event: str
    date: str
    photographer: str
    box_file_id: str | None = None
    public_url: str | None = None
    width: int | None = None
    height: int | None = None
    duration: float | None = None
    location: str | None = None
    tags: list[str] = field(default_factory=list)
    description: str | None = None


@dataclass
class Asset:
    id: str
    filename: str
    original_filename: str
    url: str
    public_url: str
    file_type: str
    mime_type: str
    size: int
    uploaded_at: str
    event: str
    date: str
    photographer: str
    box_file_id: str | None = None
    width: int | None = None
    height: int | None = None
    duration: float | None = None
    location: str | None = None
    tags: list[str] = field(default_factory=list)
    description: str | None = None

    @classmethod
    def from_draft(cls, draft: AssetDraft, *, id: str, uploaded_at: str) -> "Asset":
        values = {f.name: getattr(draft, f.name) for f in fields(draft)}
        values["public_url"] = draft.public_url or draft.url
        values["tags"] = list(draft.tags)
        return cls(id=id, uploaded_at=uploaded_at, **values)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for f in fields(self):
            payload[_JSON_KEYS.get(f.name, f.name)] = getattr(self, f.name)
        payload["tags"] = list(self.tags)
        return payload

    def copy(self, **changes: Any) -> "Asset":
        return replace(self, **changes)


@dataclass
class SearchCriteria:
    event: str | None = None
    photographer: str | None = None
    location: str | None = None
    tags: list[str] | None = None
    date_from: str | None = None
    date_to: str | None = None

    def is_empty(self) -> bool:
        return not any(
            (self.event, self.photographer, self.location, self.tags, self.date_from, self.date_to)
        )


@dataclass
class AssetPage:
    records: list[Asset]
    next_offset: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"records": [a.to_dict() for a in self.records]}
        if self.next_offset is not None:
            payload["offset"] = self.next_offset
        return payload


@dataclass
class PhotographerCount:
    name: str
    count: int


@dataclass
class Stats:
    total_assets: int
    total_events: int
    top_photographers: list[PhotographerCount]
    recent_uploads: list[Asset]

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalAssets": self.total_assets,
            "totalEvents": self.total_events,
            "topPhotographers": [
                {"name": p.name, "count": p.count} for p in self.top_photographers
            ],
            "recentUploads": [a.to_dict() for a in self.recent_uploads],
        }

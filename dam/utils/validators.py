"""Validadores reutilizables para la metadata de assets."""

from __future__ import annotations

from typing import Any

from dam.exceptions import ValidationError
from dam.records.models import FILE_TYPES, AssetDraft


def clean_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def require_text(payload: dict[str, Any], key: str) -> str:
    value = clean_text(payload.get(key))
    if not value:
        raise ValidationError(f"'{key}' is required")
    return value


def parse_tags(raw: Any) -> list[str]:
    """Acepta lista o cadena separada por comas; recorta y descarta vacíos."""

    if raw is None:
        return []
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    return [str(item).strip() for item in items if str(item).strip()]


def optional_number(payload: dict[str, Any], key: str, kind: type) -> Any:
    raw = payload.get(key)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    try:
        return kind(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"'{key}' must be a number") from None


def validate_draft(draft: AssetDraft) -> AssetDraft:
    for key in ("event", "date", "photographer"):
        if not clean_text(getattr(draft, key)):
            raise ValidationError(f"'{key}' is required")
    if draft.file_type not in FILE_TYPES:
        raise ValidationError(f"'fileType' must be one of {', '.join(FILE_TYPES)}")
    if not isinstance(draft.size, int) or draft.size < 0:
        raise ValidationError("'size' must be a non-negative integer")
    for key in ("width", "height"):
        value = getattr(draft, key)
        if value is not None and value <= 0:
            raise ValidationError(f"'{key}' must be positive")
    if draft.duration is not None and draft.duration < 0:
        raise ValidationError("'duration' must be zero or positive")
    return draft

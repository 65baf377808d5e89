"""Servicios que combinan el almacén de registros con el storage de archivos."""

from __future__ import annotations

import logging
import mimetypes
from typing import Any, Iterable

from flask import Flask, current_app
from werkzeug.datastructures import FileStorage

from dam.exceptions import AssetNotFound, DamError
from dam.records import AssetDraft, AssetRepository, SheetAssetRepository
from dam.sheets.base import TabularSource
from dam.sheets.memory import MemorySheetSource
from dam.storage import BoxStorage
from dam.utils.lock import ResourceLock
from dam.utils.validators import (
    clean_text,
    optional_number,
    parse_tags,
    require_text,
    validate_draft,
)

logger = logging.getLogger(__name__)

REPOSITORY_KEY = "dam.repository"
STORAGE_KEY = "dam.storage"


def build_source(app: Flask) -> TabularSource:
    if app.config.get("FAKE_SHEETS"):
        app.logger.info("FAKE_SHEETS activo: registros en memoria")
        return MemorySheetSource(resource_id="fake-sheet")

    from dam.sheets.google import GoogleSheetSource

    return GoogleSheetSource(
        spreadsheet_id=app.config["GOOGLE_SHEETS_ID"],
        client_email=app.config["GOOGLE_SERVICE_ACCOUNT_EMAIL"],
        private_key=app.config["GOOGLE_PRIVATE_KEY"],
    )


def build_repository(app: Flask, source: TabularSource | None = None) -> AssetRepository:
    source = source or build_source(app)
    lock = ResourceLock(
        source.resource_id,
        lock_dir=app.config.get("SHEETS_LOCK_DIR"),
        timeout=app.config.get("SHEETS_LOCK_TIMEOUT", 30),
    )
    return SheetAssetRepository(source, sheet_name=app.config.get("SHEET_NAME", "Assets"), lock=lock)


def build_storage(app: Flask) -> BoxStorage:
    return BoxStorage(
        client_id=app.config.get("BOX_CLIENT_ID", ""),
        client_secret=app.config.get("BOX_CLIENT_SECRET", ""),
        enterprise_id=app.config.get("BOX_ENTERPRISE_ID", ""),
        folder_id=app.config.get("BOX_FOLDER_ID", "0"),
        timeout=app.config.get("BOX_TIMEOUT", 30),
        public_key_id=app.config.get("BOX_PUBLIC_KEY_ID", ""),
        private_key=app.config.get("BOX_PRIVATE_KEY", ""),
        passphrase=app.config.get("BOX_PASSPHRASE", ""),
    )


def init_services(app: Flask) -> None:
    app.extensions.setdefault(REPOSITORY_KEY, build_repository(app))
    app.extensions.setdefault(STORAGE_KEY, build_storage(app))


def get_repository() -> AssetRepository:
    return current_app.extensions[REPOSITORY_KEY]


def get_storage() -> BoxStorage:
    return current_app.extensions[STORAGE_KEY]


def _file_type_for(mime_type: str) -> str:
    return "video" if mime_type.startswith("video/") else "image"


def draft_from_metadata(
    metadata: dict[str, Any],
    *,
    filename: str,
    original_filename: str,
    url: str,
    box_file_id: str | None,
    mime_type: str,
    size: int,
) -> AssetDraft:
    draft = AssetDraft(
        filename=filename,
        original_filename=original_filename,
        box_file_id=box_file_id,
        url=url,
        public_url=url,
        file_type=_file_type_for(mime_type),
        mime_type=mime_type,
        size=size,
        width=optional_number(metadata, "width", int),
        height=optional_number(metadata, "height", int),
        duration=optional_number(metadata, "duration", float),
        event=require_text(metadata, "event"),
        date=require_text(metadata, "date"),
        location=clean_text(metadata.get("location")),
        photographer=require_text(metadata, "photographer"),
        tags=parse_tags(metadata.get("tags")),
        description=clean_text(metadata.get("description")),
    )
    return validate_draft(draft)


def check_metadata(metadata: dict[str, Any]) -> None:
    """Valida la metadata compartida antes de subir nada al storage."""

    draft_from_metadata(
        metadata,
        filename="pending",
        original_filename="pending",
        url="",
        box_file_id=None,
        mime_type="application/octet-stream",
        size=0,
    )


def upload_assets(files: Iterable[FileStorage], metadata: dict[str, Any]) -> list[dict[str, Any]]:
    """Sube cada archivo a Box y crea su registro; cada archivo se marca por separado."""

    check_metadata(metadata)
    repository = get_repository()
    storage = get_storage()
    results: list[dict[str, Any]] = []

    for upload in files:
        original = upload.filename or "upload"
        mime_type = (
            upload.mimetype
            or mimetypes.guess_type(original)[0]
            or "application/octet-stream"
        )
        try:
            data = upload.read()
            stored = storage.upload_asset(data, original, mime_type)
            draft = draft_from_metadata(
                metadata,
                filename=stored.name or original,
                original_filename=original,
                url=stored.url,
                box_file_id=stored.file_id,
                mime_type=mime_type,
                size=len(data),
            )
            asset = repository.create(draft)
        except DamError as exc:
            logger.warning("Upload of %s failed: %s", original, exc)
            results.append({"filename": original, "ok": False, "error": str(exc)})
            continue
        results.append({"filename": original, "ok": True, "asset": asset.to_dict()})
    return results


def remove_asset(asset_id: str) -> dict[str, Any]:
    """Borra el registro y luego el archivo en Box (si el registro lo referencia)."""

    repository = get_repository()
    asset = repository.get(asset_id)
    if asset is None:
        raise AssetNotFound(asset_id)

    repository.delete(asset_id)
    result: dict[str, Any] = {"id": asset_id, "storageDeleted": False}
    if asset.box_file_id:
        try:
            get_storage().delete(asset.box_file_id)
            result["storageDeleted"] = True
        except DamError as exc:
            logger.warning(
                "Record %s deleted but Box file %s remains: %s",
                asset_id,
                asset.box_file_id,
                exc,
                extra={"asset_id": asset_id},
            )
            result["storageError"] = str(exc)
    return result

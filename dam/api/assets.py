"""API JSON de assets: listado, búsqueda, alta, baja y estadísticas."""

from __future__ import annotations

import json

from flask import Blueprint, jsonify, request

from dam.auth import login_required
from dam.exceptions import AssetNotFound, ValidationError
from dam.extensions import limiter
from dam.records import SearchCriteria
from dam.records.repository import DEFAULT_PAGE_SIZE
from dam.services.asset_service import get_repository, remove_asset, upload_assets
from dam.utils.validators import clean_text, parse_tags

bp = Blueprint("assets_api", __name__, url_prefix="/api")


def _criteria_from_args() -> SearchCriteria:
    args = request.args
    tags = parse_tags(args.get("tags")) + parse_tags(args.getlist("tag"))
    return SearchCriteria(
        event=clean_text(args.get("event")),
        photographer=clean_text(args.get("photographer")),
        location=clean_text(args.get("location")),
        tags=tags or None,
        date_from=clean_text(args.get("dateFrom")),
        date_to=clean_text(args.get("dateTo")),
    )


@bp.get("/assets")
@login_required
def list_assets():
    raw_page_size = request.args.get("pageSize")
    if raw_page_size is None:
        page_size = DEFAULT_PAGE_SIZE
    else:
        try:
            page_size = int(raw_page_size.strip())
        except ValueError:
            raise ValidationError("'pageSize' must be a positive integer") from None
    if page_size < 1:
        raise ValidationError("'pageSize' must be a positive integer")
    page = get_repository().list(page_size, request.args.get("offset"))
    return jsonify(page.to_dict())


@bp.get("/assets/search")
@login_required
def search_assets():
    records = get_repository().search(_criteria_from_args())
    return jsonify({"records": [asset.to_dict() for asset in records], "count": len(records)})


@bp.get("/assets/<asset_id>")
@login_required
def get_asset(asset_id: str):
    asset = get_repository().get(asset_id)
    if asset is None:
        raise AssetNotFound(asset_id)
    return jsonify(asset.to_dict())


@bp.post("/assets")
@login_required
@limiter.limit("60 per minute")
def create_assets():
    files = [f for f in request.files.getlist("files") if f and f.filename]
    if not files:
        raise ValidationError("At least one file is required in 'files'")

    raw_metadata = request.form.get("metadata") or "{}"
    try:
        metadata = json.loads(raw_metadata)
    except ValueError:
        raise ValidationError("'metadata' must be valid JSON") from None
    if not isinstance(metadata, dict):
        raise ValidationError("'metadata' must be a JSON object")

    results = upload_assets(files, metadata)
    status = 201 if all(item["ok"] for item in results) else 207
    return jsonify({"results": results}), status


@bp.delete("/assets/<asset_id>")
@login_required
def delete_asset(asset_id: str):
    return jsonify(remove_asset(asset_id)), 200


@bp.get("/stats")
@login_required
def stats():
    return jsonify(get_repository().stats().to_dict())

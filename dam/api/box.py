from __future__ import annotations

from flask import Blueprint, jsonify

from dam.auth import login_required
from dam.services.asset_service import get_storage

bp = Blueprint("box_api", __name__, url_prefix="/api")


@bp.get("/box-download/", defaults={"file_id": ""})
@bp.get("/box-download/<file_id>")
@login_required
def box_download(file_id: str):
    """URL de descarga directa para usar en etiquetas <img>/<video>."""

    if not file_id.strip():
        return jsonify(error={"code": 400, "message": "File ID is required"}), 400
    return jsonify({"url": get_storage().download_url(file_id)})

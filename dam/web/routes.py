"""Páginas del sitio. El acceso ya lo decide la política antes de llegar aquí."""

from __future__ import annotations

from flask import Blueprint, current_app, redirect, render_template, request

from dam.auth import current_user
from dam.auth.policy import LANDING_PATH
from dam.records import SearchCriteria
from dam.services.asset_service import get_repository
from dam.utils.validators import clean_text, parse_tags

bp_web = Blueprint("web", __name__)

GALLERY_PAGE_SIZE = 48


@bp_web.get("/")
def home():
    # Solo se llega aquí si la política no redirigió (no debería ocurrir).
    return redirect(LANDING_PATH)


@bp_web.get("/gallery")
def gallery():
    args = request.args
    criteria = SearchCriteria(
        event=clean_text(args.get("event")),
        photographer=clean_text(args.get("photographer")),
        location=clean_text(args.get("location")),
        tags=parse_tags(args.get("tags")) or None,
        date_from=clean_text(args.get("dateFrom")),
        date_to=clean_text(args.get("dateTo")),
    )
    repository = get_repository()
    if criteria.is_empty():
        page = repository.list(GALLERY_PAGE_SIZE, args.get("offset"))
        assets, next_offset = page.records, page.next_offset
    else:
        assets, next_offset = repository.search(criteria), None
    return render_template(
        "gallery.html",
        assets=assets,
        next_offset=next_offset,
        criteria=criteria,
        user=current_user(),
    )


@bp_web.get("/dashboard")
def dashboard():
    return render_template("dashboard.html", stats=get_repository().stats(), user=current_user())


@bp_web.get("/upload")
def upload():
    return render_template(
        "upload.html",
        max_upload_mb=current_app.config.get("MAX_UPLOAD_MB"),
        user=current_user(),
    )


@bp_web.get("/setup")
def setup():
    return render_template("setup.html", user=current_user())

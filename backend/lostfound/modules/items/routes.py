from datetime import timedelta

from flask import Blueprint, current_app, jsonify, request

from ...errors import ValidationError
from ...schemas.item import ArchiveSchema, ItemCreateSchema, ItemFilterSchema, ItemUpdateSchema
from ...security import current_caller, require_staff
from . import service

bp = Blueprint("items", __name__, url_prefix="/items")

_PHOTO_FIELDS = ("photo_0", "photo_1", "photo_2")


def _is_date_only(value: str | None) -> bool:
    return bool(value) and len(value.strip()) == 10


def _uploaded_photos() -> list:
    files = list(request.files.getlist("photos"))
    for name in _PHOTO_FIELDS:
        files.extend(request.files.getlist(name))
    return [f for f in files if f and f.filename]


@bp.get("")
def list_items():
    """List items with optional filters.

    Query params: category, location, status, search, dateFrom, dateTo.
    A date-only ``dateTo`` includes the whole day.
    """
    args = {k: v for k, v in request.args.items() if v and v.strip()}
    filters = ItemFilterSchema().load(args)
    if filters.get("date_to") is not None and _is_date_only(args.get("dateTo")):
        filters["date_to"] = filters["date_to"] + timedelta(days=1) - timedelta(microseconds=1)
    items = service.get_items(**filters)
    caller = current_caller()
    staff = bool(caller and caller.is_staff)
    return jsonify({"items": [service.item_to_dict(it, include_staff_fields=staff) for it in items], "count": len(items)})


@bp.get("/<int:item_id>")
def get_item(item_id: int):
    caller = current_caller()
    item = service.get_item(item_id)
    return jsonify({"item": service.item_to_dict(item, include_staff_fields=bool(caller and caller.is_staff))})


@bp.post("")
def create_item():
    """Log a found item (staff only).

    Accepts application/json, or multipart/form-data with up to
    ``MAX_ITEM_PHOTOS`` image files in ``photos`` (or ``photo_0``..``photo_2``).
    """
    caller = require_staff()
    content_type = request.content_type or ""
    if content_type.startswith("multipart/form-data"):
        data = request.form.to_dict()
        data["photoUrls"] = [u for u in request.form.getlist("photoUrls") if u.strip()]
        uploads = _uploaded_photos()
    else:
        data = request.get_json(silent=True) or {}
        uploads = []
    loaded = ItemCreateSchema().load(data)
    item = service.create_item(caller, loaded, uploads)
    return jsonify({"item": service.item_to_dict(item, include_staff_fields=True)}), 201


@bp.patch("/<int:item_id>")
def update_item(item_id: int):
    caller = require_staff()
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        raise ValidationError("body: No fields to update.")
    loaded = ItemUpdateSchema().load(data)
    item = service.update_item(caller, item_id, loaded)
    return jsonify({"item": service.item_to_dict(item, include_staff_fields=True)})


@bp.post("/archive")
def archive_items():
    """Archive active items older than ``daysOld`` days (default ARCHIVE_AFTER_DAYS)."""
    require_staff()
    loaded = ArchiveSchema().load(request.get_json(silent=True) or {})
    days_old = loaded.get("days_old", current_app.config.get("ARCHIVE_AFTER_DAYS", 30))
    archived = service.archive_old_items(days_old)
    return jsonify({"archivedCount": archived})

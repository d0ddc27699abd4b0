from __future__ import annotations

from datetime import datetime, timedelta, timezone

from flask import current_app

from ...errors import ConflictError, NotFoundError, ValidationError
from ...extensions import db
from ...models.item import Item
from ...models.user import User
from ...security import Caller
from .photos import save_photos, thumb_url

# Status changes allowed through a manual update. Archiving is reserved for the sweep.
_MANUAL_TRANSITIONS = {("active", "claimed")}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def get_items(
    *,
    category: str | None = None,
    location: str | None = None,
    status: str | None = None,
    search: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
) -> list[Item]:
    q = Item.query
    if category:
        q = q.filter(Item.category == category)
    if location:
        q = q.filter(Item.location == location)
    if status:
        q = q.filter(Item.status == status)
    if search:
        like = f"%{_escape_like(search.strip())}%"
        q = q.filter(db.or_(Item.name.ilike(like, escape="\\"), Item.description.ilike(like, escape="\\")))
    if date_from:
        q = q.filter(Item.date_found >= date_from)
    if date_to:
        q = q.filter(Item.date_found <= date_to)
    return q.order_by(Item.created_at.desc(), Item.id.desc()).all()


def get_item(item_id: int) -> Item:
    item = db.session.get(Item, item_id)
    if item is None:
        raise NotFoundError("Item")
    return item


def create_item(caller: Caller, data: dict, uploads: list | None = None) -> Item:
    """Log a found item on behalf of a staff member.

    ``data`` is the output of ``ItemCreateSchema``; ``uploads`` are optional
    image files stored alongside any ``photo_urls`` already in ``data``.
    """
    uploads = [u for u in (uploads or []) if u and u.filename]
    photo_urls = list(data.get("photo_urls") or [])
    cap = int(current_app.config["MAX_ITEM_PHOTOS"])
    if len(photo_urls) + len(uploads) > cap:
        raise ValidationError(f"photoUrls: At most {cap} photos are allowed.")
    if uploads:
        photo_urls.extend(save_photos(uploads))

    item = Item(
        name=data["name"].strip(),
        description=data["description"].strip(),
        category=data["category"],
        location=data["location"].strip(),
        date_found=data["date_found"],
        priority=data.get("priority") or "normal",
        staff_notes=data.get("staff_notes"),
        photo_urls=photo_urls,
        status="active",
        found_by_id=caller.id,
    )
    db.session.add(item)
    db.session.commit()
    current_app.logger.info("Item %s logged by staff %s", item.id, caller.id)
    return item


def update_item(caller: Caller, item_id: int, data: dict) -> Item:
    item = get_item(item_id)

    new_status = data.get("status")
    transition = bool(new_status) and new_status != item.status
    if transition and (item.status, new_status) not in _MANUAL_TRANSITIONS:
        raise ConflictError(f"Cannot change item status from {item.status} to {new_status}")

    # The claimant only changes together with the active -> claimed transition
    claimed_by_id = data.get("claimed_by_id")
    if transition:
        if claimed_by_id is None:
            raise ValidationError("claimedById: Required when marking an item claimed.")
        if db.session.get(User, claimed_by_id) is None:
            raise NotFoundError("User")
        item.status = new_status
        item.claimed_by_id = claimed_by_id
    elif "claimed_by_id" in data:
        raise ConflictError("The claimant can only be set when marking an active item claimed")

    for field in ("name", "description", "location"):
        if field in data:
            setattr(item, field, data[field].strip())
    for field in ("category", "priority", "date_found", "staff_notes"):
        if field in data:
            setattr(item, field, data[field])

    item.updated_at = _utcnow()
    db.session.commit()
    current_app.logger.info("Item %s updated by staff %s", item.id, caller.id)
    return item


def archive_old_items(days_old: int = 30) -> int:
    """Archive every active item found at least ``days_old`` days ago.

    Returns the number of items archived. Re-running with the same threshold
    is a no-op for items it already archived.
    """
    now = _utcnow()
    cutoff = now - timedelta(days=int(days_old))
    count = (
        Item.query
        .filter(Item.status == "active", Item.date_found <= cutoff)
        .update(
            {Item.status: "archived", Item.date_archived: now, Item.updated_at: now},
            synchronize_session=False,
        )
    )
    db.session.commit()
    current_app.logger.info("Archive sweep (%s days) archived %s items", days_old, count)
    return int(count or 0)


def item_to_dict(it: Item, include_staff_fields: bool = False) -> dict:
    photos = list(it.photo_urls or [])
    payload = {
        "id": it.id,
        "name": it.name,
        "description": it.description,
        "category": it.category,
        "location": it.location,
        "photoUrls": photos,
        "photoThumbUrls": [thumb_url(p) or p for p in photos],
        "priority": it.priority,
        "status": it.status,
        "foundById": it.found_by_id,
        "claimedById": it.claimed_by_id,
        "dateFound": it.date_found.isoformat() if it.date_found else None,
        "dateArchived": it.date_archived.isoformat() if it.date_archived else None,
        "createdAt": it.created_at.isoformat() if it.created_at else None,
        "updatedAt": it.updated_at.isoformat() if it.updated_at else None,
    }
    if include_staff_fields:
        payload["staffNotes"] = it.staff_notes
    if it.found_by is not None:
        payload["foundBy"] = {
            "id": it.found_by.id,
            "firstName": it.found_by.first_name,
            "lastName": it.found_by.last_name,
        }
    return payload

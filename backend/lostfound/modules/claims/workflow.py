"""Claim lifecycle.

    pending ──► approved          (terminal, item becomes claimed)
        │  ──► rejected          (terminal)
        └──► more_info_needed ──► approved | rejected | more_info_needed

Students submit claims; only staff review them. Every transition stages its
notification rows in the same session and commits once, then publishes a
single advisory frame through the injected ``publish`` callable.
"""
from __future__ import annotations

from datetime import datetime, timezone

from flask import current_app

from ...errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ...extensions import db
from ...models.claim import Claim
from ...models.enums import CLAIM_REVIEW_STATUSES
from ...models.item import Item
from ...security import Caller
from ..notifications.bus import Publish, safe_publish
from ..notifications.service import add_notification, add_staff_notifications

OPEN_STATUSES = ("pending", "more_info_needed")

# Notification type sent to the claimant for each review outcome
_REVIEW_NOTIFICATION_TYPES = {
    "approved": "success",
    "rejected": "error",
    "more_info_needed": "warning",
}

_REVIEW_MESSAGES = {
    "approved": "Your claim for ‘{item}’ was approved. Please pick it up from the office.",
    "rejected": "Your claim for ‘{item}’ was rejected.",
    "more_info_needed": "Staff need more information about your claim for ‘{item}’.",
}


def submit_claim(caller: Caller, item_id: int, description: str, publish: Publish | None = None) -> Claim:
    if not caller.is_student:
        raise AuthorizationError()
    description = (description or "").strip()
    if not description:
        raise ValidationError("description: Must not be blank.")

    item = db.session.get(Item, item_id)
    if item is None:
        raise NotFoundError("Item")
    if item.status != "active":
        raise ConflictError("This item is no longer available to claim")

    existing = (
        Claim.query
        .filter(Claim.item_id == item.id, Claim.student_id == caller.id, Claim.status.in_(OPEN_STATUSES))
        .first()
    )
    if existing is not None:
        raise ConflictError("You already have an open claim for this item")

    claim = Claim(item_id=item.id, student_id=caller.id, description=description, status="pending")
    db.session.add(claim)
    db.session.flush()

    title = "New Claim Submitted"
    message = f"A student has submitted a claim for ‘{item.name}’."
    add_staff_notifications(title, message, "info", item_id=int(item.id), claim_id=int(claim.id))
    db.session.commit()
    current_app.logger.info("Claim %s submitted by student %s for item %s", claim.id, caller.id, item.id)

    safe_publish(publish, {"title": title, "message": message, "type": "info"})
    return claim


def review_claim(
    caller: Caller,
    claim_id: int,
    status: str,
    staff_notes: str | None = None,
    publish: Publish | None = None,
) -> Claim:
    if not caller.is_staff:
        raise AuthorizationError()
    if status not in CLAIM_REVIEW_STATUSES:
        raise ValidationError(f"status: Must be one of: {', '.join(CLAIM_REVIEW_STATUSES)}.")
    staff_notes = (staff_notes or "").strip() or None
    if status == "more_info_needed" and not staff_notes:
        raise ValidationError("staffNotes: Notes are required when requesting more information.")

    claim = db.session.get(Claim, claim_id)
    if claim is None:
        raise NotFoundError("Claim")
    if claim.is_terminal:
        raise ConflictError(f"Claim is already {claim.status}")

    item = claim.item
    if status == "approved":
        if item.status != "active":
            raise ConflictError("The item for this claim is no longer active")
        item.status = "claimed"
        item.claimed_by_id = claim.student_id

    prev_status = claim.status
    now = datetime.now(timezone.utc)
    claim.status = status
    if staff_notes is not None:
        claim.staff_notes = staff_notes
    claim.reviewed_by_id = caller.id
    claim.reviewed_at = now

    title = "Claim Status Updated"
    message = _REVIEW_MESSAGES[status].format(item=item.name)
    if status == "more_info_needed":
        message = f"{message} {staff_notes}"
    ntype = _REVIEW_NOTIFICATION_TYPES[status]
    add_notification(int(claim.student_id), title, message, ntype, item_id=int(item.id), claim_id=int(claim.id))
    db.session.commit()
    current_app.logger.info(
        "Claim %s reviewed by staff %s: %s -> %s", claim.id, caller.id, prev_status, status
    )

    safe_publish(publish, {"title": title, "message": message, "type": ntype})
    return claim


def list_claims(
    caller: Caller,
    *,
    status: str | None = None,
    item_id: int | None = None,
    student_id: int | None = None,
) -> list[Claim]:
    """Claims visible to ``caller``, most recent first.

    Students only ever see their own claims; a ``student_id`` filter from a
    student is ignored.
    """
    q = Claim.query
    if caller.is_staff:
        if student_id is not None:
            q = q.filter(Claim.student_id == student_id)
    else:
        q = q.filter(Claim.student_id == caller.id)
    if status:
        q = q.filter(Claim.status == status)
    if item_id is not None:
        q = q.filter(Claim.item_id == item_id)
    return q.order_by(Claim.created_at.desc(), Claim.id.desc()).all()


def get_claim(caller: Caller, claim_id: int) -> Claim:
    claim = db.session.get(Claim, claim_id)
    if claim is None or (not caller.is_staff and int(claim.student_id) != caller.id):
        raise NotFoundError("Claim")
    return claim


def claim_to_dict(c: Claim) -> dict:
    item = c.item
    student = c.student
    return {
        "id": c.id,
        "itemId": c.item_id,
        "studentId": c.student_id,
        "description": c.description,
        "status": c.status,
        "staffNotes": c.staff_notes,
        "reviewedById": c.reviewed_by_id,
        "reviewedAt": c.reviewed_at.isoformat() if c.reviewed_at else None,
        "createdAt": c.created_at.isoformat() if c.created_at else None,
        "updatedAt": c.updated_at.isoformat() if c.updated_at else None,
        "item": {
            "id": item.id,
            "name": item.name,
            "category": item.category,
            "location": item.location,
            "status": item.status,
            "photoUrls": list(item.photo_urls or []),
        } if item else None,
        "student": {
            "id": student.id,
            "firstName": student.first_name,
            "lastName": student.last_name,
            "studentId": student.student_id,
            "email": student.email,
        } if student else None,
    }

from __future__ import annotations

from ...errors import NotFoundError
from ...extensions import db
from ...models.notification import Notification
from ...security import Caller
from ..users.service import staff_users


def add_notification(
    user_id: int,
    title: str,
    message: str,
    type: str = "info",
    *,
    item_id: int | None = None,
    claim_id: int | None = None,
) -> Notification:
    """Stage a notification row in the current session; the caller commits."""
    n = Notification(
        user_id=user_id,
        title=title,
        message=message,
        type=type,
        related_item_id=item_id,
        related_claim_id=claim_id,
    )
    db.session.add(n)
    return n


def add_staff_notifications(title: str, message: str, type: str = "info", **related) -> list[Notification]:
    return [add_notification(int(u.id), title, message, type, **related) for u in staff_users()]


def list_notifications(caller: Caller, unread_only: bool = False, limit: int | None = None) -> list[Notification]:
    q = Notification.query.filter(Notification.user_id == caller.id)
    if unread_only:
        q = q.filter(Notification.read.is_(False))
    q = q.order_by(Notification.created_at.desc(), Notification.id.desc())
    if limit:
        q = q.limit(limit)
    return q.all()


def unread_count(caller: Caller) -> int:
    return int(
        db.session.query(db.func.count(Notification.id))
        .filter(Notification.user_id == caller.id, Notification.read.is_(False))
        .scalar() or 0
    )


def mark_read(caller: Caller, notification_id: int) -> Notification:
    n = db.session.get(Notification, notification_id)
    # Someone else's notification is reported as missing
    if n is None or int(n.user_id) != caller.id:
        raise NotFoundError("Notification")
    if not n.read:
        n.read = True
        db.session.commit()
    return n


def mark_all_read(caller: Caller) -> int:
    count = (
        Notification.query
        .filter(Notification.user_id == caller.id, Notification.read.is_(False))
        .update({Notification.read: True}, synchronize_session=False)
    )
    db.session.commit()
    return int(count or 0)


def notification_to_dict(n: Notification) -> dict:
    return {
        "id": n.id,
        "userId": n.user_id,
        "title": n.title,
        "message": n.message,
        "type": n.type,
        "read": bool(n.read),
        "relatedItemId": n.related_item_id,
        "relatedClaimId": n.related_claim_id,
        "createdAt": n.created_at.isoformat() if n.created_at else None,
    }

from __future__ import annotations

from sqlalchemy import func

from ...extensions import db
from ...models.claim import Claim
from ...models.item import Item


def _count(query) -> int:
    return int(query.scalar() or 0)


def recovery_rate(total: int, returned: int) -> float:
    if total <= 0:
        return 0
    return round(returned / total * 100, 2)


def get_analytics() -> dict:
    """Dashboard aggregates, recomputed on every call."""
    total_items = _count(db.session.query(func.count(Item.id)))
    items_returned = _count(db.session.query(func.count(Item.id)).filter(Item.status == "claimed"))
    pending_claims = _count(db.session.query(func.count(Claim.id)).filter(Claim.status == "pending"))

    cnt = func.count(Item.id).label("cnt")
    category_rows = (
        db.session.query(Item.category, cnt)
        .group_by(Item.category)
        .order_by(cnt.desc(), Item.category)
        .all()
    )
    location_rows = (
        db.session.query(Item.location, cnt)
        .group_by(Item.location)
        .order_by(cnt.desc(), Item.location)
        .all()
    )

    return {
        "totalItems": total_items,
        "itemsReturned": items_returned,
        "pendingClaims": pending_claims,
        "recoveryRate": recovery_rate(total_items, items_returned),
        "categoryStats": [{"category": c, "count": int(n)} for c, n in category_rows],
        "locationStats": [{"location": loc, "count": int(n)} for loc, n in location_rows],
    }

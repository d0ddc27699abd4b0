"""CSV item report for staff."""
from __future__ import annotations

import csv
import io
from datetime import datetime

from sqlalchemy import func

from ...extensions import db
from ...models.claim import Claim
from ...models.item import Item

HEADER = [
    "Item ID",
    "Item Name",
    "Category",
    "Location",
    "Date Found",
    "Status",
    "Priority",
    "Claims Count",
    "Last Claim Date",
]


def _fmt(value: datetime | None, date_format: str) -> str:
    return value.strftime(date_format) if value else "None"


def build_items_csv(date_format: str = "%Y-%m-%d") -> str:
    """One row per item with its claim count and most recent claim date."""
    stats = (
        db.session.query(
            Claim.item_id,
            func.count(Claim.id).label("claims"),
            func.max(Claim.created_at).label("last_claim"),
        )
        .group_by(Claim.item_id)
        .subquery()
    )
    rows = (
        db.session.query(Item, stats.c.claims, stats.c.last_claim)
        .outerjoin(stats, stats.c.item_id == Item.id)
        .order_by(Item.created_at.desc(), Item.id.desc())
        .all()
    )

    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(HEADER)
    for item, claims, last_claim in rows:
        writer.writerow([
            item.id,
            item.name,
            item.category,
            item.location,
            _fmt(item.date_found, date_format),
            item.status,
            item.priority,
            int(claims or 0),
            _fmt(last_claim, date_format),
        ])
    return output.getvalue()

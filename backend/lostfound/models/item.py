from sqlalchemy import func, Index
from ..extensions import db
from .enums import id_type, item_category_enum, item_priority_enum, item_status_enum


class Item(db.Model):
    __tablename__ = "items"

    id = db.Column(id_type, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    category = db.Column(item_category_enum, nullable=False)
    location = db.Column(db.String(255), nullable=False)
    # Ordered list of photo URLs, capped by MAX_ITEM_PHOTOS
    photo_urls = db.Column(db.JSON, nullable=False, default=list)
    priority = db.Column(item_priority_enum, nullable=False, default="normal", server_default="normal")
    status = db.Column(item_status_enum, nullable=False, default="active", server_default="active")
    staff_notes = db.Column(db.Text)
    found_by_id = db.Column(db.BigInteger, db.ForeignKey("users.id", ondelete="SET NULL"))
    claimed_by_id = db.Column(db.BigInteger, db.ForeignKey("users.id", ondelete="SET NULL"))
    date_found = db.Column(db.DateTime(timezone=True), nullable=False)
    date_archived = db.Column(db.DateTime(timezone=True))
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    found_by = db.relationship("User", back_populates="items_found", foreign_keys=[found_by_id])
    claimed_by = db.relationship("User", back_populates="items_claimed", foreign_keys=[claimed_by_id])
    claims = db.relationship("Claim", back_populates="item", lazy=True)

    __table_args__ = (
        Index("idx_items_status", "status"),
        Index("idx_items_category", "category"),
        Index("idx_items_location", "location"),
        Index("idx_items_date_found", "date_found"),
    )

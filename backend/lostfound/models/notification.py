from sqlalchemy import Index, func
from ..extensions import db
from .enums import id_type, notification_type_enum


class Notification(db.Model):
    __tablename__ = "notifications"

    id = db.Column(id_type, primary_key=True)
    user_id = db.Column(db.BigInteger, db.ForeignKey("users.id"), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text, nullable=False)
    type = db.Column(notification_type_enum, nullable=False, default="info", server_default="info")
    read = db.Column(db.Boolean, nullable=False, default=False, server_default=db.false())
    related_item_id = db.Column(db.BigInteger, db.ForeignKey("items.id"))
    related_claim_id = db.Column(db.BigInteger, db.ForeignKey("claims.id"))
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())

    user = db.relationship("User", back_populates="notifications")
    related_item = db.relationship("Item")
    related_claim = db.relationship("Claim")

    __table_args__ = (
        Index("idx_notifications_user_read", "user_id", "read"),
    )

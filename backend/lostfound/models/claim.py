from sqlalchemy import func, Index
from ..extensions import db
from .enums import id_type, claim_status_enum, CLAIM_TERMINAL_STATUSES


class Claim(db.Model):
    __tablename__ = "claims"

    id = db.Column(id_type, primary_key=True)
    item_id = db.Column(db.BigInteger, db.ForeignKey("items.id"), nullable=False)
    student_id = db.Column(db.BigInteger, db.ForeignKey("users.id"), nullable=False)
    description = db.Column(db.Text, nullable=False)
    status = db.Column(claim_status_enum, nullable=False, default="pending", server_default="pending")
    staff_notes = db.Column(db.Text)
    reviewed_by_id = db.Column(db.BigInteger, db.ForeignKey("users.id", ondelete="SET NULL"))
    reviewed_at = db.Column(db.DateTime(timezone=True))
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    item = db.relationship("Item", back_populates="claims")
    student = db.relationship("User", back_populates="claims", foreign_keys=[student_id])
    reviewed_by = db.relationship("User", back_populates="claims_reviewed", foreign_keys=[reviewed_by_id])

    __table_args__ = (
        Index("idx_claims_item", "item_id"),
        Index("idx_claims_student", "student_id"),
        Index("idx_claims_status", "status"),
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in CLAIM_TERMINAL_STATUSES

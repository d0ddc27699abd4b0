from sqlalchemy import func
from ..extensions import db
from .enums import id_type, role_enum


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(id_type, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=True)
    first_name = db.Column(db.String(120), nullable=True)
    last_name = db.Column(db.String(120), nullable=True)
    student_id = db.Column(db.String(50), unique=True, nullable=True)
    role = db.Column(role_enum, nullable=False, default="student", server_default="student")
    password_hash = db.Column(db.Text)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    items_found = db.relationship(
        "Item",
        back_populates="found_by",
        foreign_keys="Item.found_by_id",
        lazy=True,
    )
    items_claimed = db.relationship(
        "Item",
        back_populates="claimed_by",
        foreign_keys="Item.claimed_by_id",
        lazy=True,
    )
    claims = db.relationship(
        "Claim",
        back_populates="student",
        foreign_keys="Claim.student_id",
        lazy=True,
    )
    claims_reviewed = db.relationship(
        "Claim",
        back_populates="reviewed_by",
        foreign_keys="Claim.reviewed_by_id",
        lazy=True,
    )
    notifications = db.relationship(
        "Notification",
        back_populates="user",
        lazy=True,
    )

    @property
    def is_staff(self) -> bool:
        return self.role == "staff"

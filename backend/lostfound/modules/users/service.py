from __future__ import annotations

from flask import current_app
from sqlalchemy import func
from werkzeug.security import check_password_hash, generate_password_hash

from ...errors import ConflictError, NotFoundError
from ...extensions import db
from ...models.user import User


def get_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User")
    return user


def get_user_by_student_id(student_id: str) -> User | None:
    return User.query.filter_by(student_id=student_id).first()


def get_user_by_email(email: str) -> User | None:
    return User.query.filter(func.lower(User.email) == email.strip().lower()).first()


def staff_users() -> list[User]:
    return User.query.filter(User.role == "staff").order_by(User.id).all()


def create_student(*, first_name: str, last_name: str, student_id: str, email: str, password: str) -> User:
    """Self-registration path for students."""
    if get_user_by_student_id(student_id):
        raise ConflictError("Student ID already registered")
    if get_user_by_email(email):
        raise ConflictError("Email already in use")
    user = User(
        first_name=first_name,
        last_name=last_name,
        student_id=student_id,
        email=email.strip().lower(),
        role="student",
        password_hash=generate_password_hash(password),
    )
    db.session.add(user)
    db.session.commit()
    current_app.logger.info("Registered student %s (user %s)", student_id, user.id)
    return user


def create_staff(*, email: str, first_name: str | None = None, last_name: str | None = None, password: str | None = None) -> User:
    if get_user_by_email(email):
        raise ConflictError("Email already in use")
    user = User(
        email=email.strip().lower(),
        first_name=first_name,
        last_name=last_name,
        role="staff",
        password_hash=generate_password_hash(password) if password else None,
    )
    db.session.add(user)
    db.session.commit()
    current_app.logger.info("Created staff user %s", user.id)
    return user


def set_role(user: User, role: str) -> User:
    user.role = role
    db.session.commit()
    current_app.logger.info("User %s role set to %s", user.id, role)
    return user


def upsert_user(*, email: str, first_name: str | None = None, last_name: str | None = None) -> User:
    """Create or refresh a user asserted by an external identity provider.

    Existing users keep their role; new users start as students.
    """
    user = get_user_by_email(email)
    if user is None:
        user = User(email=email.strip().lower(), first_name=first_name, last_name=last_name, role="student")
        db.session.add(user)
    else:
        if first_name:
            user.first_name = first_name
        if last_name:
            user.last_name = last_name
    db.session.commit()
    return user


def authenticate(student_id: str, password: str) -> User | None:
    user = get_user_by_student_id(student_id)
    if not user or not user.password_hash or not check_password_hash(user.password_hash, password):
        return None
    return user


def user_to_dict(u: User) -> dict:
    return {
        "id": u.id,
        "email": u.email,
        "studentId": u.student_id,
        "firstName": u.first_name,
        "lastName": u.last_name,
        "role": u.role,
        "createdAt": u.created_at.isoformat() if u.created_at else None,
        "updatedAt": u.updated_at.isoformat() if u.updated_at else None,
    }

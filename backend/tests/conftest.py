from datetime import datetime, timedelta, timezone

import pytest
from werkzeug.security import generate_password_hash

from lostfound import create_app
from lostfound.extensions import db
from lostfound.models import Claim, Item, User
from lostfound.security import Caller, issue_token


@pytest.fixture
def app(tmp_path):
    app = create_app("testing", overrides={"UPLOAD_FOLDER": str(tmp_path / "uploads")})
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _user(**kwargs) -> User:
    user = User(**kwargs)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def staff(app):
    return _user(email="morgan.staff@school.org", first_name="Morgan", last_name="Lee", role="staff")


@pytest.fixture
def staff2(app):
    return _user(email="riley.staff@school.org", first_name="Riley", last_name="Park", role="staff")


@pytest.fixture
def student(app):
    return _user(
        email="s123456@student.roundrockisd.org",
        student_id="s123456",
        first_name="Sam",
        last_name="Diaz",
        role="student",
        password_hash=generate_password_hash("hunter22"),
    )


@pytest.fixture
def other_student(app):
    return _user(
        email="s654321@student.roundrockisd.org",
        student_id="s654321",
        first_name="Alex",
        last_name="Kim",
        role="student",
    )


@pytest.fixture
def auth():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {issue_token(int(user.id))}"}
    return _headers


@pytest.fixture
def caller_for():
    def _caller(user: User) -> Caller:
        return Caller.from_user(user)
    return _caller


@pytest.fixture
def make_item(staff):
    def _make(**kwargs) -> Item:
        values = {
            "name": "iPhone 15",
            "description": "Black phone with a blue case",
            "category": "electronics",
            "location": "cafeteria",
            "date_found": datetime.now(timezone.utc) - timedelta(days=1),
            "photo_urls": [],
            "found_by_id": staff.id,
        }
        values.update(kwargs)
        item = Item(**values)
        db.session.add(item)
        db.session.commit()
        return item
    return _make


@pytest.fixture
def make_claim():
    def _make(item: Item, student: User, **kwargs) -> Claim:
        values = {"item_id": item.id, "student_id": student.id, "description": "It's mine, it has my initials"}
        values.update(kwargs)
        claim = Claim(**values)
        db.session.add(claim)
        db.session.commit()
        return claim
    return _make


class PublishRecorder:
    def __init__(self):
        self.frames = []

    def __call__(self, frame):
        self.frames.append(frame)


@pytest.fixture
def published():
    return PublishRecorder()

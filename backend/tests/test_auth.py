import pytest
from itsdangerous import URLSafeTimedSerializer

from lostfound.extensions import db
from lostfound.models import User
from lostfound.security import build_providers, issue_token, verify_token

SIGNUP = {
    "firstName": "Jamie",
    "lastName": "Ortiz",
    "studentId": "s111222",
    "email": "s111222@student.roundrockisd.org",
    "password": "secret1",
}


def test_signup_then_login(client):
    resp = client.post("/api/v1/auth/signup", json=SIGNUP)
    assert resp.status_code == 201
    user_id = resp.get_json()["userId"]
    user = User.query.filter_by(student_id="s111222").one()
    assert user.id == user_id
    assert user.role == "student"
    assert user.password_hash != "secret1"

    resp = client.post("/api/v1/auth/login", json={"studentId": "s111222", "password": "secret1"})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["user"]["role"] == "student"

    me = client.get("/api/v1/auth/user", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.get_json()["studentId"] == "s111222"


@pytest.mark.parametrize(
    "change,field",
    [
        ({"studentId": "123456", "email": "123456@student.roundrockisd.org"}, "studentId"),
        ({"email": "jamie@gmail.com"}, "email"),
        ({"password": "abc"}, "password"),
        ({"firstName": ""}, "firstName"),
    ],
)
def test_signup_validation(client, change, field):
    resp = client.post("/api/v1/auth/signup", json={**SIGNUP, **change})
    assert resp.status_code == 400
    assert any(e.startswith(f"{field}:") for e in resp.get_json()["errors"])
    assert User.query.count() == 0


def test_signup_duplicate_student_id(client, student):
    payload = {**SIGNUP, "studentId": "s123456", "email": "s123456@student.roundrockisd.org"}
    resp = client.post("/api/v1/auth/signup", json=payload)
    assert resp.status_code == 409
    assert resp.get_json() == {"error": "Student ID already registered"}


def test_login_wrong_password(client, student):
    resp = client.post("/api/v1/auth/login", json={"studentId": "s123456", "password": "nope123"})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Invalid student ID or password"}


def test_login_unknown_student(client):
    resp = client.post("/api/v1/auth/login", json={"studentId": "s000000", "password": "whatever"})
    assert resp.status_code == 401


def test_logout(client):
    assert client.post("/api/v1/auth/logout").get_json() == {"message": "Logout successful"}


def test_current_user_requires_auth(client):
    assert client.get("/api/v1/auth/user").status_code == 401
    bad = client.get("/api/v1/auth/user", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401


def test_token_round_trip_and_foreign_signature(app, student):
    token = issue_token(student.id)
    assert verify_token(token) == student.id

    forged = URLSafeTimedSerializer("another-secret", salt="auth-token").dumps({"id": student.id})
    assert verify_token(forged) is None


def test_role_comes_from_database(client, student, auth):
    headers = auth(student)
    assert client.get("/api/v1/analytics", headers=headers).status_code == 403
    student.role = "staff"
    db.session.commit()
    assert client.get("/api/v1/analytics", headers=headers).status_code == 200


def test_trusted_header_provider_upserts_users(client, staff):
    resp = client.get("/api/v1/analytics", headers={"X-Forwarded-Email": "Morgan.Staff@school.org"})
    assert resp.status_code == 200

    resp = client.get(
        "/api/v1/auth/user",
        headers={
            "X-Forwarded-Email": "newkid@student.roundrockisd.org",
            "X-Forwarded-First-Name": "New",
            "X-Forwarded-Last-Name": "Kid",
        },
    )
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["role"] == "student"
    assert body["firstName"] == "New"
    assert User.query.filter_by(email="newkid@student.roundrockisd.org").count() == 1


def test_dev_header_provider_only_in_debug_or_testing(client, app, staff):
    headers = {"X-User-Id": str(staff.id)}
    assert client.get("/api/v1/analytics", headers=headers).status_code == 200
    app.config["TESTING"] = False
    assert client.get("/api/v1/analytics", headers=headers).status_code == 401


def test_unknown_provider_name():
    with pytest.raises(ValueError):
        build_providers("token,magic-link")
    assert [p.name for p in build_providers(" token , dev-header ")] == ["token", "dev-header"]

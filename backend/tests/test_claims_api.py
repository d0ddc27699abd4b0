from lostfound.extensions import db
from lostfound.models import Item, Notification


def test_example_scenario_end_to_end(client, app, staff, staff2, student, auth):
    resp = client.post(
        "/api/v1/items",
        json={
            "name": "iPhone 15",
            "description": "Black phone, cracked back glass",
            "category": "electronics",
            "location": "cafeteria",
            "dateFound": "2024-01-10",
        },
        headers=auth(staff),
    )
    assert resp.status_code == 201
    item_id = resp.get_json()["item"]["id"]

    listed = client.get("/api/v1/items?category=electronics").get_json()["items"]
    assert [it["id"] for it in listed] == [item_id]

    resp = client.post(
        "/api/v1/claims",
        json={"itemId": item_id, "description": "Cracked screen on back, it's mine"},
        headers=auth(student),
    )
    assert resp.status_code == 201
    claim = resp.get_json()["claim"]
    assert claim["status"] == "pending"
    for member in (staff, staff2):
        assert Notification.query.filter_by(user_id=member.id, related_claim_id=claim["id"]).count() == 1

    resp = client.patch(f"/api/v1/claims/{claim['id']}", json={"status": "approved"}, headers=auth(staff))
    assert resp.status_code == 200
    body = resp.get_json()["claim"]
    assert body["status"] == "approved"
    assert body["reviewedById"] == staff.id
    assert body["reviewedAt"]

    student_notes = client.get("/api/v1/notifications", headers=auth(student)).get_json()["notifications"]
    assert [n["type"] for n in student_notes] == ["success"]
    assert app.extensions["broadcaster"] is not None
    assert db.session.get(Item, item_id).status == "claimed"


def test_claim_requires_authentication(client, make_item):
    item = make_item()
    resp = client.post("/api/v1/claims", json={"itemId": item.id, "description": "mine"})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Authentication required"}


def test_claim_validation_errors_are_listed(client, student, auth):
    resp = client.post("/api/v1/claims", json={"description": ""}, headers=auth(student))
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "Invalid input"
    assert any(e.startswith("itemId:") for e in body["errors"])
    assert any(e.startswith("description:") for e in body["errors"])


def test_student_cannot_review(client, student, other_student, make_item, make_claim, auth):
    claim = make_claim(make_item(), other_student)
    resp = client.patch(f"/api/v1/claims/{claim.id}", json={"status": "approved"}, headers=auth(student))
    assert resp.status_code == 403
    assert resp.get_json() == {"error": "Forbidden"}


def test_review_unknown_claim_is_404(client, staff, auth):
    resp = client.patch("/api/v1/claims/12345", json={"status": "rejected"}, headers=auth(staff))
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Claim not found"}


def test_review_more_info_without_notes_is_400(client, staff, student, make_item, make_claim, auth):
    claim = make_claim(make_item(), student)
    resp = client.patch(f"/api/v1/claims/{claim.id}", json={"status": "more_info_needed"}, headers=auth(staff))
    assert resp.status_code == 400
    assert any(e.startswith("staffNotes:") for e in resp.get_json()["errors"])


def test_re_review_of_terminal_claim_is_409(client, staff, student, make_item, make_claim, auth):
    claim = make_claim(make_item(), student, status="rejected")
    claim.reviewed_by_id = staff.id
    resp = client.patch(f"/api/v1/claims/{claim.id}", json={"status": "approved"}, headers=auth(staff))
    assert resp.status_code == 409


def test_student_listing_ignores_foreign_student_filter(client, student, other_student, make_item, make_claim, auth):
    item = make_item()
    mine = make_claim(item, student)
    make_claim(item, other_student)

    resp = client.get(f"/api/v1/claims?studentId={other_student.id}", headers=auth(student))
    claims = resp.get_json()["claims"]
    assert [c["id"] for c in claims] == [mine.id]
    assert all(c["studentId"] == student.id for c in claims)


def test_staff_listing_filters_by_status(client, staff, student, make_item, make_claim, auth):
    make_claim(make_item(), student)
    rejected = make_claim(make_item(name="Umbrella", category="other"), student, status="rejected")
    resp = client.get("/api/v1/claims?status=rejected", headers=auth(staff))
    assert [c["id"] for c in resp.get_json()["claims"]] == [rejected.id]


def test_get_claim_of_other_student_is_404(client, student, other_student, make_item, make_claim, auth):
    claim = make_claim(make_item(), other_student)
    assert client.get(f"/api/v1/claims/{claim.id}", headers=auth(student)).status_code == 404
    assert client.get(f"/api/v1/claims/{claim.id}", headers=auth(other_student)).status_code == 200


def test_claiming_archived_item_is_409(client, student, make_item, auth):
    item = make_item(status="archived")
    resp = client.post("/api/v1/claims", json={"itemId": item.id, "description": "mine"}, headers=auth(student))
    assert resp.status_code == 409

from lostfound.modules.analytics.service import get_analytics, recovery_rate


def test_empty_dataset(app):
    stats = get_analytics()
    assert stats == {
        "totalItems": 0,
        "itemsReturned": 0,
        "pendingClaims": 0,
        "recoveryRate": 0,
        "categoryStats": [],
        "locationStats": [],
    }


def test_recovery_rate_rounding():
    assert recovery_rate(0, 0) == 0
    assert recovery_rate(3, 1) == 33.33
    assert recovery_rate(4, 4) == 100


def test_counts_and_histograms(student, other_student, make_item, make_claim):
    phone = make_item()
    make_item(name="Charger", status="claimed")
    make_item(name="Hoodie", category="clothing", location="gym", status="archived")
    make_claim(phone, student)
    make_claim(phone, other_student, status="rejected")

    stats = get_analytics()
    assert stats["totalItems"] == 3
    assert stats["itemsReturned"] == 1
    assert stats["pendingClaims"] == 1
    assert stats["recoveryRate"] == 33.33
    assert stats["categoryStats"] == [
        {"category": "electronics", "count": 2},
        {"category": "clothing", "count": 1},
    ]
    assert stats["locationStats"] == [
        {"location": "cafeteria", "count": 2},
        {"location": "gym", "count": 1},
    ]


def test_analytics_endpoint_is_staff_only(client, staff, student, make_item, auth):
    make_item()
    assert client.get("/api/v1/analytics").status_code == 401
    assert client.get("/api/v1/analytics", headers=auth(student)).status_code == 403
    resp = client.get("/api/v1/analytics", headers=auth(staff))
    assert resp.status_code == 200
    assert resp.get_json()["totalItems"] == 1

import logging

from lostfound.extensions import db
from lostfound.modules.notifications import service
from lostfound.modules.notifications.bus import Broadcaster, safe_publish


def _notify(user, title="Hello", read=False):
    n = service.add_notification(user.id, title, "Body", "info")
    n.read = read
    db.session.commit()
    return n


def test_list_is_newest_first_and_filters_unread(client, student, auth):
    first = _notify(student, "First")
    second = _notify(student, "Second", read=True)
    third = _notify(student, "Third")

    body = client.get("/api/v1/notifications", headers=auth(student)).get_json()
    assert [n["id"] for n in body["notifications"]] == [third.id, second.id, first.id]

    unread = client.get("/api/v1/notifications?unreadOnly=true", headers=auth(student)).get_json()
    assert [n["id"] for n in unread["notifications"]] == [third.id, first.id]
    assert all(n["read"] is False for n in unread["notifications"])

    limited = client.get("/api/v1/notifications?limit=1", headers=auth(student)).get_json()
    assert [n["id"] for n in limited["notifications"]] == [third.id]


def test_list_only_returns_own_notifications(client, student, other_student, auth):
    _notify(other_student)
    assert client.get("/api/v1/notifications", headers=auth(student)).get_json()["notifications"] == []


def test_list_requires_authentication(client):
    assert client.get("/api/v1/notifications").status_code == 401


def test_invalid_limit(client, student, auth):
    assert client.get("/api/v1/notifications?limit=many", headers=auth(student)).status_code == 400


def test_mark_read_and_unread_count(client, student, auth):
    n = _notify(student)
    _notify(student)
    assert client.get("/api/v1/notifications/unread-count", headers=auth(student)).get_json() == {"unread": 2}

    resp = client.patch(f"/api/v1/notifications/{n.id}/read", headers=auth(student))
    assert resp.status_code == 200
    assert resp.get_json()["notification"]["read"] is True
    # Marking again is harmless
    assert client.patch(f"/api/v1/notifications/{n.id}/read", headers=auth(student)).status_code == 200
    assert client.get("/api/v1/notifications/unread-count", headers=auth(student)).get_json() == {"unread": 1}


def test_cannot_mark_someone_elses_notification(client, student, other_student, auth):
    n = _notify(other_student)
    resp = client.patch(f"/api/v1/notifications/{n.id}/read", headers=auth(student))
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Notification not found"}
    assert n.read is False


def test_mark_all_read(client, student, other_student, auth):
    _notify(student)
    _notify(student)
    _notify(student, read=True)
    _notify(other_student)

    resp = client.post("/api/v1/notifications/read-all", headers=auth(student))
    assert resp.get_json() == {"updated": 2}
    assert client.get("/api/v1/notifications/unread-count", headers=auth(student)).get_json() == {"unread": 0}
    assert client.get("/api/v1/notifications/unread-count", headers=auth(other_student)).get_json() == {"unread": 1}


def test_claim_submission_fans_out_to_open_streams(client, app, student, make_item, auth):
    broadcaster = app.extensions["broadcaster"]
    q = broadcaster.subscribe()
    item = make_item()

    client.post("/api/v1/claims", json={"itemId": item.id, "description": "mine"}, headers=auth(student))

    frame = q.get_nowait()
    assert frame["title"] == "New Claim Submitted"
    assert frame["type"] == "info"
    broadcaster.unsubscribe(q)


def test_broadcaster_delivers_to_every_subscriber():
    bus = Broadcaster()
    a, b = bus.subscribe(), bus.subscribe()
    assert bus.subscriber_count == 2

    assert bus.publish({"title": "t", "message": "m", "type": "info"}) == 2
    assert a.get_nowait()["title"] == "t"
    assert b.get_nowait()["title"] == "t"

    bus.unsubscribe(a)
    bus.unsubscribe(a)
    assert bus.subscriber_count == 1
    assert bus.publish({"title": "again"}) == 1
    assert a.empty()


def test_broadcaster_drops_frames_for_full_queues(caplog):
    bus = Broadcaster(maxsize=1)
    slow = bus.subscribe()
    assert bus.publish({"title": "one"}) == 1
    with caplog.at_level(logging.WARNING):
        assert bus.publish({"title": "two"}) == 0
    assert "slow subscriber" in caplog.text
    assert slow.get_nowait() == {"title": "one"}


def test_publish_with_no_subscribers_is_a_no_op():
    assert Broadcaster().publish({"title": "nobody"}) == 0


def test_safe_publish_logs_failures(caplog):
    def broken(frame):
        raise ConnectionError("gone")

    with caplog.at_level(logging.ERROR):
        safe_publish(broken, {"title": "x"})
    assert "Broadcast failed" in caplog.text
    safe_publish(None, {"title": "x"})


def test_stream_sends_connected_comment_then_frames(client, app):
    broadcaster = app.extensions["broadcaster"]
    resp = client.get("/api/v1/notifications/stream", buffered=False)
    assert resp.status_code == 200
    assert resp.mimetype == "text/event-stream"

    chunks = iter(resp.response)
    assert next(chunks) == b": connected\n\n"
    assert broadcaster.subscriber_count == 1

    broadcaster.publish({"title": "Claim Status Updated", "message": "m", "type": "success"})
    frame = next(chunks).decode()
    assert frame.startswith("event: notification\n")
    assert '"type": "success"' in frame

    resp.close()
    assert broadcaster.subscriber_count == 0

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request, Response, stream_with_context
import json
import time
from queue import Empty

from ...errors import ValidationError
from ...security import require_caller
from . import service

bp = Blueprint("notifications", __name__, url_prefix="/notifications")


@bp.get("")
def list_notifications():
    caller = require_caller()
    unread_only = (request.args.get("unreadOnly") or "").lower() in {"1", "true", "yes"}
    limit_raw = request.args.get("limit")
    try:
        limit = max(1, min(200, int(limit_raw))) if limit_raw else None
    except ValueError:
        raise ValidationError("limit: Not a valid integer.")
    rows = service.list_notifications(caller, unread_only=unread_only, limit=limit)
    return jsonify({"notifications": [service.notification_to_dict(n) for n in rows]})


@bp.get("/unread-count")
def unread_count():
    caller = require_caller()
    return jsonify({"unread": service.unread_count(caller)})


@bp.patch("/<int:notif_id>/read")
def mark_read(notif_id: int):
    caller = require_caller()
    n = service.mark_read(caller, notif_id)
    return jsonify({"notification": service.notification_to_dict(n)})


@bp.post("/read-all")
def mark_all_read():
    caller = require_caller()
    return jsonify({"updated": service.mark_all_read(caller)})


@bp.get("/stream")
def stream_notifications():
    """Server-Sent Events stream of broadcast frames.

    Every connected client receives every frame; clients re-fetch
    ``/notifications`` for the authoritative list.
    """
    broadcaster = current_app.extensions["broadcaster"]
    keepalive = int(current_app.config.get("SSE_KEEPALIVE_SECONDS", 15))
    q = broadcaster.subscribe()
    current_app.logger.debug("Stream opened (%s subscribers)", broadcaster.subscriber_count)

    def event_stream():
        try:
            # Initial comment to establish stream
            yield ": connected\n\n"
            while True:
                try:
                    # Keep below gunicorn's timeout to ensure periodic yields
                    frame = q.get(timeout=keepalive)
                except Empty:
                    yield "event: ping\n" + f"data: {json.dumps({'ts': int(time.time())})}\n\n"
                    continue
                yield "event: notification\n" + f"data: {json.dumps(frame)}\n\n"
        finally:
            broadcaster.unsubscribe(q)

    headers = {
        "Content-Type": "text/event-stream",
        "Cache-Control": "no-cache",
        "Connection": "keep-alive",
        "X-Accel-Buffering": "no",
    }
    return Response(stream_with_context(event_stream()), headers=headers)

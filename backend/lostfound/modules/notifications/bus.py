from __future__ import annotations

import logging
from queue import Full, Queue
from threading import Lock
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Publish = Callable[[Dict[str, Any]], None]


class Broadcaster:
    """In-memory fan-out of frames to every open stream.

    No addressing, no replay and no delivery guarantee: a frame published
    while a client is disconnected is simply lost. Not suitable for
    multi-process deployments.
    """

    def __init__(self, maxsize: int = 100):
        self._maxsize = maxsize
        self._subs: List[Queue] = []
        self._lock = Lock()

    def subscribe(self) -> Queue:
        q: Queue = Queue(maxsize=self._maxsize)
        with self._lock:
            self._subs.append(q)
        return q

    def unsubscribe(self, q: Queue) -> None:
        with self._lock:
            try:
                self._subs.remove(q)
            except ValueError:
                pass

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subs)

    def publish(self, frame: Dict[str, Any]) -> int:
        """Queue ``frame`` for every subscriber; returns how many received it."""
        with self._lock:
            subs = list(self._subs)
        delivered = 0
        for q in subs:
            try:
                q.put_nowait(frame)
                delivered += 1
            except Full:
                logger.warning("Dropping frame for a slow subscriber")
        return delivered


def safe_publish(publish: Publish | None, frame: Dict[str, Any]) -> None:
    """Call ``publish`` without letting a failure reach the caller."""
    if publish is None:
        return
    try:
        publish(frame)
    except Exception:
        logger.exception("Broadcast failed for frame %r", frame.get("title"))

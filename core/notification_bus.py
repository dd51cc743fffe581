"""Thread-safe notification bus for the mirror host.

Modules broadcast notifications to each other, node helpers push
socket notifications from their background threads, and the web host
streams everything to the browser over SSE. Subscribers are called on
the publisher's thread.
"""

import logging
import threading
from queue import Queue, Empty, Full
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class NotificationBus:
    """Publish/subscribe hub keyed by notification name."""

    def __init__(self):
        self._latest: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._sse_clients: List[Queue] = []
        self._subscribers: Dict[str, List[Callable]] = {}

    def publish(self, notification: str, payload: Any = None, sender: Optional[str] = None):
        """Deliver a notification from any thread."""
        with self._lock:
            self._latest[notification] = payload
            clients = list(self._sse_clients)
            callbacks = list(self._subscribers.get(notification, []))
            callbacks.extend(self._subscribers.get("*", []))

        dead = []
        for q in clients:
            try:
                q.put_nowait((notification, payload, sender))
            except Full:
                dead.append(q)
        if dead:
            with self._lock:
                for q in dead:
                    if q in self._sse_clients:
                        self._sse_clients.remove(q)

        for cb in callbacks:
            try:
                cb(notification, payload, sender)
            except Exception as exc:
                logger.error("NotificationBus callback error [%s]: %s", notification, exc)

    def subscribe(self, notification: str, callback: Callable):
        """Register callback(notification, payload, sender). Use "*" for all."""
        with self._lock:
            self._subscribers.setdefault(notification, []).append(callback)

    def unsubscribe(self, notification: str, callback: Callable):
        with self._lock:
            if notification in self._subscribers:
                self._subscribers[notification] = [
                    cb for cb in self._subscribers[notification] if cb is not callback
                ]

    def get_latest(self, notification: Optional[str] = None) -> Any:
        """Get the latest payload for a notification, or all of them."""
        with self._lock:
            if notification:
                return self._latest.get(notification)
            return dict(self._latest)

    def sse_stream(self, keepalive: float = 30.0):
        """Generator for SSE clients. Yields (notification, payload, sender)."""
        q = Queue(maxsize=100)
        with self._lock:
            self._sse_clients.append(q)
        try:
            while True:
                try:
                    yield q.get(timeout=keepalive)
                except Empty:
                    yield "keepalive", None, None
        finally:
            with self._lock:
                if q in self._sse_clients:
                    self._sse_clients.remove(q)

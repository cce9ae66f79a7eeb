"""EventBus — thread-safe pub/sub for application events.

The presenter reports marker clicks through a plain callback; the API
wires that callback to ``EventBus.publish`` so log panels and other
readers can pick events up from their own queue.
"""

from __future__ import annotations

import queue
import threading

from infolayer.models import AppEvent


class EventBus:
    """Simple thread-safe pub/sub for pushing events to subscribers."""

    def __init__(self, maxsize: int = 100) -> None:
        self._lock = threading.Lock()
        self._maxsize = maxsize
        self._subscribers: list[queue.Queue] = []

    def subscribe(self) -> queue.Queue:
        """Subscribe to events. Returns a Queue that receives all events."""
        q: queue.Queue = queue.Queue(maxsize=self._maxsize)
        with self._lock:
            self._subscribers.append(q)
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            try:
                self._subscribers.remove(q)
            except ValueError:
                pass

    def publish(self, event_type: str, data: dict | None = None) -> None:
        msg = {"type": event_type}
        if data is not None:
            msg["data"] = data
        with self._lock:
            for q in self._subscribers:
                try:
                    q.put_nowait(msg)
                except queue.Full:
                    # Drop oldest so the newest click is never lost
                    try:
                        q.get_nowait()
                    except queue.Empty:
                        pass
                    try:
                        q.put_nowait(msg)
                    except queue.Full:
                        pass

    def publish_app_event(self, event: AppEvent) -> None:
        """Callback form used as the presenter's event sink."""
        self.publish("app_state", event.to_dict())


def drain(q: queue.Queue) -> list[dict]:
    """Pop everything currently queued, oldest first."""
    items = []
    while True:
        try:
            items.append(q.get_nowait())
        except queue.Empty:
            return items

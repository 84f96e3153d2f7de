"""In-memory publish/subscribe of new notifications, keyed by recipient.

Every subscriber owns an unbounded queue, so rapid bursts are never
coalesced or dropped. Not suitable for multi-process deployments; those
need a broker-backed bus with the same interface.
"""

from queue import Empty, Queue
from threading import Lock


def channel_name(user_id) -> str:
    return f"user:{user_id}:notifications"


class Subscription:
    def __init__(self, user_id):
        self.user_id = str(user_id)
        self.channel = channel_name(user_id)
        self._queue: Queue = Queue()

    def put(self, payload: dict) -> None:
        self._queue.put_nowait(payload)

    def get(self, timeout: float | None = None) -> dict | None:
        """Next payload, or None if nothing arrives within `timeout`."""
        try:
            return self._queue.get(timeout=timeout)
        except Empty:
            return None

    def drain(self) -> list[dict]:
        payloads = []
        while True:
            try:
                payloads.append(self._queue.get_nowait())
            except Empty:
                return payloads


class NotificationBus:
    def __init__(self):
        self._subscribers: dict[str, list[Subscription]] = {}
        self._lock = Lock()

    def subscribe(self, user_id) -> Subscription:
        subscription = Subscription(user_id)
        with self._lock:
            self._subscribers.setdefault(subscription.user_id, []).append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            subscribers = self._subscribers.get(subscription.user_id)
            if not subscribers or subscription not in subscribers:
                return
            subscribers.remove(subscription)
            if not subscribers:
                self._subscribers.pop(subscription.user_id, None)

    def subscriber_count(self, user_id) -> int:
        with self._lock:
            return len(self._subscribers.get(str(user_id), []))

    def publish(self, user_id, payload: dict) -> int:
        """Deliver to every live subscriber of `user_id`; returns how many received it."""
        with self._lock:
            subscribers = list(self._subscribers.get(str(user_id), []))
        for subscription in subscribers:
            subscription.put(payload)
        return len(subscribers)


_bus: NotificationBus | None = None


def get_bus() -> NotificationBus:
    global _bus
    if _bus is None:
        _bus = NotificationBus()
    return _bus


def reset_bus() -> None:
    global _bus
    _bus = None

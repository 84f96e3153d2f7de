"""Notification cache for one realtime subscriber.

The stream endpoint keeps one per connection and forwards a payload only
when the feed accepts it. Delivery is at-least-once, so the feed ignores
a payload whose id it already holds; the unread count only moves for
genuinely new rows. Browser clients keep the same cache on their side.
"""


class NotificationFeed:
    def __init__(self, user_id, limit: int = 50):
        self.user_id = str(user_id)
        self.limit = limit
        self._items: list[dict] = []
        self._ids: set[str] = set()

    @property
    def items(self) -> list[dict]:
        return list(self._items)

    @property
    def unread_count(self) -> int:
        return sum(1 for item in self._items if item.get("read_at") is None)

    def load(self, rows: list[dict]) -> None:
        """Replace the cache with a freshly fetched page (newest first)."""
        self._items = list(rows)[: self.limit]
        self._ids = {str(item["id"]) for item in self._items}

    def apply(self, payload: dict) -> bool:
        """Add a pushed notification. Returns False for duplicates or other users' rows."""
        if str(payload.get("user_id")) != self.user_id:
            return False
        notification_id = str(payload["id"])
        if notification_id in self._ids:
            return False

        self._items.insert(0, payload)
        self._ids.add(notification_id)
        for dropped in self._items[self.limit :]:
            self._ids.discard(str(dropped["id"]))
        del self._items[self.limit :]
        return True

    def mark_read(self, notification_id, read_at) -> None:
        for item in self._items:
            if str(item["id"]) == str(notification_id) and item.get("read_at") is None:
                item["read_at"] = read_at

    def mark_all_read(self, read_at) -> None:
        for item in self._items:
            if item.get("read_at") is None:
                item["read_at"] = read_at

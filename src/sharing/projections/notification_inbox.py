"""NotificationInbox: per-user notification and unread counters."""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer
from protean.utils.globals import current_domain
from sharing.domain import sharing
from sharing.notification.events import NotificationCreated, NotificationRead
from sharing.notification.notification import Notification


@sharing.projection
class NotificationInbox:
    user_id: Identifier(identifier=True, required=True)
    total_count: Integer(default=0)
    unread_count: Integer(default=0)
    last_notification_at: DateTime()


@sharing.projector(projector_for=NotificationInbox, aggregates=[Notification])
class NotificationInboxProjector:
    def _load(self, user_id):
        repo = current_domain.repository_for(NotificationInbox)
        try:
            return repo.get(user_id)
        except ObjectNotFoundError:
            return NotificationInbox(user_id=user_id, total_count=0, unread_count=0)

    @on(NotificationCreated)
    def on_notification_created(self, event):
        inbox = self._load(event.user_id)
        inbox.total_count += 1
        inbox.unread_count += 1
        inbox.last_notification_at = event.created_at
        current_domain.repository_for(NotificationInbox).add(inbox)

    @on(NotificationRead)
    def on_notification_read(self, event):
        inbox = self._load(event.user_id)
        inbox.unread_count = max(inbox.unread_count - 1, 0)
        current_domain.repository_for(NotificationInbox).add(inbox)


def unread_count(user_id) -> int:
    """The caller's unread notification count (zero before their first notification)."""
    repo = current_domain.repository_for(NotificationInbox)
    try:
        return repo.get(str(user_id)).unread_count
    except ObjectNotFoundError:
        return 0

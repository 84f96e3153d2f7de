"""Inbox reads and read-marking for the caller's own notifications."""

from datetime import UTC, datetime

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from sharing.domain import sharing
from sharing.exceptions import NotFound
from sharing.notification.notification import Notification, NotificationType

logger = structlog.get_logger(__name__)


@sharing.command(part_of="Notification")
class MarkNotificationRead:
    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)


@sharing.command(part_of="Notification")
class MarkAllNotificationsRead:
    user_id: Identifier(required=True)


# Rows loaded per page when marking everything read
READ_BATCH = 500


def _pages_for(user_id):
    """The user's notifications in stable pages, oldest first."""
    query = current_domain.repository_for(Notification)._dao.query.filter(user_id=str(user_id))
    offset = 0
    while True:
        page = query.order_by(["created_at", "id"]).offset(offset).limit(READ_BATCH).all().items
        if page:
            yield page
        if len(page) < READ_BATCH:
            return
        offset += READ_BATCH


@sharing.command_handler(part_of=Notification)
class ReadNotificationsHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command: MarkNotificationRead):
        repo = current_domain.repository_for(Notification)
        try:
            notification = repo.get(str(command.notification_id))
        except ObjectNotFoundError:
            raise NotFound(f"Notification {command.notification_id} does not exist")

        if notification.mark_read(command.user_id):
            repo.add(notification)

    @handle(MarkAllNotificationsRead)
    def mark_all_read(self, command: MarkAllNotificationsRead):
        repo = current_domain.repository_for(Notification)
        now = datetime.now(UTC)

        marked = 0
        for page in _pages_for(command.user_id):
            for notification in page:
                if notification.mark_read(command.user_id, read_at=now):
                    repo.add(notification)
                    marked += 1

        logger.info("Notifications marked read", user_id=str(command.user_id), count=marked)
        return marked


def fetch_notifications(user_id, unread_only=False, notification_type=None, limit=50) -> list[Notification]:
    """The caller's notifications, newest first."""
    repo = current_domain.repository_for(Notification)
    criteria = {"user_id": str(user_id)}
    if notification_type is not None:
        criteria["notification_type"] = NotificationType(notification_type).value

    if unread_only:
        criteria["read_at__isnull"] = True

    return repo._dao.query.filter(**criteria).order_by(["-created_at", "-id"]).limit(limit).all().items

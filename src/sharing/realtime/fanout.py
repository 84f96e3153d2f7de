"""Realtime fanout: publishes each new notification to its recipient's channel."""

import json

import structlog
from protean.utils.mixins import handle
from sharing.domain import sharing
from sharing.notification.events import NotificationCreated
from sharing.notification.notification import LINK_FIELDS, Notification
from sharing.realtime.bus import channel_name, get_bus

logger = structlog.get_logger(__name__)


def notification_payload(event: NotificationCreated) -> dict:
    """The full notification row, as subscribers receive it."""
    payload = {
        "id": str(event.notification_id),
        "user_id": str(event.user_id),
        "actor_id": str(event.actor_id) if event.actor_id else None,
        "type": event.notification_type,
        "action": event.action,
        "metadata": json.loads(event.metadata_json) if event.metadata_json else {},
        "created_at": event.created_at.isoformat(),
        "read_at": None,
    }
    for name in LINK_FIELDS:
        value = getattr(event, name)
        payload[name] = str(value) if value else None
    return payload


@sharing.event_handler(part_of=Notification)
class RealtimeFanout:
    @handle(NotificationCreated)
    def on_notification_created(self, event: NotificationCreated) -> None:
        delivered = get_bus().publish(event.user_id, notification_payload(event))
        logger.debug(
            "Notification published",
            channel=channel_name(event.user_id),
            notification_id=str(event.notification_id),
            subscribers=delivered,
        )

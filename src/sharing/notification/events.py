"""Domain events for the Notification aggregate."""

from protean.fields import DateTime, Identifier, String, Text
from sharing.domain import sharing


@sharing.event(part_of="Notification")
class NotificationCreated:
    """A notification was written to a user's inbox.

    Carries the full row so realtime subscribers need no read-back.
    """

    __version__ = 1

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    actor_id: Identifier()
    notification_type: String(required=True)
    action: String(required=True)
    resource_id: Identifier()
    claim_id: Identifier()
    comment_id: Identifier()
    conversation_id: Identifier()
    shoutout_id: Identifier()
    community_id: Identifier()
    metadata_json: Text()
    created_at: DateTime(required=True)


@sharing.event(part_of="Notification")
class NotificationRead:
    """The recipient marked a notification as read."""

    __version__ = 1

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    read_at: DateTime(required=True)

"""Notification aggregate: an in-app notification delivered to one user.

A notification is written once by the dispatcher and is immutable
afterwards, except for `read_at`, which the recipient sets when marking
it read (individually or in bulk).
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text
from sharing.domain import sharing
from sharing.exceptions import Unauthorized
from sharing.notification.events import NotificationCreated, NotificationRead


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class NotificationType(Enum):
    # Comments
    COMMENT_REPLIED = "comment.replied"
    RESOURCE_COMMENTED = "resource.commented"
    # Claims
    CLAIM_CREATED = "claim.created"
    CLAIM_CANCELLED = "claim.cancelled"
    CLAIM_RESPONDED = "claim.responded"
    # Handoff confirmation
    RESOURCE_GIVEN = "resource.given"
    RESOURCE_RECEIVED = "resource.received"
    # Resources and events
    RESOURCE_CREATED = "resource.created"
    EVENT_CREATED = "event.created"
    RESOURCE_UPDATED = "resource.updated"
    EVENT_UPDATED = "event.updated"
    EVENT_CANCELLED = "event.cancelled"
    RESOURCE_EXPIRING = "resource.expiring"
    EVENT_STARTING = "event.starting"
    # Social
    MESSAGE_RECEIVED = "message.received"
    CONVERSATION_REQUESTED = "conversation.requested"
    SHOUTOUT_RECEIVED = "shoutout.received"
    MEMBERSHIP_UPDATED = "membership.updated"
    # System
    TRUSTLEVEL_CHANGED = "trustlevel.changed"

    @property
    def preference_key(self) -> str:
        """Key of this type in a user's preference vector map."""
        return self.value.replace(".", "_")


class NotificationAction(Enum):
    """Finer-grained label stored next to the type for two-outcome types."""

    CLAIM_APPROVED = "claim.approved"
    CLAIM_REJECTED = "claim.rejected"
    MEMBER_JOINED = "member.joined"
    MEMBER_LEFT = "member.left"


class NotificationChannel(Enum):
    IN_APP = "in_app"
    PUSH = "push"
    EMAIL = "email"


LINK_FIELDS = (
    "resource_id",
    "claim_id",
    "comment_id",
    "conversation_id",
    "shoutout_id",
    "community_id",
)

REQUIRED_LINKS = {
    NotificationType.COMMENT_REPLIED: ("resource_id", "comment_id"),
    NotificationType.RESOURCE_COMMENTED: ("resource_id", "comment_id"),
    NotificationType.CLAIM_CREATED: ("resource_id", "claim_id"),
    NotificationType.CLAIM_CANCELLED: ("resource_id", "claim_id"),
    NotificationType.CLAIM_RESPONDED: ("resource_id", "claim_id"),
    NotificationType.RESOURCE_GIVEN: ("resource_id", "claim_id"),
    NotificationType.RESOURCE_RECEIVED: ("resource_id", "claim_id"),
    NotificationType.RESOURCE_CREATED: ("resource_id", "community_id"),
    NotificationType.EVENT_CREATED: ("resource_id", "community_id"),
    NotificationType.RESOURCE_UPDATED: ("resource_id",),
    NotificationType.EVENT_UPDATED: ("resource_id",),
    NotificationType.EVENT_CANCELLED: ("resource_id",),
    NotificationType.RESOURCE_EXPIRING: ("resource_id",),
    NotificationType.EVENT_STARTING: ("resource_id",),
    NotificationType.MESSAGE_RECEIVED: ("conversation_id",),
    NotificationType.CONVERSATION_REQUESTED: ("conversation_id",),
    NotificationType.SHOUTOUT_RECEIVED: ("shoutout_id",),
    NotificationType.MEMBERSHIP_UPDATED: ("community_id",),
    NotificationType.TRUSTLEVEL_CHANGED: ("community_id",),
}

# Generated by the system rather than by another user (actor is null)
SYSTEM_TYPES = {
    NotificationType.RESOURCE_EXPIRING,
    NotificationType.EVENT_STARTING,
    NotificationType.TRUSTLEVEL_CHANGED,
}

# Push bypasses the per-type flag (the global switch still applies)
CRITICAL_TYPES = {NotificationType.EVENT_CANCELLED}

# At most one notification per (user, type, claim)
CLAIM_RESPONSE_TYPES = {
    NotificationType.CLAIM_RESPONDED,
    NotificationType.RESOURCE_GIVEN,
    NotificationType.RESOURCE_RECEIVED,
}

# At most one notification per (user, type, resource)
REMINDER_TYPES = {NotificationType.RESOURCE_EXPIRING, NotificationType.EVENT_STARTING}


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@sharing.aggregate
class Notification:
    """One notification in a user's in-app inbox."""

    user_id: Identifier(required=True)
    actor_id: Identifier()  # Null for system-generated notifications

    notification_type: String(choices=NotificationType, required=True)
    action: String(max_length=50, required=True)

    # Linked entities (only the subset relevant to the type is populated)
    resource_id: Identifier()
    claim_id: Identifier()
    comment_id: Identifier()
    conversation_id: Identifier()
    shoutout_id: Identifier()
    community_id: Identifier()

    metadata_json: Text()  # JSON: typed per notification type

    created_at: DateTime()
    read_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id, notification_type, actor_id=None, action=None, links=None, metadata=None):
        """Create an unread notification for `user_id`."""
        notification_type = NotificationType(notification_type)
        links = {name: value for name, value in (links or {}).items() if value is not None}
        _validate_links(notification_type, links)

        if notification_type not in SYSTEM_TYPES and actor_id is not None and str(actor_id) == str(user_id):
            raise ValidationError({"actor_id": ["A user cannot be notified about their own action"]})

        now = datetime.now(UTC)
        metadata_json = json.dumps(metadata or {})

        notification = cls(
            user_id=str(user_id),
            actor_id=str(actor_id) if actor_id is not None else None,
            notification_type=notification_type.value,
            action=action or notification_type.value,
            metadata_json=metadata_json,
            created_at=now,
            **{name: str(value) for name, value in links.items()},
        )

        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                user_id=notification.user_id,
                actor_id=notification.actor_id,
                notification_type=notification.notification_type,
                action=notification.action,
                metadata_json=metadata_json,
                created_at=now,
                **notification.linked_ids(),
            )
        )

        return notification

    # -------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------
    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    def linked_ids(self) -> dict:
        return {name: getattr(self, name) for name in LINK_FIELDS if getattr(self, name) is not None}

    def metadata_dict(self) -> dict:
        return json.loads(self.metadata_json) if self.metadata_json else {}

    # -------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------
    def mark_read(self, user_id, read_at=None) -> bool:
        """Stamp the notification as read. Returns False when it already was."""
        if str(user_id) != str(self.user_id):
            raise Unauthorized(f"Notification {self.id} belongs to another user")
        if self.read_at is not None:
            return False

        self.read_at = read_at or datetime.now(UTC)
        self.raise_(
            NotificationRead(
                notification_id=str(self.id),
                user_id=str(self.user_id),
                read_at=self.read_at,
            )
        )
        return True


def _validate_links(notification_type, links):
    missing = [name for name in REQUIRED_LINKS[notification_type] if not links.get(name)]
    if missing:
        raise ValidationError({name: [f"Required for {notification_type.value} notifications"] for name in missing})
    unknown = set(links) - set(LINK_FIELDS)
    if unknown:
        raise ValidationError({name: ["Not a linkable entity"] for name in sorted(unknown)})

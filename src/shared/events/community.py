"""Cross-domain event contracts for community activity.

Resources, comments, conversations, shoutouts and memberships are
authored by the community service. These contracts carry what the
sharing domain needs to replicate them and to notify the right people.
"""

from protean.core.event import BaseEvent
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text


class ResourcePublished(BaseEvent):
    """An offer, request or event was shared with a community."""

    __version__ = 1

    resource_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    community_id = Identifier(required=True)
    kind = String(required=True)  # "offer", "request" or "event"
    title = String(required=True)
    requires_approval = Boolean(default=True)
    max_attendees = Integer()
    expires_at = DateTime()
    starts_at = DateTime()
    published_at = DateTime(required=True)


class ResourceUpdated(BaseEvent):
    """The owner edited a resource; only changed values are populated."""

    __version__ = 1

    resource_id = Identifier(required=True)
    editor_id = Identifier(required=True)
    changes = Text(required=True)  # JSON list of changed field names
    title = String()
    status = String()
    max_attendees = Integer()
    expires_at = DateTime()
    starts_at = DateTime()
    updated_at = DateTime(required=True)


class ResourceCancelled(BaseEvent):
    """The owner cancelled a resource or event."""

    __version__ = 1

    resource_id = Identifier(required=True)
    cancelled_by = Identifier(required=True)
    cancelled_at = DateTime(required=True)


class CommentPosted(BaseEvent):
    """A comment (or a reply to one) was posted on a resource."""

    __version__ = 1

    comment_id = Identifier(required=True)
    resource_id = Identifier(required=True)
    author_id = Identifier(required=True)
    parent_comment_id = Identifier()
    content = Text(required=True)
    posted_at = DateTime(required=True)


class ConversationStarted(BaseEvent):
    """A direct conversation was opened between users."""

    __version__ = 1

    conversation_id = Identifier(required=True)
    initiator_id = Identifier(required=True)
    participant_ids = Text(required=True)  # JSON list of user ids, initiator included
    started_at = DateTime(required=True)


class MessageSent(BaseEvent):
    """A message was posted into a conversation."""

    __version__ = 1

    message_id = Identifier(required=True)
    conversation_id = Identifier(required=True)
    sender_id = Identifier(required=True)
    content = Text(required=True)
    sent_at = DateTime(required=True)


class ShoutoutGiven(BaseEvent):
    """A user publicly thanked another user."""

    __version__ = 1

    shoutout_id = Identifier(required=True)
    from_user_id = Identifier(required=True)
    to_user_id = Identifier(required=True)
    resource_id = Identifier()
    community_id = Identifier()
    message = Text()
    given_at = DateTime(required=True)


class MemberJoined(BaseEvent):
    """A user joined a community."""

    __version__ = 1

    community_id = Identifier(required=True)
    user_id = Identifier(required=True)
    role = String(default="member")
    joined_at = DateTime(required=True)


class MemberLeft(BaseEvent):
    """A user left a community."""

    __version__ = 1

    community_id = Identifier(required=True)
    user_id = Identifier(required=True)
    left_at = DateTime(required=True)

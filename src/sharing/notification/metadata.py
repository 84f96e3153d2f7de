"""Typed notification metadata: one pydantic model per notification type.

Metadata is persisted as JSON on the notification row. Reading it back
goes through `parse_metadata`, which is lenient with rows written by
older clients: a missing claim response or membership action is taken
from the stored action label, missing trust levels read as 0 and a
malformed `changes` list reads as empty.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator
from sharing.notification.notification import NotificationAction, NotificationType


class NotificationMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore")

    actor_name: str | None = None
    actor_avatar_url: str | None = None


class ResourceMetadata(NotificationMetadata):
    resource_title: str = ""
    resource_status: str | None = None


class CommentMetadata(ResourceMetadata):
    content_preview: str = ""


class ClaimMetadata(ResourceMetadata):
    claim_status: str | None = None
    timeslot_id: str | None = None


class ClaimResponseMetadata(ClaimMetadata):
    response: Literal["approved", "rejected"]


class HandoffMetadata(ClaimMetadata):
    role: Literal["giver", "receiver"] | None = None


class ResourceUpdateMetadata(ResourceMetadata):
    changes: list[str] = []

    @field_validator("changes", mode="before")
    @classmethod
    def _strings_only(cls, value):
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, str)]


class ReminderMetadata(ResourceMetadata):
    due_at: datetime | None = None


class MessageMetadata(NotificationMetadata):
    content_preview: str = ""


class ShoutoutMetadata(NotificationMetadata):
    resource_title: str = ""
    content_preview: str = ""


class MembershipMetadata(NotificationMetadata):
    action: Literal["joined", "left"]
    community_name: str = ""


class TrustLevelMetadata(NotificationMetadata):
    old_level: int = 0
    new_level: int = 0
    old_level_name: str | None = None
    new_level_name: str | None = None


METADATA_BY_TYPE = {
    NotificationType.COMMENT_REPLIED: CommentMetadata,
    NotificationType.RESOURCE_COMMENTED: CommentMetadata,
    NotificationType.CLAIM_CREATED: ClaimMetadata,
    NotificationType.CLAIM_CANCELLED: ClaimMetadata,
    NotificationType.CLAIM_RESPONDED: ClaimResponseMetadata,
    NotificationType.RESOURCE_GIVEN: HandoffMetadata,
    NotificationType.RESOURCE_RECEIVED: HandoffMetadata,
    NotificationType.RESOURCE_CREATED: ResourceMetadata,
    NotificationType.EVENT_CREATED: ResourceMetadata,
    NotificationType.RESOURCE_UPDATED: ResourceUpdateMetadata,
    NotificationType.EVENT_UPDATED: ResourceUpdateMetadata,
    NotificationType.EVENT_CANCELLED: ResourceUpdateMetadata,
    NotificationType.RESOURCE_EXPIRING: ReminderMetadata,
    NotificationType.EVENT_STARTING: ReminderMetadata,
    NotificationType.MESSAGE_RECEIVED: MessageMetadata,
    NotificationType.CONVERSATION_REQUESTED: MessageMetadata,
    NotificationType.SHOUTOUT_RECEIVED: ShoutoutMetadata,
    NotificationType.MEMBERSHIP_UPDATED: MembershipMetadata,
    NotificationType.TRUSTLEVEL_CHANGED: TrustLevelMetadata,
}

_RESPONSE_BY_ACTION = {
    NotificationAction.CLAIM_APPROVED.value: "approved",
    NotificationAction.CLAIM_REJECTED.value: "rejected",
}

_MEMBER_ACTION_BY_ACTION = {
    NotificationAction.MEMBER_JOINED.value: "joined",
    NotificationAction.MEMBER_LEFT.value: "left",
}


def parse_metadata(notification_type, raw: dict | None, action: str | None = None) -> NotificationMetadata:
    """Read stored metadata into the model for `notification_type`."""
    notification_type = NotificationType(notification_type)
    data = dict(raw or {})

    if notification_type == NotificationType.CLAIM_RESPONDED and data.get("response") not in ("approved", "rejected"):
        data["response"] = _RESPONSE_BY_ACTION.get(action, "approved")
    if notification_type == NotificationType.MEMBERSHIP_UPDATED and data.get("action") not in ("joined", "left"):
        data["action"] = _MEMBER_ACTION_BY_ACTION.get(action, "joined")
    if notification_type == NotificationType.TRUSTLEVEL_CHANGED:
        for key in ("old_level", "new_level"):
            if not isinstance(data.get(key), int):
                data[key] = 0
    for key in ("resource_title", "content_preview"):
        if key in data and data[key] is None:
            data[key] = ""

    return METADATA_BY_TYPE[notification_type].model_validate(data)


def build_metadata(notification_type, seed: dict, actor=None, action: str | None = None) -> dict:
    """Validate the seed for `notification_type`, add actor details, and return JSON-ready data."""
    data = dict(seed)
    if actor is not None:
        data["actor_name"] = actor.display_name
        data["actor_avatar_url"] = actor.avatar_url
    return parse_metadata(notification_type, data, action).model_dump(mode="json")

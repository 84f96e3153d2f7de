"""Short title/body text for push and email deliveries, per notification type."""

from sharing.notification.notification import NotificationAction, NotificationType

_MESSAGES = {
    NotificationType.COMMENT_REPLIED: ("New reply", "{actor} replied to your comment on {title}"),
    NotificationType.RESOURCE_COMMENTED: ("New comment", "{actor} commented on {title}"),
    NotificationType.CLAIM_CREATED: ("New claim", "{actor} claimed {title}"),
    NotificationType.CLAIM_CANCELLED: ("Claim cancelled", "{actor} cancelled the claim on {title}"),
    NotificationType.CLAIM_RESPONDED: ("Claim update", "{actor} responded to your claim on {title}"),
    NotificationType.RESOURCE_GIVEN: ("Please confirm", "{actor} marked {title} as given. Did you receive it?"),
    NotificationType.RESOURCE_RECEIVED: ("Please confirm", "{actor} marked {title} as received. Did you hand it over?"),
    NotificationType.RESOURCE_CREATED: ("New in your community", "{actor} shared {title}"),
    NotificationType.EVENT_CREATED: ("New event", "{actor} created the event {title}"),
    NotificationType.RESOURCE_UPDATED: ("Resource updated", "{actor} updated {title}"),
    NotificationType.EVENT_UPDATED: ("Event updated", "{actor} updated the event {title}"),
    NotificationType.EVENT_CANCELLED: ("Event cancelled", "{actor} cancelled the event {title}"),
    NotificationType.RESOURCE_EXPIRING: ("Expiring soon", "{title} expires soon"),
    NotificationType.EVENT_STARTING: ("Starting soon", "{title} starts soon"),
    NotificationType.MESSAGE_RECEIVED: ("New message", "{actor}: {preview}"),
    NotificationType.CONVERSATION_REQUESTED: ("New conversation", "{actor} wants to chat: {preview}"),
    NotificationType.SHOUTOUT_RECEIVED: ("Shoutout!", "{actor} gave you a shoutout"),
    NotificationType.MEMBERSHIP_UPDATED: ("Membership update", "{actor} changed their membership"),
    NotificationType.TRUSTLEVEL_CHANGED: ("Trust level changed", "You are now {new_level_name}"),
}

_ACTION_MESSAGES = {
    NotificationAction.CLAIM_APPROVED.value: ("Claim approved", "{actor} approved your claim on {title}"),
    NotificationAction.CLAIM_REJECTED.value: ("Claim declined", "{actor} declined your claim on {title}"),
    NotificationAction.MEMBER_JOINED.value: ("New member", "{actor} joined your community"),
    NotificationAction.MEMBER_LEFT.value: ("Member left", "{actor} left your community"),
}


def render(notification_type, action: str | None, metadata: dict) -> dict:
    """Return {"title", "body"} for a delivery."""
    notification_type = NotificationType(notification_type)
    title, body = _ACTION_MESSAGES.get(action) or _MESSAGES[notification_type]
    values = {
        "actor": metadata.get("actor_name") or "Someone",
        "title": metadata.get("resource_title") or "your post",
        "preview": metadata.get("content_preview") or "",
        "new_level_name": metadata.get("new_level_name") or f"level {metadata.get('new_level', 0)}",
    }
    return {"title": title, "body": body.format(**values)}

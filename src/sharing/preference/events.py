"""Domain events for the NotificationPreference aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String
from sharing.domain import sharing


@sharing.event(part_of="NotificationPreference")
class PreferencesCreated:
    """Default notification preferences were materialized for a user."""

    __version__ = 1

    preference_id: Identifier(required=True)
    user_id: Identifier(required=True)
    push_enabled: Boolean(required=True)
    email_enabled: Boolean(required=True)
    created_at: DateTime(required=True)


@sharing.event(part_of="NotificationPreference")
class TypePreferenceUpdated:
    """A user changed the channels for one notification type."""

    __version__ = 1

    preference_id: Identifier(required=True)
    user_id: Identifier(required=True)
    notification_type: String(required=True)
    in_app: Boolean(required=True)
    push: Boolean(required=True)
    email: Boolean(required=True)
    updated_at: DateTime(required=True)


@sharing.event(part_of="NotificationPreference")
class GlobalPreferenceUpdated:
    """A user flipped the global push or email switch."""

    __version__ = 1

    preference_id: Identifier(required=True)
    user_id: Identifier(required=True)
    field_name: String(required=True)
    value: Boolean(required=True)
    updated_at: DateTime(required=True)

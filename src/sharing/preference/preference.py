"""NotificationPreference aggregate: a user's channel matrix.

Per notification type, the user chooses in-app, push and email delivery
independently. Two global switches gate push and email as a whole.
A row is created with defaults the first time it is needed: every type
in-app and push, no email, and both global switches off.
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Text
from sharing.domain import sharing
from sharing.notification.notification import NotificationType
from sharing.preference.events import (
    GlobalPreferenceUpdated,
    PreferencesCreated,
    TypePreferenceUpdated,
)

GLOBAL_FIELDS = ("push_enabled", "email_enabled")


@sharing.value_object
class ChannelVector:
    """Delivery choice for one notification type."""

    in_app: Boolean(default=True)
    push: Boolean(default=True)
    email: Boolean(default=False)

    def as_dict(self) -> dict:
        return {"in_app": self.in_app, "push": self.push, "email": self.email}


DEFAULT_VECTOR = {"in_app": True, "push": True, "email": False}


def _default_settings() -> dict:
    return {notification_type.preference_key: dict(DEFAULT_VECTOR) for notification_type in NotificationType}


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@sharing.aggregate
class NotificationPreference:
    user_id: Identifier(required=True, unique=True)

    # Global switches
    push_enabled: Boolean(default=False)
    email_enabled: Boolean(default=False)

    # Per-type vectors
    channel_settings: Text()  # JSON {preference_key: {in_app, push, email}}

    created_at: DateTime()
    updated_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create_default(cls, user_id):
        now = datetime.now(UTC)

        preference = cls(
            user_id=user_id,
            push_enabled=False,
            email_enabled=False,
            channel_settings=json.dumps(_default_settings()),
            created_at=now,
            updated_at=now,
        )

        preference.raise_(
            PreferencesCreated(
                preference_id=str(preference.id),
                user_id=str(user_id),
                push_enabled=False,
                email_enabled=False,
                created_at=now,
            )
        )

        return preference

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def _settings(self) -> dict:
        settings = _default_settings()
        if self.channel_settings:
            settings.update(json.loads(self.channel_settings))
        return settings

    def channels_for(self, notification_type) -> ChannelVector:
        key = NotificationType(notification_type).preference_key
        return ChannelVector(**self._settings()[key])

    def as_matrix(self) -> dict:
        """All type vectors keyed by preference key."""
        return self._settings()

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def update_type(self, notification_type, in_app=None, push=None, email=None):
        """Change the channel vector for one type; omitted channels keep their value."""
        notification_type = NotificationType(notification_type)
        settings = self._settings()
        vector = settings[notification_type.preference_key]

        for channel, value in (("in_app", in_app), ("push", push), ("email", email)):
            if value is not None:
                vector[channel] = value

        now = datetime.now(UTC)
        self.channel_settings = json.dumps(settings)
        self.updated_at = now

        self.raise_(
            TypePreferenceUpdated(
                preference_id=str(self.id),
                user_id=str(self.user_id),
                notification_type=notification_type.value,
                in_app=vector["in_app"],
                push=vector["push"],
                email=vector["email"],
                updated_at=now,
            )
        )

    def update_global(self, field_name, value):
        if field_name not in GLOBAL_FIELDS:
            raise ValidationError({"field": [f"Unknown global preference: {field_name}"]})
        if not isinstance(value, bool):
            raise ValidationError({"value": ["Global preferences are true or false"]})

        now = datetime.now(UTC)
        setattr(self, field_name, value)
        self.updated_at = now

        self.raise_(
            GlobalPreferenceUpdated(
                preference_id=str(self.id),
                user_id=str(self.user_id),
                field_name=field_name,
                value=value,
                updated_at=now,
            )
        )

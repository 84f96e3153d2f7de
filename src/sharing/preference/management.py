"""Preference Store operations: get-or-create and the two update commands.

Every operation is keyed by the caller's own user id; there is no way
to name another user's preferences.
"""

import structlog
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from sharing.domain import sharing
from sharing.notification.notification import NotificationType
from sharing.preference.preference import NotificationPreference

logger = structlog.get_logger(__name__)


def find_preferences(user_id) -> NotificationPreference | None:
    repo = current_domain.repository_for(NotificationPreference)
    prefs = repo._dao.query.filter(user_id=str(user_id)).all().items
    return prefs[0] if prefs else None


def get_or_create_preferences(user_id) -> NotificationPreference:
    """Return the user's preferences, materializing the defaults on first access."""
    preference = find_preferences(user_id)
    if preference is None:
        preference = NotificationPreference.create_default(user_id=str(user_id))
        current_domain.repository_for(NotificationPreference).add(preference)
        logger.info("Default preferences created", user_id=str(user_id))
    return preference


@sharing.command(part_of="NotificationPreference")
class UpdateTypePreference:
    """Change the caller's channels for one notification type."""

    user_id: Identifier(required=True)
    notification_type: String(choices=NotificationType, required=True)
    in_app: Boolean()
    push: Boolean()
    email: Boolean()


@sharing.command(part_of="NotificationPreference")
class UpdateGlobalPreference:
    """Flip the caller's global push or email switch."""

    user_id: Identifier(required=True)
    field_name: String(required=True, max_length=20)
    value: Boolean(required=True)


@sharing.command_handler(part_of=NotificationPreference)
class ManagePreferencesHandler:
    @handle(UpdateTypePreference)
    def update_type(self, command: UpdateTypePreference):
        preference = get_or_create_preferences(command.user_id)
        preference.update_type(
            command.notification_type,
            in_app=command.in_app,
            push=command.push,
            email=command.email,
        )
        current_domain.repository_for(NotificationPreference).add(preference)

    @handle(UpdateGlobalPreference)
    def update_global(self, command: UpdateGlobalPreference):
        preference = get_or_create_preferences(command.user_id)
        preference.update_global(command.field_name, command.value)
        current_domain.repository_for(NotificationPreference).add(preference)

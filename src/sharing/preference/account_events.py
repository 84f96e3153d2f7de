"""Inbound account event handler: profiles and default preferences.

New users get a profile replica (for actor names) and their default
notification preferences, both idempotently.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from sharing.community.lookups import find_profile
from sharing.community.profile import Profile
from sharing.domain import sharing
from sharing.preference.management import get_or_create_preferences
from sharing.preference.preference import NotificationPreference
from shared.events.accounts import ProfileUpdated, UserRegistered

logger = structlog.get_logger(__name__)

sharing.register_external_event(UserRegistered, "Accounts.UserRegistered.v1")
sharing.register_external_event(ProfileUpdated, "Accounts.ProfileUpdated.v1")


def _upsert_profile(event) -> Profile:
    profile = find_profile(event.user_id) or Profile(user_id=str(event.user_id))
    profile.refresh(
        first_name=event.first_name,
        last_name=event.last_name,
        full_name=event.full_name,
        avatar_url=event.avatar_url,
    )
    current_domain.repository_for(Profile).add(profile)
    return profile


@sharing.event_handler(part_of=NotificationPreference, stream_category="accounts::user")
class AccountEventsHandler:
    @handle(UserRegistered)
    def on_user_registered(self, event: UserRegistered) -> None:
        _upsert_profile(event)
        preference = get_or_create_preferences(event.user_id)
        logger.info(
            "Account ready for notifications",
            user_id=str(event.user_id),
            preference_id=str(preference.id),
        )

    @handle(ProfileUpdated)
    def on_profile_updated(self, event: ProfileUpdated) -> None:
        _upsert_profile(event)

"""Cross-domain event contracts for platform account events.

Published by the accounts service when a user signs up or edits their
profile. The sharing domain keeps a profile replica for actor names and
materializes default notification preferences for new users.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, String


class UserRegistered(BaseEvent):
    """A new user account was created."""

    __version__ = 1

    user_id = Identifier(required=True)
    first_name = String()
    last_name = String()
    full_name = String()
    avatar_url = String()
    registered_at = DateTime(required=True)


class ProfileUpdated(BaseEvent):
    """A user changed their name or avatar."""

    __version__ = 1

    user_id = Identifier(required=True)
    first_name = String()
    last_name = String()
    full_name = String()
    avatar_url = String()
    updated_at = DateTime(required=True)

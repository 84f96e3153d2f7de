"""Actor resolution: display details of the user who caused a notification."""

from dataclasses import dataclass

from sharing.community.lookups import find_profile


@dataclass(frozen=True)
class ActorInfo:
    user_id: str
    display_name: str | None
    avatar_url: str | None


def display_name_for(first_name=None, last_name=None, full_name=None) -> str | None:
    """Explicit full name, else "first last" when both exist, else the first name."""
    if full_name:
        return full_name
    if first_name and last_name:
        return f"{first_name} {last_name}"
    return first_name or None


def resolve_actor(actor_id) -> ActorInfo | None:
    """Look up the actor's profile. Returns None for system notifications."""
    if actor_id is None:
        return None

    profile = find_profile(actor_id)
    if profile is None:
        return ActorInfo(user_id=str(actor_id), display_name=None, avatar_url=None)

    return ActorInfo(
        user_id=str(actor_id),
        display_name=display_name_for(profile.first_name, profile.last_name, profile.full_name),
        avatar_url=profile.avatar_url,
    )

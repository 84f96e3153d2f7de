"""Read helpers over the community replicas."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from sharing.community.comment import Comment
from sharing.community.conversation import Conversation
from sharing.community.membership import ORGANIZER_ROLES, Membership
from sharing.community.message import Message
from sharing.community.profile import Profile
from sharing.community.resource import Resource
from sharing.community.shoutout import Shoutout
from sharing.exceptions import NotFound

# Upper bound for fan-out queries; the default page is 100 rows
MAX_ROWS = 10_000


def get_resource(resource_id) -> Resource:
    try:
        return current_domain.repository_for(Resource).get(str(resource_id))
    except ObjectNotFoundError:
        raise NotFound(f"Resource {resource_id} does not exist")


def find_resource(resource_id) -> Resource | None:
    try:
        return current_domain.repository_for(Resource).get(str(resource_id))
    except ObjectNotFoundError:
        return None


def find_profile(user_id) -> Profile | None:
    repo = current_domain.repository_for(Profile)
    profiles = repo._dao.query.filter(user_id=str(user_id)).all().items
    return profiles[0] if profiles else None


def find_comment(comment_id) -> Comment | None:
    try:
        return current_domain.repository_for(Comment).get(str(comment_id))
    except ObjectNotFoundError:
        return None


def find_conversation(conversation_id) -> Conversation | None:
    try:
        return current_domain.repository_for(Conversation).get(str(conversation_id))
    except ObjectNotFoundError:
        return None


def find_message(message_id) -> Message | None:
    try:
        return current_domain.repository_for(Message).get(str(message_id))
    except ObjectNotFoundError:
        return None


def find_shoutout(shoutout_id) -> Shoutout | None:
    try:
        return current_domain.repository_for(Shoutout).get(str(shoutout_id))
    except ObjectNotFoundError:
        return None


def find_membership(community_id, user_id) -> Membership | None:
    repo = current_domain.repository_for(Membership)
    rows = repo._dao.query.filter(community_id=str(community_id), user_id=str(user_id)).all().items
    return rows[0] if rows else None


def _active_members(community_id) -> list[Membership]:
    repo = current_domain.repository_for(Membership)
    return repo._dao.query.filter(community_id=str(community_id), active=True).limit(MAX_ROWS).all().items


def community_member_ids(community_id) -> list[str]:
    return [str(m.user_id) for m in _active_members(community_id)]


def organizer_ids(community_id) -> list[str]:
    return [str(m.user_id) for m in _active_members(community_id) if m.role in ORGANIZER_ROLES]

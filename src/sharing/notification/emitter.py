"""Event emitter: which notifications a platform action may produce.

Every function here is pure: it takes the action's data (and the
lookups its caller already made) and returns a list of candidate
notifications. Nothing is filtered for the recipient's preferences or
for self-notification here; that is the dispatcher's job.
"""

from dataclasses import dataclass, field

from sharing.claim.claim import ClaimStatus, HandoffRole
from sharing.community.resource import ResourceStatus
from sharing.notification.notification import NotificationAction, NotificationType
from sharing.trust.levels import level_name


@dataclass(frozen=True)
class CandidateNotification:
    target_user_id: str
    actor_id: str | None
    notification_type: NotificationType
    action: str | None = None
    links: dict = field(default_factory=dict)
    metadata_seed: dict = field(default_factory=dict)


def preview(text, length=200) -> str:
    return (text or "")[:length]


def _resource_seed(resource) -> dict:
    if resource is None:
        return {}
    return {"resource_title": resource.title or "", "resource_status": resource.status}


def _claim_links(claim) -> dict:
    return {"resource_id": str(claim.resource_id), "claim_id": str(claim.id)}


def _claim_seed(claim, resource) -> dict:
    seed = _resource_seed(resource)
    seed["claim_status"] = claim.status
    if claim.timeslot_id:
        seed["timeslot_id"] = str(claim.timeslot_id)
    return seed


# ---------------------------------------------------------------------------
# Claims
# ---------------------------------------------------------------------------
def claim_created(claim, resource) -> list[CandidateNotification]:
    """The owner hears about every new claim on their resource."""
    return [
        CandidateNotification(
            target_user_id=str(claim.owner_id),
            actor_id=str(claim.claimant_id),
            notification_type=NotificationType.CLAIM_CREATED,
            links=_claim_links(claim),
            metadata_seed=_claim_seed(claim, resource),
        )
    ]


def claim_status_changed(claim, step, actor_id, resource) -> list[CandidateNotification]:
    """Notifications for the step a claim transition just recorded."""
    step = ClaimStatus(step)
    seed = _claim_seed(claim, resource)
    links = _claim_links(claim)

    if step in (ClaimStatus.APPROVED, ClaimStatus.REJECTED):
        action = (
            NotificationAction.CLAIM_APPROVED if step == ClaimStatus.APPROVED else NotificationAction.CLAIM_REJECTED
        )
        return [
            CandidateNotification(
                target_user_id=str(claim.claimant_id),
                actor_id=actor_id,
                notification_type=NotificationType.CLAIM_RESPONDED,
                action=action.value,
                links=links,
                metadata_seed={**seed, "response": step.value},
            )
        ]

    if step == ClaimStatus.CANCELLED:
        return [
            CandidateNotification(
                target_user_id=claim.counterparty_of(actor_id),
                actor_id=actor_id,
                notification_type=NotificationType.CLAIM_CANCELLED,
                links=links,
                metadata_seed=seed,
            )
        ]

    # The giver confirmed, so the receiver must confirm, and vice versa
    if step == ClaimStatus.GIVEN:
        return [
            CandidateNotification(
                target_user_id=claim.receiver_id,
                actor_id=actor_id,
                notification_type=NotificationType.RESOURCE_GIVEN,
                links=links,
                metadata_seed={**seed, "role": HandoffRole.GIVER.value},
            )
        ]

    if step == ClaimStatus.RECEIVED:
        return [
            CandidateNotification(
                target_user_id=claim.giver_id,
                actor_id=actor_id,
                notification_type=NotificationType.RESOURCE_RECEIVED,
                links=links,
                metadata_seed={**seed, "role": HandoffRole.RECEIVER.value},
            )
        ]

    return []


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------
def comment_posted(comment_id, resource, author_id, content, parent_author_id=None, preview_length=200):
    """A reply notifies the parent comment's author. The resource owner is
    notified as well, unless they are that author."""
    candidates = []
    links = {"resource_id": str(resource.id), "comment_id": str(comment_id)}
    seed = {**_resource_seed(resource), "content_preview": preview(content, preview_length)}

    if parent_author_id is not None:
        candidates.append(
            CandidateNotification(
                target_user_id=str(parent_author_id),
                actor_id=str(author_id),
                notification_type=NotificationType.COMMENT_REPLIED,
                links=links,
                metadata_seed=seed,
            )
        )

    owner_id = str(resource.owner_id)
    if parent_author_id is None or owner_id != str(parent_author_id):
        candidates.append(
            CandidateNotification(
                target_user_id=owner_id,
                actor_id=str(author_id),
                notification_type=NotificationType.RESOURCE_COMMENTED,
                links=links,
                metadata_seed=seed,
            )
        )

    return candidates


# ---------------------------------------------------------------------------
# Resources and events
# ---------------------------------------------------------------------------
def resource_published(resource, member_ids) -> list[CandidateNotification]:
    notification_type = NotificationType.EVENT_CREATED if resource.is_event else NotificationType.RESOURCE_CREATED
    links = {"resource_id": str(resource.id), "community_id": str(resource.community_id)}
    return [
        CandidateNotification(
            target_user_id=member_id,
            actor_id=str(resource.owner_id),
            notification_type=notification_type,
            links=links,
            metadata_seed=_resource_seed(resource),
        )
        for member_id in member_ids
    ]


def resource_changed(resource, editor_id, changes, claimant_ids) -> list[CandidateNotification]:
    """Holders of active claims hear about edits and cancellations."""
    cancelled = resource.status == ResourceStatus.CANCELLED.value
    if resource.is_event:
        notification_type = NotificationType.EVENT_CANCELLED if cancelled else NotificationType.EVENT_UPDATED
    else:
        notification_type = NotificationType.RESOURCE_UPDATED

    links = {"resource_id": str(resource.id)}
    if resource.community_id:
        links["community_id"] = str(resource.community_id)

    return [
        CandidateNotification(
            target_user_id=claimant_id,
            actor_id=str(editor_id),
            notification_type=notification_type,
            links=links,
            metadata_seed={**_resource_seed(resource), "changes": list(changes)},
        )
        for claimant_id in claimant_ids
    ]


def resource_expiring(resource, due_at) -> list[CandidateNotification]:
    return [
        CandidateNotification(
            target_user_id=str(resource.owner_id),
            actor_id=None,
            notification_type=NotificationType.RESOURCE_EXPIRING,
            links={"resource_id": str(resource.id)},
            metadata_seed={**_resource_seed(resource), "due_at": due_at.isoformat()},
        )
    ]


def event_starting(resource, participant_ids, due_at) -> list[CandidateNotification]:
    targets = [str(resource.owner_id)] + [pid for pid in participant_ids if pid != str(resource.owner_id)]
    return [
        CandidateNotification(
            target_user_id=target,
            actor_id=None,
            notification_type=NotificationType.EVENT_STARTING,
            links={"resource_id": str(resource.id)},
            metadata_seed={**_resource_seed(resource), "due_at": due_at.isoformat()},
        )
        for target in targets
    ]


# ---------------------------------------------------------------------------
# Social
# ---------------------------------------------------------------------------
def membership_changed(community_id, user_id, joined: bool, organizer_ids) -> list[CandidateNotification]:
    action = NotificationAction.MEMBER_JOINED if joined else NotificationAction.MEMBER_LEFT
    return [
        CandidateNotification(
            target_user_id=organizer_id,
            actor_id=str(user_id),
            notification_type=NotificationType.MEMBERSHIP_UPDATED,
            action=action.value,
            links={"community_id": str(community_id)},
            metadata_seed={"action": "joined" if joined else "left"},
        )
        for organizer_id in organizer_ids
    ]


def message_sent(conversation_id, sender_id, participant_ids, content, first_message, preview_length=200):
    """The first message of a conversation is a request; later ones are plain messages."""
    notification_type = (
        NotificationType.CONVERSATION_REQUESTED if first_message else NotificationType.MESSAGE_RECEIVED
    )
    return [
        CandidateNotification(
            target_user_id=participant_id,
            actor_id=str(sender_id),
            notification_type=notification_type,
            links={"conversation_id": str(conversation_id)},
            metadata_seed={"content_preview": preview(content, preview_length)},
        )
        for participant_id in participant_ids
        if participant_id != str(sender_id)
    ]


def shoutout_given(shoutout_id, from_user_id, to_user_id, message, resource=None, community_id=None):
    links = {"shoutout_id": str(shoutout_id)}
    if resource is not None:
        links["resource_id"] = str(resource.id)
    if community_id:
        links["community_id"] = str(community_id)
    return [
        CandidateNotification(
            target_user_id=str(to_user_id),
            actor_id=str(from_user_id),
            notification_type=NotificationType.SHOUTOUT_RECEIVED,
            links=links,
            metadata_seed={
                "resource_title": resource.title if resource is not None else "",
                "content_preview": preview(message),
            },
        )
    ]


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------
def trust_level_changed(user_id, community_id, old_level, new_level) -> list[CandidateNotification]:
    """Only a change of discretized level is worth telling the user about."""
    if old_level == new_level:
        return []
    return [
        CandidateNotification(
            target_user_id=str(user_id),
            actor_id=None,
            notification_type=NotificationType.TRUSTLEVEL_CHANGED,
            links={"community_id": str(community_id)},
            metadata_seed={
                "old_level": old_level,
                "new_level": new_level,
                "old_level_name": level_name(old_level),
                "new_level_name": level_name(new_level),
            },
        )
    ]

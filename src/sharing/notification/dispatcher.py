"""Notification dispatcher: turns a candidate into deliveries.

For each candidate, in order:
    1. drop it when the actor is the recipient,
    2. drop it when a uniqueness-guarded notification already exists,
    3. resolve the recipient's preferences (materializing defaults),
    4. enrich the metadata with the actor's display details,
    5. persist the in-app row if the type's in-app flag allows it,
    6. hand push and email to their sinks when allowed.

Push and email are best-effort. A sink that fails, times out or raises
is logged and forgotten; it never affects the in-app row or the action
that produced the candidate.
"""

from dataclasses import dataclass
from enum import Enum

import structlog
from protean.utils.globals import current_domain
from sharing.channel import get_channel
from sharing.community.lookups import MAX_ROWS
from sharing.config import setting
from sharing.exceptions import DeliveryFailure, DuplicateSuppressed
from sharing.notification.actor import resolve_actor
from sharing.notification.emitter import CandidateNotification
from sharing.notification.messages import render
from sharing.notification.metadata import build_metadata
from sharing.notification.notification import (
    CLAIM_RESPONSE_TYPES,
    CRITICAL_TYPES,
    REMINDER_TYPES,
    Notification,
    NotificationChannel,
    NotificationType,
)
from sharing.preference.management import get_or_create_preferences

logger = structlog.get_logger(__name__)


class Suppression(Enum):
    SELF = "self"
    DUPLICATE = "duplicate"


@dataclass
class DispatchResult:
    target_user_id: str
    notification_type: NotificationType
    notification_id: str | None = None
    pushed: bool = False
    emailed: bool = False
    suppressed: Suppression | None = None

    @property
    def persisted(self) -> bool:
        return self.notification_id is not None


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------
def is_self_notification(candidate: CandidateNotification) -> bool:
    return candidate.actor_id is not None and str(candidate.actor_id) == str(candidate.target_user_id)


def _dedup_key(candidate: CandidateNotification) -> dict | None:
    if candidate.notification_type in CLAIM_RESPONSE_TYPES:
        return {"claim_id": str(candidate.links["claim_id"])}
    if candidate.notification_type in REMINDER_TYPES:
        return {"resource_id": str(candidate.links["resource_id"])}
    return None


def ensure_not_duplicate(candidate: CandidateNotification) -> None:
    """Raise DuplicateSuppressed if a guarded notification already exists."""
    key = _dedup_key(candidate)
    if key is None:
        return

    repo = current_domain.repository_for(Notification)
    existing = (
        repo._dao.query.filter(
            user_id=str(candidate.target_user_id),
            notification_type=candidate.notification_type.value,
            **key,
        )
        .limit(MAX_ROWS)
        .all()
        .items
    )
    # Approve and reject share a type but are different responses
    existing = [n for n in existing if candidate.action is None or n.action == candidate.action]
    if existing:
        raise DuplicateSuppressed(f"{candidate.notification_type.value} already sent for {key}")


# ---------------------------------------------------------------------------
# Channel decisions
# ---------------------------------------------------------------------------
def should_push(global_enabled: bool, type_enabled: bool, notification_type) -> bool:
    """The global switch always applies; critical types ignore the per-type flag."""
    return bool(global_enabled) and (bool(type_enabled) or NotificationType(notification_type) in CRITICAL_TYPES)


def should_email(global_enabled: bool, type_enabled: bool) -> bool:
    return bool(global_enabled) and bool(type_enabled)


def _deliver(channel: NotificationChannel, user_id: str, payload: dict) -> bool:
    adapter = get_channel(channel.value)
    try:
        result = adapter.send(user_id, payload, timeout=setting("DELIVERY_TIMEOUT_SECONDS"))
        if result.get("status") != "sent":
            raise DeliveryFailure(channel.value, user_id, result.get("error") or "Unknown delivery error")
    except DeliveryFailure as exc:
        logger.error(
            "Notification delivery failed",
            channel=exc.channel,
            user_id=exc.user_id,
            error=exc.reason,
        )
        return False
    except Exception as exc:
        logger.error(
            "Notification delivery raised",
            channel=channel.value,
            user_id=user_id,
            error=str(exc),
        )
        return False
    return True


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------
def dispatch(candidate: CandidateNotification) -> DispatchResult:
    """Deliver one candidate notification according to the recipient's preferences."""
    notification_type = NotificationType(candidate.notification_type)
    result = DispatchResult(target_user_id=str(candidate.target_user_id), notification_type=notification_type)

    if is_self_notification(candidate):
        logger.info(
            "Self notification suppressed",
            user_id=result.target_user_id,
            notification_type=notification_type.value,
        )
        result.suppressed = Suppression.SELF
        return result

    try:
        ensure_not_duplicate(candidate)
    except DuplicateSuppressed as exc:
        logger.info("Duplicate notification suppressed", user_id=result.target_user_id, reason=str(exc))
        result.suppressed = Suppression.DUPLICATE
        return result

    preference = get_or_create_preferences(result.target_user_id)
    vector = preference.channels_for(notification_type)

    actor = resolve_actor(candidate.actor_id)
    metadata = build_metadata(notification_type, candidate.metadata_seed, actor, candidate.action)

    if vector.in_app:
        notification = Notification.create(
            user_id=result.target_user_id,
            notification_type=notification_type,
            actor_id=candidate.actor_id,
            action=candidate.action,
            links=candidate.links,
            metadata=metadata,
        )
        current_domain.repository_for(Notification).add(notification)
        result.notification_id = str(notification.id)

    payload = {
        "notification_id": result.notification_id,
        "type": notification_type.value,
        "action": candidate.action or notification_type.value,
        "actor_id": candidate.actor_id,
        **candidate.links,
        **render(notification_type, candidate.action, metadata),
        "metadata": metadata,
    }

    if should_push(preference.push_enabled, vector.push, notification_type):
        result.pushed = _deliver(NotificationChannel.PUSH, result.target_user_id, payload)
    if should_email(preference.email_enabled, vector.email):
        result.emailed = _deliver(NotificationChannel.EMAIL, result.target_user_id, payload)

    logger.info(
        "Notification dispatched",
        user_id=result.target_user_id,
        notification_type=notification_type.value,
        notification_id=result.notification_id,
        pushed=result.pushed,
        emailed=result.emailed,
    )
    return result


def dispatch_all(candidates) -> list[DispatchResult]:
    return [dispatch(candidate) for candidate in candidates]

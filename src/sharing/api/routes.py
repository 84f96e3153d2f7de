"""FastAPI routes for claims and notifications.

Thin adapters that translate HTTP requests into domain commands. The
caller's identity comes from the `X-User-Id` header (set by the
authenticating gateway) and is passed explicitly into every operation.
"""

import json

from fastapi import APIRouter, Depends, Header, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse
from protean.utils.globals import current_domain
from sharing.api.schemas import (
    ChannelVectorResponse,
    ClaimIdResponse,
    ClaimResponse,
    ClaimStatusResponse,
    CreateClaimRequest,
    MarkAllReadResponse,
    NotificationCountResponse,
    NotificationListResponse,
    NotificationResponse,
    PreferencesResponse,
    StatusResponse,
    UpdateClaimStatusRequest,
    UpdateGlobalPreferenceRequest,
    UpdateTypePreferenceRequest,
)
from sharing.claim.creation import create_claim as open_claim
from sharing.claim.status_update import load_claim, update_claim_status
from sharing.exceptions import Unauthorized
from sharing.notification.notification import LINK_FIELDS, NotificationType
from sharing.notification.reading import (
    MarkAllNotificationsRead,
    MarkNotificationRead,
    fetch_notifications,
)
from sharing.preference.management import (
    UpdateGlobalPreference,
    UpdateTypePreference,
    get_or_create_preferences,
)
from sharing.projections.notification_inbox import unread_count
from sharing.realtime.bus import get_bus
from sharing.realtime.feed import NotificationFeed

# Seconds between keep-alive frames on the notification stream
_STREAM_HEARTBEAT = 15


def caller_id(x_user_id: str = Header(..., min_length=1)) -> str:
    return x_user_id


claim_router = APIRouter(prefix="/claims", tags=["claims"])
notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


# ---------------------------------------------------------------------------
# Claims
# ---------------------------------------------------------------------------
@claim_router.post("", status_code=201, response_model=ClaimIdResponse)
async def create_claim(body: CreateClaimRequest, user_id: str = Depends(caller_id)) -> ClaimIdResponse:
    """Claim a resource as the caller."""
    claim_id = open_claim(
        resource_id=body.resource_id,
        claimant_id=user_id,
        timeslot_id=body.timeslot_id,
        request_text=body.request_text,
    )
    return ClaimIdResponse(claim_id=claim_id)


@claim_router.get("/{claim_id}", response_model=ClaimResponse)
async def get_claim(claim_id: str, user_id: str = Depends(caller_id)) -> ClaimResponse:
    """Read a claim; only its two parties may see it."""
    claim = load_claim(claim_id)
    if not claim.party_of(user_id):
        raise Unauthorized(f"User {user_id} is not a party to claim {claim_id}")
    return ClaimResponse(
        claim_id=str(claim.id),
        resource_id=str(claim.resource_id),
        timeslot_id=str(claim.timeslot_id) if claim.timeslot_id else None,
        claimant_id=str(claim.claimant_id),
        owner_id=str(claim.owner_id),
        status=claim.status,
        given_confirmed=claim.given_confirmed,
        received_confirmed=claim.received_confirmed,
        request_text=claim.request_text,
        created_at=claim.created_at,
        updated_at=claim.updated_at,
    )


@claim_router.put("/{claim_id}/status", response_model=ClaimStatusResponse)
async def change_claim_status(
    claim_id: str, body: UpdateClaimStatusRequest, user_id: str = Depends(caller_id)
) -> ClaimStatusResponse:
    """Approve, reject, cancel, or confirm the caller's half of the handoff."""
    status = update_claim_status(claim_id, body.status, actor_id=user_id)
    return ClaimStatusResponse(claim_id=claim_id, status=status)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------
def _notification_response(notification) -> NotificationResponse:
    return NotificationResponse(
        id=str(notification.id),
        user_id=str(notification.user_id),
        actor_id=str(notification.actor_id) if notification.actor_id else None,
        type=notification.notification_type,
        action=notification.action,
        metadata=notification.metadata_dict(),
        created_at=notification.created_at,
        read_at=notification.read_at,
        **{name: str(getattr(notification, name)) for name in LINK_FIELDS if getattr(notification, name)},
    )


@notification_router.get("", response_model=NotificationListResponse)
async def list_notifications(
    user_id: str = Depends(caller_id),
    unread_only: bool = False,
    notification_type: NotificationType | None = Query(None, alias="type"),
    limit: int = Query(50, ge=1, le=200),
) -> NotificationListResponse:
    """The caller's notifications, newest first."""
    rows = fetch_notifications(user_id, unread_only=unread_only, notification_type=notification_type, limit=limit)
    items = [_notification_response(row) for row in rows]
    return NotificationListResponse(notifications=items, count=len(items))


@notification_router.get("/count", response_model=NotificationCountResponse)
async def notification_count(user_id: str = Depends(caller_id)) -> NotificationCountResponse:
    return NotificationCountResponse(unread_count=unread_count(user_id))


@notification_router.put("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(user_id: str = Depends(caller_id)) -> MarkAllReadResponse:
    marked = current_domain.process(MarkAllNotificationsRead(user_id=user_id), asynchronous=False)
    return MarkAllReadResponse(marked=marked or 0)


@notification_router.put("/{notification_id}/read", response_model=StatusResponse)
async def mark_read(notification_id: str, user_id: str = Depends(caller_id)) -> StatusResponse:
    command = MarkNotificationRead(notification_id=notification_id, user_id=user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


def notification_frame(feed: NotificationFeed, payload: dict) -> str | None:
    """The SSE frame for a delivered payload, or None when this connection already sent it."""
    if not feed.apply(payload):
        return None
    return f"event: notification\ndata: {json.dumps(payload)}\n\n"


@notification_router.get("/stream")
async def notification_stream(user_id: str = Depends(caller_id)):
    """Server-sent events carrying each new notification for the caller."""
    bus = get_bus()
    subscription = bus.subscribe(user_id)
    feed = NotificationFeed(user_id)

    async def event_stream():
        try:
            yield f": connected to {subscription.channel}\n\n"
            while True:
                payload = await run_in_threadpool(subscription.get, _STREAM_HEARTBEAT)
                if payload is None:
                    yield "event: ping\ndata: {}\n\n"
                    continue
                frame = notification_frame(feed, payload)
                if frame is not None:
                    yield frame
        finally:
            bus.unsubscribe(subscription)

    headers = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no"}
    return StreamingResponse(event_stream(), media_type="text/event-stream", headers=headers)


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------
def _preferences_response(preference) -> PreferencesResponse:
    return PreferencesResponse(
        user_id=str(preference.user_id),
        push_enabled=preference.push_enabled,
        email_enabled=preference.email_enabled,
        types={key: ChannelVectorResponse(**vector) for key, vector in preference.as_matrix().items()},
    )


@notification_router.get("/preferences", response_model=PreferencesResponse)
async def get_preferences(user_id: str = Depends(caller_id)) -> PreferencesResponse:
    return _preferences_response(get_or_create_preferences(user_id))


@notification_router.put("/preferences/types/{notification_type}", response_model=PreferencesResponse)
async def update_type_preference(
    notification_type: NotificationType,
    body: UpdateTypePreferenceRequest,
    user_id: str = Depends(caller_id),
) -> PreferencesResponse:
    command = UpdateTypePreference(
        user_id=user_id,
        notification_type=notification_type.value,
        in_app=body.in_app,
        push=body.push,
        email=body.email,
    )
    current_domain.process(command, asynchronous=False)
    return _preferences_response(get_or_create_preferences(user_id))


@notification_router.put("/preferences/global", response_model=PreferencesResponse)
async def update_global_preference(
    body: UpdateGlobalPreferenceRequest, user_id: str = Depends(caller_id)
) -> PreferencesResponse:
    command = UpdateGlobalPreference(user_id=user_id, field_name=body.field, value=body.value)
    current_domain.process(command, asynchronous=False)
    return _preferences_response(get_or_create_preferences(user_id))

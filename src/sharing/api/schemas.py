"""Pydantic request/response models for the Sharing API.

API schemas are separate from Protean commands (anti-corruption pattern).
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------
class CreateClaimRequest(BaseModel):
    resource_id: str = Field(..., min_length=1)
    timeslot_id: str | None = None
    request_text: str | None = Field(None, max_length=2000)


class UpdateClaimStatusRequest(BaseModel):
    status: Literal["approved", "rejected", "cancelled", "given", "received", "completed"]


class UpdateTypePreferenceRequest(BaseModel):
    in_app: bool | None = None
    push: bool | None = None
    email: bool | None = None


class UpdateGlobalPreferenceRequest(BaseModel):
    field: Literal["push_enabled", "email_enabled"]
    value: bool


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class ClaimIdResponse(BaseModel):
    claim_id: str


class ClaimResponse(BaseModel):
    claim_id: str
    resource_id: str
    timeslot_id: str | None = None
    claimant_id: str
    owner_id: str
    status: str
    given_confirmed: bool
    received_confirmed: bool
    request_text: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ClaimStatusResponse(BaseModel):
    claim_id: str
    status: str


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    actor_id: str | None = None
    type: str
    action: str
    resource_id: str | None = None
    claim_id: str | None = None
    comment_id: str | None = None
    conversation_id: str | None = None
    shoutout_id: str | None = None
    community_id: str | None = None
    metadata: dict = {}
    created_at: datetime | None = None
    read_at: datetime | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    count: int


class NotificationCountResponse(BaseModel):
    unread_count: int


class MarkAllReadResponse(BaseModel):
    marked: int


class ChannelVectorResponse(BaseModel):
    in_app: bool
    push: bool
    email: bool


class PreferencesResponse(BaseModel):
    user_id: str
    push_enabled: bool
    email_enabled: bool
    types: dict[str, ChannelVectorResponse]

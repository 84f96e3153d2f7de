"""Resource replica: the slice of a shared offer, request or event that
claims and notifications need.

Resources are authored elsewhere on the platform; this context keeps a
local copy updated from inbound resource events.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, Integer, String
from sharing.domain import sharing


class ResourceKind(Enum):
    OFFER = "offer"
    REQUEST = "request"
    EVENT = "event"


class ResourceStatus(Enum):
    OPEN = "open"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@sharing.aggregate
class Resource:
    owner_id: Identifier(required=True)
    community_id: Identifier()
    kind: String(choices=ResourceKind, required=True)
    title: String(max_length=300, default="")
    status: String(choices=ResourceStatus, default=ResourceStatus.OPEN.value)

    # Claim policy
    requires_approval: Boolean(default=True)
    max_attendees: Integer()  # Null means unlimited
    seat_count: Integer(default=0)

    # Scheduling
    expires_at: DateTime()
    starts_at: DateTime()

    updated_at: DateTime()

    @property
    def is_event(self) -> bool:
        return self.kind == ResourceKind.EVENT.value

    @property
    def is_open(self) -> bool:
        return self.status == ResourceStatus.OPEN.value

    def apply_update(self, **values):
        """Overwrite the replicated attributes that were supplied."""
        for name, value in values.items():
            if value is not None:
                setattr(self, name, value)
        self.updated_at = datetime.now(UTC)

    def record_seat_count(self, count: int):
        """Claims holding a seat; rewritten with every seat change."""
        self.seat_count = count

    def cancel(self):
        self.status = ResourceStatus.CANCELLED.value
        self.updated_at = datetime.now(UTC)

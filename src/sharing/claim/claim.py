"""Claim aggregate: one user's claim against a resource or one of its timeslots.

State Machine:
    PENDING → APPROVED | REJECTED | CANCELLED
    APPROVED → GIVEN | RECEIVED | CANCELLED
    GIVEN → RECEIVED | COMPLETED
    RECEIVED → GIVEN | COMPLETED
    REJECTED, CANCELLED, COMPLETED are terminal.

The handoff needs both parties. Marking `given` records the giver's
confirmation and marking `received` the receiver's; the claim completes
the moment both are recorded, in whichever order they arrive. Who gives
and who receives follows the resource kind, not the caller: on an offer
(or event) the owner gives, on a request the claimant gives.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text
from sharing.claim.events import (
    ClaimApproved,
    ClaimCancelled,
    ClaimCompleted,
    ClaimCreated,
    ClaimRejected,
    HandoffConfirmed,
)
from sharing.community.resource import ResourceKind
from sharing.domain import sharing
from sharing.exceptions import CapacityExceeded, InvalidStateTransition, Unauthorized


class ClaimStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    GIVEN = "given"
    RECEIVED = "received"
    COMPLETED = "completed"


class HandoffRole(Enum):
    GIVER = "giver"
    RECEIVER = "receiver"


_VALID_TRANSITIONS = {
    ClaimStatus.PENDING: {ClaimStatus.APPROVED, ClaimStatus.REJECTED, ClaimStatus.CANCELLED},
    ClaimStatus.APPROVED: {ClaimStatus.GIVEN, ClaimStatus.RECEIVED, ClaimStatus.CANCELLED},
    ClaimStatus.GIVEN: {ClaimStatus.RECEIVED, ClaimStatus.COMPLETED},
    ClaimStatus.RECEIVED: {ClaimStatus.GIVEN, ClaimStatus.COMPLETED},
    ClaimStatus.REJECTED: set(),
    ClaimStatus.CANCELLED: set(),
    ClaimStatus.COMPLETED: set(),
}

TERMINAL_STATUSES = {ClaimStatus.REJECTED, ClaimStatus.CANCELLED, ClaimStatus.COMPLETED}

# Claims that occupy a seat on a capacity-limited resource
SEAT_HOLDING_STATUSES = {
    ClaimStatus.APPROVED,
    ClaimStatus.GIVEN,
    ClaimStatus.RECEIVED,
    ClaimStatus.COMPLETED,
}

# Claims whose holders hear about resource updates and cancellations
ACTIVE_STATUSES = {
    ClaimStatus.PENDING,
    ClaimStatus.APPROVED,
    ClaimStatus.GIVEN,
    ClaimStatus.RECEIVED,
}

# Re-requesting one of these while already in it changes nothing
_IDEMPOTENT_STATUSES = {ClaimStatus.APPROVED, ClaimStatus.GIVEN, ClaimStatus.RECEIVED}


@sharing.aggregate
class Claim:
    resource_id: Identifier(required=True)
    timeslot_id: Identifier()
    claimant_id: Identifier(required=True)
    owner_id: Identifier(required=True)
    resource_kind: String(choices=ResourceKind, required=True)
    request_text: Text()

    status: String(choices=ClaimStatus, default=ClaimStatus.PENDING.value)

    # Independent halves of the handoff
    given_confirmed: Boolean(default=False)
    received_confirmed: Boolean(default=False)

    created_at: DateTime()
    updated_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        resource_id,
        owner_id,
        resource_kind,
        claimant_id,
        requires_approval=True,
        timeslot_id=None,
        request_text=None,
        seats_taken=0,
        max_attendees=None,
    ):
        """Open a claim. It starts approved when the resource needs no approval."""
        now = datetime.now(UTC)

        if requires_approval:
            status = ClaimStatus.PENDING
        else:
            _assert_seat_available(resource_id, seats_taken, max_attendees)
            status = ClaimStatus.APPROVED

        claim = cls(
            resource_id=resource_id,
            timeslot_id=timeslot_id,
            claimant_id=claimant_id,
            owner_id=owner_id,
            resource_kind=resource_kind,
            request_text=request_text,
            status=status.value,
            created_at=now,
            updated_at=now,
        )

        claim.raise_(
            ClaimCreated(
                claim_id=str(claim.id),
                resource_id=str(resource_id),
                timeslot_id=str(timeslot_id) if timeslot_id else None,
                claimant_id=str(claimant_id),
                owner_id=str(owner_id),
                status=status.value,
                created_at=now,
            )
        )

        return claim

    # -------------------------------------------------------------------
    # Roles
    # -------------------------------------------------------------------
    @property
    def giver_id(self) -> str:
        if self.resource_kind == ResourceKind.REQUEST.value:
            return str(self.claimant_id)
        return str(self.owner_id)

    @property
    def receiver_id(self) -> str:
        if self.resource_kind == ResourceKind.REQUEST.value:
            return str(self.owner_id)
        return str(self.claimant_id)

    def party_of(self, user_id) -> bool:
        return str(user_id) in (str(self.owner_id), str(self.claimant_id))

    def counterparty_of(self, user_id) -> str:
        if str(user_id) == str(self.owner_id):
            return str(self.claimant_id)
        return str(self.owner_id)

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target: ClaimStatus):
        current = ClaimStatus(self.status)
        if target not in _VALID_TRANSITIONS[current]:
            raise InvalidStateTransition(current.value, target.value)

    def update_status(self, target, actor_id, seats_taken=0, max_attendees=None):
        """Apply a requested status on behalf of `actor_id`.

        Returns the step that was recorded (`APPROVED`, `REJECTED`,
        `CANCELLED`, `GIVEN` or `RECEIVED`), or None when the request
        repeats what the claim already records.
        """
        target = ClaimStatus(target)
        current = ClaimStatus(self.status)
        actor_id = str(actor_id)

        if not self.party_of(actor_id):
            raise Unauthorized(f"User {actor_id} is not a party to claim {self.id}")
        if current in TERMINAL_STATUSES:
            raise InvalidStateTransition(current.value, target.value)

        if target == ClaimStatus.APPROVED:
            return self.approve(actor_id, seats_taken, max_attendees)
        if target == ClaimStatus.REJECTED:
            return self.reject(actor_id)
        if target == ClaimStatus.CANCELLED:
            return self.cancel(actor_id)
        if target == ClaimStatus.GIVEN:
            return self.confirm_given(actor_id)
        if target == ClaimStatus.RECEIVED:
            return self.confirm_received(actor_id)
        return self.complete(actor_id)

    def _assert_owner(self, actor_id, action):
        if actor_id != str(self.owner_id):
            raise Unauthorized(f"Only the resource owner may {action} claim {self.id}")

    def approve(self, actor_id, seats_taken=0, max_attendees=None):
        self._assert_owner(actor_id, "approve")
        if self.status == ClaimStatus.APPROVED.value:
            return None
        self._assert_can_transition(ClaimStatus.APPROVED)
        _assert_seat_available(self.resource_id, seats_taken, max_attendees)

        prior, now = self.status, datetime.now(UTC)
        self.status = ClaimStatus.APPROVED.value
        self.updated_at = now

        self.raise_(
            ClaimApproved(
                claim_id=str(self.id),
                resource_id=str(self.resource_id),
                approved_by=actor_id,
                prior_status=prior,
                approved_at=now,
            )
        )
        return ClaimStatus.APPROVED

    def reject(self, actor_id):
        self._assert_owner(actor_id, "reject")
        self._assert_can_transition(ClaimStatus.REJECTED)

        prior, now = self.status, datetime.now(UTC)
        self.status = ClaimStatus.REJECTED.value
        self.updated_at = now

        self.raise_(
            ClaimRejected(
                claim_id=str(self.id),
                resource_id=str(self.resource_id),
                rejected_by=actor_id,
                prior_status=prior,
                rejected_at=now,
            )
        )
        return ClaimStatus.REJECTED

    def cancel(self, actor_id):
        self._assert_can_transition(ClaimStatus.CANCELLED)

        prior, now = self.status, datetime.now(UTC)
        self.status = ClaimStatus.CANCELLED.value
        self.updated_at = now

        self.raise_(
            ClaimCancelled(
                claim_id=str(self.id),
                resource_id=str(self.resource_id),
                cancelled_by=actor_id,
                prior_status=prior,
                cancelled_at=now,
            )
        )
        return ClaimStatus.CANCELLED

    def confirm_given(self, actor_id):
        if actor_id != self.giver_id:
            raise Unauthorized(f"Only the giver may mark claim {self.id} as given")
        if self.given_confirmed:
            return None
        self._assert_can_transition(ClaimStatus.GIVEN)
        self.given_confirmed = True
        self._settle(HandoffRole.GIVER, actor_id)
        return ClaimStatus.GIVEN

    def confirm_received(self, actor_id):
        if actor_id != self.receiver_id:
            raise Unauthorized(f"Only the receiver may mark claim {self.id} as received")
        if self.received_confirmed:
            return None
        self._assert_can_transition(ClaimStatus.RECEIVED)
        self.received_confirmed = True
        self._settle(HandoffRole.RECEIVER, actor_id)
        return ClaimStatus.RECEIVED

    def complete(self, actor_id):
        """Record the caller's outstanding half of the handoff."""
        self._assert_can_transition(ClaimStatus.COMPLETED)
        if actor_id == self.receiver_id and not self.received_confirmed:
            return self.confirm_received(actor_id)
        if actor_id == self.giver_id and not self.given_confirmed:
            return self.confirm_given(actor_id)
        return None

    def _settle(self, role: HandoffRole, actor_id):
        """Derive the status from the two confirmation flags."""
        prior, now = self.status, datetime.now(UTC)

        if self.given_confirmed and self.received_confirmed:
            self.status = ClaimStatus.COMPLETED.value
        elif self.given_confirmed:
            self.status = ClaimStatus.GIVEN.value
        else:
            self.status = ClaimStatus.RECEIVED.value
        self.updated_at = now

        self.raise_(
            HandoffConfirmed(
                claim_id=str(self.id),
                resource_id=str(self.resource_id),
                role=role.value,
                confirmed_by=actor_id,
                prior_status=prior,
                status=self.status,
                confirmed_at=now,
            )
        )

        if self.status == ClaimStatus.COMPLETED.value:
            self.raise_(
                ClaimCompleted(
                    claim_id=str(self.id),
                    resource_id=str(self.resource_id),
                    giver_id=self.giver_id,
                    receiver_id=self.receiver_id,
                    completed_at=now,
                )
            )


def _assert_seat_available(resource_id, seats_taken, max_attendees):
    if max_attendees is not None and seats_taken >= max_attendees:
        raise CapacityExceeded(str(resource_id), max_attendees)

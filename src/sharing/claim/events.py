"""Domain events for the Claim aggregate."""

from protean.fields import DateTime, Identifier, String
from sharing.domain import sharing


@sharing.event(part_of="Claim")
class ClaimCreated:
    """A user opened a claim against a resource."""

    __version__ = 1

    claim_id: Identifier(required=True)
    resource_id: Identifier(required=True)
    timeslot_id: Identifier()
    claimant_id: Identifier(required=True)
    owner_id: Identifier(required=True)
    status: String(required=True)
    created_at: DateTime(required=True)


@sharing.event(part_of="Claim")
class ClaimApproved:
    """The resource owner accepted a claim."""

    __version__ = 1

    claim_id: Identifier(required=True)
    resource_id: Identifier(required=True)
    approved_by: Identifier(required=True)
    prior_status: String(required=True)
    approved_at: DateTime(required=True)


@sharing.event(part_of="Claim")
class ClaimRejected:
    """The resource owner declined a claim."""

    __version__ = 1

    claim_id: Identifier(required=True)
    resource_id: Identifier(required=True)
    rejected_by: Identifier(required=True)
    prior_status: String(required=True)
    rejected_at: DateTime(required=True)


@sharing.event(part_of="Claim")
class ClaimCancelled:
    """One of the parties withdrew from the claim before the handoff."""

    __version__ = 1

    claim_id: Identifier(required=True)
    resource_id: Identifier(required=True)
    cancelled_by: Identifier(required=True)
    prior_status: String(required=True)
    cancelled_at: DateTime(required=True)


@sharing.event(part_of="Claim")
class HandoffConfirmed:
    """The giver or the receiver recorded their half of the handoff."""

    __version__ = 1

    claim_id: Identifier(required=True)
    resource_id: Identifier(required=True)
    role: String(required=True)  # "giver" or "receiver"
    confirmed_by: Identifier(required=True)
    prior_status: String(required=True)
    status: String(required=True)
    confirmed_at: DateTime(required=True)


@sharing.event(part_of="Claim")
class ClaimCompleted:
    """Both parties confirmed the handoff."""

    __version__ = 1

    claim_id: Identifier(required=True)
    resource_id: Identifier(required=True)
    giver_id: Identifier(required=True)
    receiver_id: Identifier(required=True)
    completed_at: DateTime(required=True)

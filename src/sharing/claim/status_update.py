"""UpdateClaimStatus command + handler.

One command covers every edge of the claim state machine; the caller's
role decides which edges it may take. The notifications a transition
produces are computed and dispatched inside the same unit of work.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from sharing.claim.capacity import holds_seat, resource_guard, seats_taken, store_seat_count
from sharing.claim.claim import Claim, ClaimStatus
from sharing.community.lookups import find_resource
from sharing.domain import sharing
from sharing.exceptions import NotFound
from sharing.notification.dispatcher import dispatch_all
from sharing.notification.emitter import claim_status_changed

logger = structlog.get_logger(__name__)


@sharing.command(part_of="Claim")
class UpdateClaimStatus:
    claim_id: Identifier(required=True)
    status: String(choices=ClaimStatus, required=True)
    actor_id: Identifier(required=True)


def load_claim(claim_id) -> Claim:
    try:
        return current_domain.repository_for(Claim).get(str(claim_id))
    except ObjectNotFoundError:
        raise NotFound(f"Claim {claim_id} does not exist")


@sharing.command_handler(part_of=Claim)
class UpdateClaimStatusHandler:
    @handle(UpdateClaimStatus)
    def update_status(self, command: UpdateClaimStatus):
        repo = current_domain.repository_for(Claim)
        claim = load_claim(command.claim_id)
        resource = find_resource(claim.resource_id)

        target = ClaimStatus(command.status)
        prior_status = claim.status
        max_attendees = resource.max_attendees if resource else None
        taken = seats_taken(claim.resource_id, excluding=claim.id) if target == ClaimStatus.APPROVED else 0

        step = claim.update_status(
            target,
            actor_id=str(command.actor_id),
            seats_taken=taken,
            max_attendees=max_attendees,
        )
        if step is None:
            logger.info(
                "Claim status unchanged",
                claim_id=str(claim.id),
                status=claim.status,
                requested=target.value,
            )
            return claim.status

        repo.add(claim)
        if max_attendees is not None and holds_seat(prior_status) != holds_seat(claim.status):
            store_seat_count(resource, claim)

        logger.info(
            "Claim status updated",
            claim_id=str(claim.id),
            prior_status=prior_status,
            status=claim.status,
            actor_id=str(command.actor_id),
        )

        dispatch_all(claim_status_changed(claim, step, str(command.actor_id), resource))
        return claim.status


def update_claim_status(claim_id, status, actor_id) -> str:
    """Move a claim on behalf of `actor_id`; returns the resulting status."""
    claim = load_claim(claim_id)
    command = UpdateClaimStatus(
        claim_id=str(claim_id),
        status=ClaimStatus(status).value,
        actor_id=actor_id,
    )
    with resource_guard(claim.resource_id):
        return current_domain.process(command, asynchronous=False)

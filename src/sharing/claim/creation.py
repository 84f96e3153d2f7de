"""CreateClaim command + handler."""

import structlog
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from sharing.claim.capacity import holds_seat, resource_guard, seats_taken, store_seat_count
from sharing.claim.claim import Claim
from sharing.community.lookups import get_resource
from sharing.domain import sharing
from sharing.exceptions import InvalidStateTransition
from sharing.notification.dispatcher import dispatch_all
from sharing.notification.emitter import claim_created

logger = structlog.get_logger(__name__)


@sharing.command(part_of="Claim")
class CreateClaim:
    """The caller claims a resource, optionally for one of its timeslots."""

    resource_id: Identifier(required=True)
    claimant_id: Identifier(required=True)
    timeslot_id: Identifier()
    request_text: Text()


@sharing.command_handler(part_of=Claim)
class CreateClaimHandler:
    @handle(CreateClaim)
    def create_claim(self, command: CreateClaim):
        resource = get_resource(command.resource_id)
        if not resource.is_open:
            raise InvalidStateTransition(resource.status, "claimed")

        claim = Claim.create(
            resource_id=str(resource.id),
            owner_id=str(resource.owner_id),
            resource_kind=resource.kind,
            claimant_id=str(command.claimant_id),
            requires_approval=resource.requires_approval,
            timeslot_id=command.timeslot_id,
            request_text=command.request_text,
            seats_taken=0 if resource.requires_approval else seats_taken(resource.id),
            max_attendees=resource.max_attendees,
        )
        current_domain.repository_for(Claim).add(claim)
        if resource.max_attendees is not None and holds_seat(claim.status):
            store_seat_count(resource, claim)

        logger.info(
            "Claim created",
            claim_id=str(claim.id),
            resource_id=str(resource.id),
            claimant_id=str(command.claimant_id),
            status=claim.status,
        )

        dispatch_all(claim_created(claim, resource))
        return str(claim.id)


def create_claim(resource_id, claimant_id, timeslot_id=None, request_text=None) -> str:
    """Open a claim as `claimant_id`, serialized with other claim writes on the resource."""
    command = CreateClaim(
        resource_id=resource_id,
        claimant_id=claimant_id,
        timeslot_id=timeslot_id,
        request_text=request_text,
    )
    with resource_guard(resource_id):
        return current_domain.process(command, asynchronous=False)

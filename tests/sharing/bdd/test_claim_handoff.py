"""BDD tests for the two-party claim handoff."""

from protean import current_domain
from pytest_bdd import parsers, scenarios, then, when
from sharing.claim.claim import Claim
from sharing.claim.status_update import update_claim_status
from sharing.exceptions import InvalidStateTransition, Unauthorized

scenarios("features/claim_handoff.feature")


@when(parsers.cfparse('"{user}" sets the claim status to "{status}"'))
def set_claim_status(context, user, status):
    update_claim_status(context["claim_id"], status, actor_id=user)


@when(parsers.cfparse('"{user}" tries to set the claim status to "{status}"'))
def try_set_claim_status(context, user, status):
    try:
        update_claim_status(context["claim_id"], status, actor_id=user)
    except (Unauthorized, InvalidStateTransition) as exc:
        context["error"] = exc


@then(parsers.cfparse('the claim status is "{status}"'))
def claim_status_is(context, status):
    claim = current_domain.repository_for(Claim).get(context["claim_id"])
    assert claim.status == status


@then("the request is refused as unauthorized")
def refused_unauthorized(context):
    assert isinstance(context["error"], Unauthorized)


@then("the request is refused as an invalid transition")
def refused_invalid_transition(context):
    assert isinstance(context["error"], InvalidStateTransition)

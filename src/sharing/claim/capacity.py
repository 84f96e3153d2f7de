"""Serialization of claim writes per resource, and seat counting.

Approval re-counts the seats already taken on the resource and the
handoff reads the other party's confirmation flag. Two guards keep
those reads current:

- Every write that moves a claim into or out of a seat also rewrites
  the resource's `seat_count`, in the same unit of work. Concurrent seat
  changes on one resource then conflict on the resource's version, and
  Protean re-runs the losing command handler against the committed
  count. Concurrent confirmations on one claim conflict on the claim's
  own version the same way.
- Within a process, `resource_guard` runs claim commands for the same
  resource one at a time, so they rarely reach that conflict.
"""

import threading
from contextlib import contextmanager

from protean.utils.globals import current_domain
from sharing.claim.claim import ACTIVE_STATUSES, SEAT_HOLDING_STATUSES, Claim
from sharing.community.lookups import MAX_ROWS
from sharing.community.resource import Resource

_registry_lock = threading.Lock()
_resource_locks: dict[str, threading.RLock] = {}

_SEAT_VALUES = {status.value for status in SEAT_HOLDING_STATUSES}


@contextmanager
def resource_guard(resource_id):
    """Hold the in-process write lock for claims on `resource_id`."""
    with _registry_lock:
        lock = _resource_locks.setdefault(str(resource_id), threading.RLock())
    with lock:
        yield


def claims_for_resource(resource_id) -> list[Claim]:
    repo = current_domain.repository_for(Claim)
    return repo._dao.query.filter(resource_id=str(resource_id)).limit(MAX_ROWS).all().items


def seats_taken(resource_id, excluding=None) -> int:
    """Count claims on the resource that already hold a seat."""
    return sum(
        1
        for claim in claims_for_resource(resource_id)
        if claim.status in _SEAT_VALUES and str(claim.id) != str(excluding)
    )


def holds_seat(status) -> bool:
    return status in _SEAT_VALUES


def store_seat_count(resource: Resource, claim: Claim) -> None:
    """Write the resource's seat count, including `claim` as it now stands."""
    count = seats_taken(resource.id, excluding=claim.id) + (1 if holds_seat(claim.status) else 0)
    resource.record_seat_count(count)
    current_domain.repository_for(Resource).add(resource)


def active_claimant_ids(resource_id) -> list[str]:
    """Distinct claimants still holding a non-terminal claim on the resource."""
    active_values = {status.value for status in ACTIVE_STATUSES}
    seen = []
    for claim in claims_for_resource(resource_id):
        claimant = str(claim.claimant_id)
        if claim.status in active_values and claimant not in seen:
            seen.append(claimant)
    return seen

"""Scheduled checks: reminders for expiring resources and upcoming events.

An external periodic job issues `RunScheduledChecks`. Each run looks a
configurable window ahead; reminders are de-duplicated per (user, type,
resource) by the dispatcher, so overlapping runs do not repeat them.
"""

from datetime import UTC, datetime, timedelta

import structlog
from protean.fields import DateTime
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from sharing.claim.capacity import active_claimant_ids
from sharing.community.lookups import MAX_ROWS
from sharing.community.resource import Resource, ResourceStatus
from sharing.config import setting
from sharing.domain import sharing
from sharing.notification.dispatcher import dispatch_all
from sharing.notification.emitter import event_starting, resource_expiring
from sharing.notification.notification import Notification

logger = structlog.get_logger(__name__)


@sharing.command(part_of="Notification")
class RunScheduledChecks:
    """Send reminders for resources due within the window after `as_of`."""

    as_of: DateTime()


def _within(moment, start, end) -> bool:
    if moment is None:
        return False
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return start <= moment <= end


@sharing.command_handler(part_of=Notification)
class ScheduledChecksHandler:
    @handle(RunScheduledChecks)
    def run_checks(self, command: RunScheduledChecks):
        now = command.as_of or datetime.now(UTC)
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        horizon = now + timedelta(hours=setting("SCHEDULED_WINDOW_HOURS"))

        repo = current_domain.repository_for(Resource)
        open_resources = repo._dao.query.filter(status=ResourceStatus.OPEN.value).limit(MAX_ROWS).all().items

        results = []
        for resource in open_resources:
            if _within(resource.expires_at, now, horizon):
                results.extend(dispatch_all(resource_expiring(resource, resource.expires_at)))
            if resource.is_event and _within(resource.starts_at, now, horizon):
                participants = active_claimant_ids(resource.id)
                results.extend(dispatch_all(event_starting(resource, participants, resource.starts_at)))

        sent = sum(1 for result in results if result.suppressed is None)
        logger.info("Scheduled checks complete", checked=len(open_resources), sent=sent)
        return sent

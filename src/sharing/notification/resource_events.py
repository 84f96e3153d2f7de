"""Inbound community event handler: resource lifecycle.

Keeps the resource replica current and notifies community members of new
resources, and active claimants of edits and cancellations.
"""

import json

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from sharing.claim.capacity import active_claimant_ids
from sharing.community.lookups import community_member_ids, find_resource
from sharing.community.resource import Resource, ResourceStatus
from sharing.domain import sharing
from sharing.notification.dispatcher import dispatch_all
from sharing.notification.emitter import resource_changed, resource_published
from sharing.notification.notification import Notification
from shared.events.community import ResourceCancelled, ResourcePublished, ResourceUpdated

logger = structlog.get_logger(__name__)

sharing.register_external_event(ResourcePublished, "Community.ResourcePublished.v1")
sharing.register_external_event(ResourceUpdated, "Community.ResourceUpdated.v1")
sharing.register_external_event(ResourceCancelled, "Community.ResourceCancelled.v1")


def _parse_changes(raw) -> list[str]:
    try:
        changes = json.loads(raw) if raw else []
    except (TypeError, ValueError):
        return []
    if not isinstance(changes, list):
        return []
    return [change for change in changes if isinstance(change, str)]


@sharing.event_handler(part_of=Notification, stream_category="community::resource")
class ResourceEventsHandler:
    @handle(ResourcePublished)
    def on_resource_published(self, event: ResourcePublished) -> None:
        """Replicate the resource and tell every other member of its community."""
        repo = current_domain.repository_for(Resource)
        if find_resource(event.resource_id) is not None:
            logger.info("Resource already replicated", resource_id=str(event.resource_id))
            return

        resource = Resource(
            id=str(event.resource_id),
            owner_id=str(event.owner_id),
            community_id=str(event.community_id),
            kind=event.kind,
            title=event.title,
            status=ResourceStatus.OPEN.value,
            requires_approval=event.requires_approval,
            max_attendees=event.max_attendees,
            expires_at=event.expires_at,
            starts_at=event.starts_at,
            updated_at=event.published_at,
        )
        repo.add(resource)

        dispatch_all(resource_published(resource, community_member_ids(resource.community_id)))

    @handle(ResourceUpdated)
    def on_resource_updated(self, event: ResourceUpdated) -> None:
        """Refresh the replica and tell the holders of active claims what changed."""
        resource = find_resource(event.resource_id)
        if resource is None:
            logger.warning("Update for unknown resource", resource_id=str(event.resource_id))
            return

        resource.apply_update(
            title=event.title,
            status=event.status,
            max_attendees=event.max_attendees,
            expires_at=event.expires_at,
            starts_at=event.starts_at,
        )
        current_domain.repository_for(Resource).add(resource)

        dispatch_all(
            resource_changed(
                resource,
                editor_id=str(event.editor_id),
                changes=_parse_changes(event.changes),
                claimant_ids=active_claimant_ids(resource.id),
            )
        )

    @handle(ResourceCancelled)
    def on_resource_cancelled(self, event: ResourceCancelled) -> None:
        resource = find_resource(event.resource_id)
        if resource is None:
            logger.warning("Cancellation for unknown resource", resource_id=str(event.resource_id))
            return
        if resource.status == ResourceStatus.CANCELLED.value:
            return

        resource.cancel()
        current_domain.repository_for(Resource).add(resource)

        dispatch_all(
            resource_changed(
                resource,
                editor_id=str(event.cancelled_by),
                changes=["status"],
                claimant_ids=active_claimant_ids(resource.id),
            )
        )

"""Inbound community event handler: shoutouts."""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from sharing.community.lookups import find_resource, find_shoutout
from sharing.community.shoutout import Shoutout
from sharing.domain import sharing
from sharing.notification.dispatcher import dispatch_all
from sharing.notification.emitter import shoutout_given
from sharing.notification.notification import Notification
from shared.events.community import ShoutoutGiven

logger = structlog.get_logger(__name__)

sharing.register_external_event(ShoutoutGiven, "Community.ShoutoutGiven.v1")


@sharing.event_handler(part_of=Notification, stream_category="community::shoutout")
class ShoutoutEventsHandler:
    @handle(ShoutoutGiven)
    def on_shoutout_given(self, event: ShoutoutGiven) -> None:
        if str(event.from_user_id) == str(event.to_user_id):
            logger.warning("Self-directed shoutout ignored", shoutout_id=str(event.shoutout_id))
            return
        if find_shoutout(event.shoutout_id) is not None:
            logger.info("Shoutout already processed", shoutout_id=str(event.shoutout_id))
            return

        current_domain.repository_for(Shoutout).add(
            Shoutout(
                id=str(event.shoutout_id),
                from_user_id=str(event.from_user_id),
                to_user_id=str(event.to_user_id),
            )
        )

        resource = find_resource(event.resource_id) if event.resource_id else None
        dispatch_all(
            shoutout_given(
                event.shoutout_id,
                from_user_id=str(event.from_user_id),
                to_user_id=str(event.to_user_id),
                message=event.message,
                resource=resource,
                community_id=event.community_id,
            )
        )

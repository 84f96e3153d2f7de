"""Inbound community event handler: members joining and leaving."""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from sharing.community.lookups import find_membership, organizer_ids
from sharing.community.membership import Membership, MemberRole
from sharing.domain import sharing
from sharing.notification.dispatcher import dispatch_all
from sharing.notification.emitter import membership_changed
from sharing.notification.notification import Notification
from shared.events.community import MemberJoined, MemberLeft

logger = structlog.get_logger(__name__)

sharing.register_external_event(MemberJoined, "Community.MemberJoined.v1")
sharing.register_external_event(MemberLeft, "Community.MemberLeft.v1")


@sharing.event_handler(part_of=Notification, stream_category="community::membership")
class MembershipEventsHandler:
    """Keeps the membership replica and tells organizers who came and went."""

    @handle(MemberJoined)
    def on_member_joined(self, event: MemberJoined) -> None:
        repo = current_domain.repository_for(Membership)
        membership = find_membership(event.community_id, event.user_id)
        if membership is not None and membership.active:
            return

        if membership is None:
            membership = Membership(
                community_id=str(event.community_id),
                user_id=str(event.user_id),
                role=event.role or MemberRole.MEMBER.value,
            )
        else:
            membership.rejoin(event.role)
        repo.add(membership)

        dispatch_all(
            membership_changed(event.community_id, event.user_id, True, organizer_ids(event.community_id))
        )

    @handle(MemberLeft)
    def on_member_left(self, event: MemberLeft) -> None:
        membership = find_membership(event.community_id, event.user_id)
        if membership is None or not membership.active:
            logger.info(
                "Leave for inactive membership",
                community_id=str(event.community_id),
                user_id=str(event.user_id),
            )
            return

        membership.leave()
        current_domain.repository_for(Membership).add(membership)

        dispatch_all(
            membership_changed(event.community_id, event.user_id, False, organizer_ids(event.community_id))
        )

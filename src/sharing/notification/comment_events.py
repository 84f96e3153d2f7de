"""Inbound community event handler: comments and replies."""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from sharing.community.comment import Comment
from sharing.community.lookups import find_comment, find_resource
from sharing.config import setting
from sharing.domain import sharing
from sharing.notification.dispatcher import dispatch_all
from sharing.notification.emitter import comment_posted
from sharing.notification.notification import Notification
from shared.events.community import CommentPosted

logger = structlog.get_logger(__name__)

sharing.register_external_event(CommentPosted, "Community.CommentPosted.v1")


@sharing.event_handler(part_of=Notification, stream_category="community::comment")
class CommentEventsHandler:
    @handle(CommentPosted)
    def on_comment_posted(self, event: CommentPosted) -> None:
        """Notify the resource owner and, for replies, the parent comment's author."""
        if find_comment(event.comment_id) is not None:
            logger.info("Comment already processed", comment_id=str(event.comment_id))
            return

        resource = find_resource(event.resource_id)
        if resource is None:
            logger.warning(
                "Comment on unknown resource",
                comment_id=str(event.comment_id),
                resource_id=str(event.resource_id),
            )
            return

        parent_author_id = None
        if event.parent_comment_id:
            parent = find_comment(event.parent_comment_id)
            if parent is not None:
                parent_author_id = str(parent.author_id)

        current_domain.repository_for(Comment).add(
            Comment(
                id=str(event.comment_id),
                resource_id=str(event.resource_id),
                author_id=str(event.author_id),
                parent_comment_id=str(event.parent_comment_id) if event.parent_comment_id else None,
            )
        )

        dispatch_all(
            comment_posted(
                event.comment_id,
                resource,
                author_id=str(event.author_id),
                content=event.content,
                parent_author_id=parent_author_id,
                preview_length=setting("CONTENT_PREVIEW_LENGTH"),
            )
        )

"""Inbound community event handler: conversations and messages."""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from sharing.community.conversation import Conversation
from sharing.community.lookups import find_conversation, find_message
from sharing.community.message import Message
from sharing.config import setting
from sharing.domain import sharing
from sharing.notification.dispatcher import dispatch_all
from sharing.notification.emitter import message_sent
from sharing.notification.notification import Notification
from shared.events.community import ConversationStarted, MessageSent

logger = structlog.get_logger(__name__)

sharing.register_external_event(ConversationStarted, "Community.ConversationStarted.v1")
sharing.register_external_event(MessageSent, "Community.MessageSent.v1")


@sharing.event_handler(part_of=Notification, stream_category="community::conversation")
class ConversationEventsHandler:
    @handle(ConversationStarted)
    def on_conversation_started(self, event: ConversationStarted) -> None:
        """Record the participants; nobody is notified until the first message."""
        if find_conversation(event.conversation_id) is not None:
            return

        current_domain.repository_for(Conversation).add(
            Conversation(
                id=str(event.conversation_id),
                initiator_id=str(event.initiator_id),
                participant_ids=event.participant_ids,
                message_count=0,
            )
        )

    @handle(MessageSent)
    def on_message_sent(self, event: MessageSent) -> None:
        """Notify every participant except the sender."""
        if find_message(event.message_id) is not None:
            logger.info("Message already processed", message_id=str(event.message_id))
            return

        conversation = find_conversation(event.conversation_id)
        if conversation is None:
            logger.warning(
                "Message in unknown conversation",
                conversation_id=str(event.conversation_id),
                message_id=str(event.message_id),
            )
            return

        first_message = conversation.record_message()
        current_domain.repository_for(Conversation).add(conversation)
        current_domain.repository_for(Message).add(
            Message(
                id=str(event.message_id),
                conversation_id=str(conversation.id),
                sender_id=str(event.sender_id),
            )
        )

        dispatch_all(
            message_sent(
                conversation.id,
                sender_id=str(event.sender_id),
                participant_ids=conversation.participants(),
                content=event.content,
                first_message=first_message,
                preview_length=setting("CONTENT_PREVIEW_LENGTH"),
            )
        )

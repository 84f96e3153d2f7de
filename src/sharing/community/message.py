"""Message replica: marks a message as already turned into notifications."""

from protean.fields import Identifier
from sharing.domain import sharing


@sharing.aggregate
class Message:
    conversation_id: Identifier(required=True)
    sender_id: Identifier(required=True)

"""Conversation replica: participants and how many messages have been sent."""

import json

from protean.fields import Identifier, Integer, Text
from sharing.domain import sharing


@sharing.aggregate
class Conversation:
    initiator_id: Identifier(required=True)
    participant_ids: Text(required=True)  # JSON list of user ids
    message_count: Integer(default=0)

    def participants(self) -> list[str]:
        return json.loads(self.participant_ids)

    def record_message(self) -> bool:
        """Count a new message. Returns True when it is the first one."""
        self.message_count = (self.message_count or 0) + 1
        return self.message_count == 1

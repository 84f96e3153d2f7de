"""Shoutout replica: one row per shoutout that has been delivered."""

from protean.fields import Identifier
from sharing.domain import sharing


@sharing.aggregate
class Shoutout:
    from_user_id: Identifier(required=True)
    to_user_id: Identifier(required=True)

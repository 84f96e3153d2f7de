"""Cross-domain event contracts for trust scoring.

The trust service recomputes a user's score within a community after
qualifying activity and publishes the raw score. Levels are derived
on the receiving side.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier


class TrustScoreChanged(BaseEvent):
    """A user's trust score within a community was recomputed."""

    __version__ = 1

    user_id = Identifier(required=True)
    community_id = Identifier(required=True)
    score = Float(required=True)
    computed_at = DateTime(required=True)

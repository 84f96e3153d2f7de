"""Last known trust score and discretized level of a user within a community."""

from protean.fields import Float, Identifier, Integer
from sharing.domain import sharing
from sharing.trust.levels import level_for


@sharing.aggregate
class TrustScore:
    user_id: Identifier(required=True)
    community_id: Identifier(required=True)
    score: Float(default=0.0)
    level: Integer(default=1)

    def record(self, score) -> tuple[int, int]:
        """Store a new score; return the (old, new) discretized levels."""
        old_level = self.level
        self.score = score
        self.level = level_for(score)
        return old_level, self.level

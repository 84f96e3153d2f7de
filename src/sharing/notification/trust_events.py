"""Inbound trust event handler: level changes.

Only a change of discretized level notifies; the raw score can move
freely within a level without anyone hearing about it.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from sharing.community.trust_score import TrustScore
from sharing.domain import sharing
from sharing.notification.dispatcher import dispatch_all
from sharing.notification.emitter import trust_level_changed
from sharing.notification.notification import Notification
from shared.events.trust import TrustScoreChanged

logger = structlog.get_logger(__name__)

sharing.register_external_event(TrustScoreChanged, "Trust.TrustScoreChanged.v1")


def _trust_score_for(user_id, community_id) -> TrustScore:
    repo = current_domain.repository_for(TrustScore)
    rows = repo._dao.query.filter(user_id=str(user_id), community_id=str(community_id)).all().items
    if rows:
        return rows[0]
    return TrustScore(user_id=str(user_id), community_id=str(community_id), score=0.0, level=1)


@sharing.event_handler(part_of=Notification, stream_category="trust::score")
class TrustEventsHandler:
    @handle(TrustScoreChanged)
    def on_trust_score_changed(self, event: TrustScoreChanged) -> None:
        trust_score = _trust_score_for(event.user_id, event.community_id)
        old_level, new_level = trust_score.record(event.score)
        current_domain.repository_for(TrustScore).add(trust_score)

        logger.info(
            "Trust score recorded",
            user_id=str(event.user_id),
            community_id=str(event.community_id),
            old_level=old_level,
            new_level=new_level,
        )

        dispatch_all(trust_level_changed(event.user_id, event.community_id, old_level, new_level))

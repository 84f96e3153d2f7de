"""Sharing bounded context: claims on shared resources and the notifications they raise.

Owns the claim lifecycle (approval, capacity, dual handoff confirmation),
the notification inbox, per-user channel preferences and realtime fanout.
Consumes community, account and trust events to keep local replicas and
to notify the people affected by activity elsewhere on the platform.
"""

from protean.domain import Domain
from sharing.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

sharing = Domain(name="sharing")

"""Error taxonomy for claims and notification dispatch.

User-facing errors extend Protean's exceptions so the FastAPI integration
maps them to HTTP responses. `DuplicateSuppressed` and `DeliveryFailure`
never leave the dispatcher.
"""

from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError


class InvalidStateTransition(ValidationError):
    """The requested claim status edge is not allowed from the current status."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__({"status": [f"Cannot transition from {current} to {target}"]})


class Unauthorized(InvalidOperationError):
    """The caller holds no role that permits the operation."""


class CapacityExceeded(InvalidOperationError):
    """The resource already has as many approved claims as it allows."""

    def __init__(self, resource_id: str, max_attendees: int):
        self.resource_id = resource_id
        self.max_attendees = max_attendees
        super().__init__(f"Resource {resource_id} is at capacity ({max_attendees})")


class NotFound(ObjectNotFoundError):
    """A claim, resource or notification does not exist."""


class DuplicateSuppressed(Exception):
    """A uniqueness-guarded notification already exists for this key."""


class DeliveryFailure(Exception):
    """A push or email sink rejected or failed to accept a delivery."""

    def __init__(self, channel: str, user_id: str, reason: str):
        self.channel = channel
        self.user_id = user_id
        self.reason = reason
        super().__init__(f"{channel} delivery to {user_id} failed: {reason}")

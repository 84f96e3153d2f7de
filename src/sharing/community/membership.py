"""Community membership replica: who belongs to a community and in what role."""

from enum import Enum

from protean.fields import Boolean, Identifier, String
from sharing.domain import sharing


class MemberRole(Enum):
    MEMBER = "member"
    ORGANIZER = "organizer"
    FOUNDER = "founder"


# Roles notified about membership changes
ORGANIZER_ROLES = {MemberRole.ORGANIZER.value, MemberRole.FOUNDER.value}


@sharing.aggregate
class Membership:
    community_id: Identifier(required=True)
    user_id: Identifier(required=True)
    role: String(choices=MemberRole, default=MemberRole.MEMBER.value)
    active: Boolean(default=True)

    def rejoin(self, role):
        self.role = role or self.role
        self.active = True

    def leave(self):
        self.active = False

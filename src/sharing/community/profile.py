"""Profile replica used to resolve actor names and avatars."""

from protean.fields import Identifier, String
from sharing.domain import sharing


@sharing.aggregate
class Profile:
    user_id: Identifier(required=True, unique=True)
    first_name: String(max_length=100)
    last_name: String(max_length=100)
    full_name: String(max_length=200)
    avatar_url: String(max_length=1000)

    def refresh(self, first_name=None, last_name=None, full_name=None, avatar_url=None):
        self.first_name = first_name
        self.last_name = last_name
        self.full_name = full_name
        self.avatar_url = avatar_url

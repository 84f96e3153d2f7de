"""Comment replica: enough to find the author of a replied-to comment."""

from protean.fields import Identifier
from sharing.domain import sharing


@sharing.aggregate
class Comment:
    resource_id: Identifier(required=True)
    author_id: Identifier(required=True)
    parent_comment_id: Identifier()

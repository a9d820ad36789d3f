"""Comment node entity.

Comments form a recursively nested tree per post with unlimited depth.
Each node owns its replies; nodes are never moved to another parent.
"""

from datetime import datetime, timezone

from pydantic import Field

from discuss.domain.model.common import DomainModel
from discuss.domain.model.reaction import ReactionSnapshot
from discuss.domain.value import CommentId, UserDisplay, UserId


class CommentNode(DomainModel):
    """A comment and its replies.

    Children are ordered by arrival: oldest first at the top level and
    server-provided order for replies. Nodes are immutable; tree
    operations return updated copies and share untouched subtrees.
    """

    id: CommentId
    author_id: UserId
    author_display: UserDisplay
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    content: str
    reaction_state: ReactionSnapshot = Field(default_factory=ReactionSnapshot.empty)
    children: tuple["CommentNode", ...] = ()


# A thread is the ordered sequence of top-level comments for one post
CommentTree = tuple[CommentNode, ...]

"""Domain model entities for discussions."""

from discuss.domain.model.comment import CommentNode, CommentTree
from discuss.domain.model.mutation import MutationPhase, PendingMutation
from discuss.domain.model.reaction import Reaction, ReactionSnapshot

__all__ = [
    "CommentNode",
    "CommentTree",
    "MutationPhase",
    "PendingMutation",
    "Reaction",
    "ReactionSnapshot",
]

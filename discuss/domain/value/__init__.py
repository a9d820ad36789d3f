"""Domain value objects for discussions."""

from discuss.domain.value.identifiers import CommentId, EntityId, PostId, UserId
from discuss.domain.value.types import EntityType, ReactionCategory, UserDisplay

__all__ = [
    # Identifiers
    "UserId",
    "PostId",
    "CommentId",
    "EntityId",
    # Types
    "ReactionCategory",
    "EntityType",
    "UserDisplay",
]

"""Discussion repository interface."""

from abc import ABC, abstractmethod

from discuss.domain.model.comment import CommentNode
from discuss.domain.model.reaction import ReactionSnapshot
from discuss.domain.value import (
    CommentId,
    EntityId,
    EntityType,
    PostId,
    ReactionCategory,
)


class DiscussionRepository(ABC):
    """Remote source of truth for comment threads and reactions.

    Defines the contract consumed by the synchronization engine.
    Implementations live in the adapter and persistence layers and act
    on behalf of the current viewer.
    """

    @abstractmethod
    async def fetch_thread(self, post_id: PostId) -> list[CommentNode]:
        """Fetch the authoritative comment tree for a post.

        Args:
            post_id: The post ID

        Returns:
            Top-level comments, oldest first, with replies nested
        """
        pass

    @abstractmethod
    async def fetch_post_reactions(self, post_id: PostId) -> ReactionSnapshot:
        """Fetch the authoritative reaction snapshot of a post.

        Args:
            post_id: The post ID

        Returns:
            Reaction snapshot of the post
        """
        pass

    @abstractmethod
    async def create_comment(
        self,
        post_id: PostId,
        content: str,
        parent_id: CommentId | None = None,
    ) -> CommentNode:
        """Create a comment or a reply.

        Args:
            post_id: The post ID
            content: Comment text
            parent_id: Parent comment ID for replies (None for top-level)

        Returns:
            The created comment with server-assigned id and timestamp
        """
        pass

    @abstractmethod
    async def edit_comment(self, comment_id: CommentId, content: str) -> CommentNode:
        """Replace the text of a comment.

        Args:
            comment_id: The comment ID
            content: New text

        Returns:
            The updated comment
        """
        pass

    @abstractmethod
    async def delete_comment(self, comment_id: CommentId) -> None:
        """Delete a comment and its replies.

        Args:
            comment_id: The comment ID
        """
        pass

    @abstractmethod
    async def react(
        self,
        entity_type: EntityType,
        entity_id: EntityId,
        category: ReactionCategory,
    ) -> ReactionSnapshot:
        """Toggle the viewer's reaction on a post or comment.

        The server applies the same toggle rules as the local aggregator:
        add when absent, remove when identical, replace when different.

        Args:
            entity_type: Whether the entity is a post or a comment
            entity_id: The entity ID
            category: Reaction category clicked

        Returns:
            Authoritative snapshot after the mutation
        """
        pass

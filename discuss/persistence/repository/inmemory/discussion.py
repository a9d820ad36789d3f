"""In-memory discussion repository for testing."""

from discuss.domain.error import UnauthenticatedError
from discuss.domain.model.comment import CommentNode
from discuss.domain.model.reaction import ReactionSnapshot
from discuss.domain.repository import DiscussionRepository, ViewerSession
from discuss.domain.value import (
    CommentId,
    EntityId,
    EntityType,
    PostId,
    ReactionCategory,
    UserId,
)

from .store import InMemoryDiscussionStore


class InMemoryDiscussionRepository(DiscussionRepository):
    """In-memory implementation of DiscussionRepository.

    Acts on the shared store as the session's viewer.
    """

    def __init__(
        self, store: InMemoryDiscussionStore, viewer_session: ViewerSession
    ) -> None:
        self.store = store
        self.viewer_session = viewer_session

    def _actor(self, action: str) -> UserId:
        viewer_id = self.viewer_session.current_viewer_id()
        if viewer_id is None:
            raise UnauthenticatedError(action)
        return viewer_id

    async def fetch_thread(self, post_id: PostId) -> list[CommentNode]:
        """Fetch the comment tree of a post."""
        return await self.store.thread(post_id, self.viewer_session.current_viewer_id())

    async def fetch_post_reactions(self, post_id: PostId) -> ReactionSnapshot:
        """Fetch the reaction snapshot of a post."""
        return await self.store.post_reactions(
            post_id, self.viewer_session.current_viewer_id()
        )

    async def create_comment(
        self,
        post_id: PostId,
        content: str,
        parent_id: CommentId | None = None,
    ) -> CommentNode:
        """Create a comment as the viewer."""
        return await self.store.create_comment(
            self._actor("comment"), post_id, content, parent_id
        )

    async def edit_comment(self, comment_id: CommentId, content: str) -> CommentNode:
        """Edit a comment as the viewer."""
        return await self.store.edit_comment(
            self._actor("edit comment"), comment_id, content
        )

    async def delete_comment(self, comment_id: CommentId) -> None:
        """Delete a comment as the viewer."""
        await self.store.delete_comment(self._actor("delete comment"), comment_id)

    async def react(
        self,
        entity_type: EntityType,
        entity_id: EntityId,
        category: ReactionCategory,
    ) -> ReactionSnapshot:
        """Toggle the viewer's reaction."""
        return await self.store.react(
            self._actor("add reaction"), entity_type, entity_id, category
        )

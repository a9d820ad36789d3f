"""Comment and reaction facade for one post's discussion."""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass

import logfire
from pydantic import BaseModel

from discuss.application.outcome import FailureKind, Outcome
from discuss.domain.error import (
    DomainError,
    NotAuthorizedError,
    NotFoundError,
    RemoteRejectedError,
    RemoteUnavailableError,
    UnauthenticatedError,
    ValidationFailedError,
)
from discuss.domain.model.comment import CommentNode, CommentTree
from discuss.domain.model.reaction import ReactionSnapshot
from discuss.domain.repository import DiscussionRepository, ViewerSession
from discuss.domain.service import (
    OptimisticMutationController,
    ThreadInteractionState,
    UserProfileResolver,
    comment_tree,
)
from discuss.domain.service.reaction_aggregator import unique_reactions
from discuss.domain.value import (
    CommentId,
    EntityId,
    EntityType,
    PostId,
    ReactionCategory,
    UserDisplay,
    UserId,
)


@dataclass(frozen=True)
class _Action:
    """User-facing wording for one facade operation."""

    verb: str  # completes "Please login to ..."
    failed: str


_REACT = _Action("add reaction", "Failed to add reaction!")
_LOAD = _Action("view comments", "Failed to load comments!")
_COMMENT = _Action("comment", "Failed to send comment!")
_REPLY = _Action("reply", "Failed to send reply!")
_EDIT = _Action("edit comment", "Failed to update comment!")
_DELETE = _Action("delete comment", "Failed to delete comment!")

_EMPTY_CONTENT = "Please enter comment content!"


class ReactorView(BaseModel):
    """One entry of an entity's reactor list."""

    user_id: UserId
    display: UserDisplay
    action: ReactionCategory


class DiscussionFacade:
    """Everything the presentation layer may do with one post's thread.

    Holds the current comment tree, feeds fetched reaction snapshots to
    the mutation controller and mirrors every snapshot it publishes into
    the tree. Expected failures come back as Outcome values; only
    unexpected ones (such as a malformed server payload) raise.

    Every fetch and every local change to the tree takes a ticket from
    the controller. A fetch answered after a newer fetch or local change
    was applied is dropped, so a slow reload cannot resurrect an older
    tree.
    """

    def __init__(
        self,
        post_id: PostId,
        discussion_repository: DiscussionRepository,
        viewer_session: ViewerSession,
        controller: OptimisticMutationController,
        resolver: UserProfileResolver,
        interaction: ThreadInteractionState | None = None,
    ) -> None:
        """Initialize the facade.

        Args:
            post_id: Post whose discussion this facade manages
            discussion_repository: Remote side for comments and reactions
            viewer_session: Identity of the viewer
            controller: Optimistic mutation controller for this thread
            resolver: User profile resolver for this thread
            interaction: View state of this thread
        """
        self.post_id = post_id
        self.discussion_repository = discussion_repository
        self.viewer_session = viewer_session
        self.controller = controller
        self.resolver = resolver
        self.interaction = interaction or ThreadInteractionState()
        self._tree: CommentTree = ()
        self._tree_ticket = 0
        self._unsubscribe = controller.subscribe(self._on_snapshot)

    # Read-only accessors

    @property
    def tree(self) -> CommentTree:
        """Current comment tree."""
        return self._tree

    @property
    def post_entity(self) -> EntityId:
        return EntityId(self.post_id)

    def snapshot(self, entity_id: EntityId) -> ReactionSnapshot:
        """Currently visible reaction snapshot of the post or a comment."""
        return self.controller.snapshot(entity_id)

    def find(self, comment_id: CommentId) -> CommentNode | None:
        return comment_tree.find(self._tree, comment_id)

    def can_modify(self, comment_id: CommentId) -> bool:
        """Whether the viewer may edit or delete a comment."""
        viewer_id = self.viewer_session.current_viewer_id()
        node = self.find(comment_id)
        if viewer_id is None or node is None:
            return False
        return node.author_id == viewer_id

    # Operations

    async def load_thread(self) -> Outcome[CommentTree]:
        """Fetch the thread and the post's reactions from the server.

        Returns:
            Outcome with the installed comment tree
        """
        with logfire.span("facade.load_thread", post_id=str(self.post_id)):
            try:
                await self._refresh()
            except DomainError as e:
                return self._failure(e, _LOAD)
            logfire.info(
                "Thread loaded",
                post_id=str(self.post_id),
                count=comment_tree.count(self._tree),
                depth=comment_tree.max_depth(self._tree),
            )
            return Outcome.success(self._tree)

    async def create_comment(
        self, content: str, parent_id: CommentId | None = None
    ) -> Outcome[CommentNode]:
        """Post a top-level comment or a reply, then reload the thread.

        Args:
            content: Comment text
            parent_id: Comment being replied to (None for top-level)

        Returns:
            Outcome with the comment as created by the server
        """
        action = _COMMENT if parent_id is None else _REPLY
        with logfire.span(
            "facade.create_comment",
            post_id=str(self.post_id),
            parent_id=str(parent_id) if parent_id else None,
        ):
            try:
                self._require_viewer(action)
                self._require_content(content)
                created = await self.discussion_repository.create_comment(
                    self.post_id, content, parent_id
                )
            except DomainError as e:
                return self._failure(e, action)

            self._tree = comment_tree.insert(self._tree, parent_id, created)
            self._mark_local_change()
            self.controller.track(
                EntityId(created.id), EntityType.COMMENT, created.reaction_state
            )
            self.interaction.reply_sent(parent_id)
            logfire.info(
                "Comment created",
                comment_id=str(created.id),
                post_id=str(self.post_id),
            )

            await self._refresh_quietly()
            return Outcome.success(created)

    async def edit_comment(
        self, comment_id: CommentId, content: str
    ) -> Outcome[CommentNode]:
        """Replace the text of one of the viewer's comments.

        Args:
            comment_id: Comment ID
            content: New text

        Returns:
            Outcome with the updated comment
        """
        with logfire.span("facade.edit_comment", comment_id=str(comment_id)):
            try:
                self._require_owner(comment_id, _EDIT)
                self._require_content(content)
                updated = await self.discussion_repository.edit_comment(
                    comment_id, content
                )
            except DomainError as e:
                return self._failure(e, _EDIT)

            self._tree = comment_tree.replace_content(
                self._tree, comment_id, updated.content
            )
            self._mark_local_change()
            self.interaction.end_edit(comment_id)
            logfire.info("Comment edited", comment_id=str(comment_id))
            return Outcome.success(self.find(comment_id) or updated)

    async def delete_comment(self, comment_id: CommentId) -> Outcome[None]:
        """Delete one of the viewer's comments with all its replies.

        Deleting a comment that is already gone succeeds without a
        remote call: the desired end state already holds.

        Args:
            comment_id: Comment ID

        Returns:
            Outcome without a value
        """
        with logfire.span("facade.delete_comment", comment_id=str(comment_id)):
            try:
                self._require_viewer(_DELETE)
                if self.find(comment_id) is None:
                    logfire.info("Comment already absent", comment_id=str(comment_id))
                    return Outcome.success()
                self._require_owner(comment_id, _DELETE)
                await self._delete_remote(comment_id)
            except DomainError as e:
                return self._failure(e, _DELETE)

            self._drop(comment_id)
            logfire.info("Comment deleted", comment_id=str(comment_id))

            await self._refresh_quietly()
            return Outcome.success()

    async def react(
        self, entity_id: EntityId, category: ReactionCategory
    ) -> Outcome[ReactionSnapshot]:
        """Toggle the viewer's reaction on the post or one of its comments.

        The change is visible through snapshot() and tree right away;
        the returned outcome resolves once the server has answered.

        Args:
            entity_id: Post or comment ID
            category: Category clicked

        Returns:
            Outcome with the authoritative snapshot
        """
        with logfire.span(
            "facade.react", entity_id=str(entity_id), category=category.value
        ):
            try:
                self._require_viewer(_REACT)
                snapshot = await self.controller.toggle(entity_id, category)
            except DomainError as e:
                return self._failure(e, _REACT)

            self.interaction.set_picker(entity_id, False)
            return Outcome.success(snapshot)

    async def quick_react(self, entity_id: EntityId) -> Outcome[ReactionSnapshot]:
        """Main reaction button: undo the viewer's reaction or open the picker.

        Args:
            entity_id: Post or comment ID

        Returns:
            Outcome with the snapshot after the click
        """
        current = self.controller.snapshot(entity_id).viewer_reaction
        if current is not None:
            return await self.react(entity_id, current)
        self.interaction.set_picker(entity_id, True)
        return Outcome.success(self.controller.snapshot(entity_id))

    async def list_reactors(self, entity_id: EntityId) -> list[ReactorView]:
        """Who reacted to an entity, one entry per user, with display names.

        Args:
            entity_id: Post or comment ID

        Returns:
            Reactor entries in reaction order
        """
        reactions = unique_reactions(self.controller.snapshot(entity_id).reactions)
        displays = await self.resolver.resolve_many([r.user_id for r in reactions])
        return [
            ReactorView(
                user_id=reaction.user_id,
                display=displays[reaction.user_id],
                action=reaction.action,
            )
            for reaction in reactions
        ]

    def close(self) -> None:
        """Tear the thread down: drop view state, caches and subscriptions."""
        self._unsubscribe()
        self.controller.reset()
        self.resolver.clear()
        self.interaction.reset()
        self._tree = ()
        self._mark_local_change()
        logfire.info("Thread closed", post_id=str(self.post_id))

    # Internals

    async def _refresh(self) -> None:
        ticket = self.controller.begin_refresh()
        nodes, post_snapshot = await asyncio.gather(
            self.discussion_repository.fetch_thread(self.post_id),
            self.discussion_repository.fetch_post_reactions(self.post_id),
        )
        if ticket < self._tree_ticket:
            logfire.info(
                "Discarded thread fetch older than the current tree",
                post_id=str(self.post_id),
                ticket=ticket,
            )
            return
        self._install(nodes, post_snapshot, ticket)

    async def _refresh_quietly(self) -> None:
        """Reload after a structural change; a failure keeps the local tree."""
        try:
            await self._refresh()
        except DomainError as e:
            logfire.warn(
                "Thread reload failed, keeping local tree",
                post_id=str(self.post_id),
                error_type=type(e).__name__,
            )

    def _install(
        self,
        nodes: Sequence[CommentNode],
        post_snapshot: ReactionSnapshot,
        ticket: int,
    ) -> None:
        """Adopt an authoritative tree, keeping speculative reactions visible."""
        previous_ids = {node.id for node in comment_tree.walk(self._tree)}

        self._tree = tuple(nodes)
        self._tree_ticket = ticket
        self.controller.track(self.post_entity, EntityType.POST, post_snapshot, ticket)
        for node in comment_tree.walk(self._tree):
            visible = self.controller.track(
                EntityId(node.id), EntityType.COMMENT, node.reaction_state, ticket
            )
            if visible != node.reaction_state:
                self._tree = comment_tree.map_reaction(self._tree, node.id, visible)
            self.resolver.prime(node.author_id, node.author_display)

        vanished = previous_ids - {node.id for node in comment_tree.walk(self._tree)}
        for comment_id in vanished:
            self.controller.forget(EntityId(comment_id))
        self.interaction.prune(vanished)

    def _on_snapshot(self, entity_id: EntityId, snapshot: ReactionSnapshot) -> None:
        if entity_id == self.post_entity:
            return
        node = comment_tree.find(self._tree, CommentId(entity_id))
        if node is None or node.reaction_state == snapshot:
            return
        self._tree = comment_tree.map_reaction(self._tree, node.id, snapshot)

    async def _delete_remote(self, comment_id: CommentId) -> None:
        try:
            await self.discussion_repository.delete_comment(comment_id)
        except NotFoundError:
            # Deleted concurrently elsewhere; the node is gone either way
            logfire.info("Comment already deleted remotely", comment_id=str(comment_id))

    def _drop(self, comment_id: CommentId) -> None:
        node = self.find(comment_id)
        if node is None:
            return
        removed = comment_tree.subtree_ids(node)
        self._tree = comment_tree.remove(self._tree, comment_id)
        self._mark_local_change()
        for removed_id in removed:
            self.controller.forget(EntityId(removed_id))
        self.interaction.prune(removed)

    def _mark_local_change(self) -> None:
        self._tree_ticket = self.controller.begin_refresh()

    def _require_viewer(self, action: _Action) -> UserId:
        viewer_id = self.viewer_session.current_viewer_id()
        if viewer_id is None:
            raise UnauthenticatedError(action.verb)
        return viewer_id

    def _require_owner(self, comment_id: CommentId, action: _Action) -> CommentNode:
        viewer_id = self._require_viewer(action)
        node = self.find(comment_id)
        if node is None:
            raise NotFoundError("Comment", str(comment_id))
        if node.author_id != viewer_id:
            raise NotAuthorizedError("comment", str(comment_id), str(viewer_id))
        return node

    @staticmethod
    def _require_content(content: str) -> None:
        if not content or not content.strip():
            raise ValidationFailedError(_EMPTY_CONTENT)

    def _failure(self, error: DomainError, action: _Action) -> Outcome:
        if isinstance(error, UnauthenticatedError):
            kind = FailureKind.UNAUTHENTICATED
            message = f"Please login to {action.verb}!"
        elif isinstance(error, ValidationFailedError):
            kind, message = FailureKind.VALIDATION_FAILED, str(error)
        elif isinstance(error, NotAuthorizedError):
            kind, message = (
                FailureKind.NOT_AUTHORIZED,
                "You can only change your own comments!",
            )
        elif isinstance(error, NotFoundError):
            kind, message = FailureKind.NOT_FOUND, f"{error.resource} no longer exists!"
        elif isinstance(error, RemoteUnavailableError):
            kind, message = (
                FailureKind.REMOTE_UNAVAILABLE,
                f"{action.failed} Please check your connection.",
            )
        elif isinstance(error, RemoteRejectedError):
            kind, message = FailureKind.REMOTE_REJECTED, action.failed
        else:
            raise error

        logfire.warn(
            "Discussion operation failed",
            post_id=str(self.post_id),
            kind=kind.value,
            error=str(error),
        )
        return Outcome.failed(kind, message)

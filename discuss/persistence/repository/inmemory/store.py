"""In-memory discussion store.

Plays the server: holds every post, comment, reaction and user, and
applies authoritative toggle semantics on behalf of whichever user acts.
Comments are stored flat with a parent reference and assembled into a
tree on read.
"""

from collections import defaultdict
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4

import logfire

from discuss.domain.error import (
    NotAuthorizedError,
    NotFoundError,
    ValidationFailedError,
)
from discuss.domain.model.comment import CommentNode
from discuss.domain.model.reaction import Reaction, ReactionSnapshot
from discuss.domain.service.reaction_aggregator import compute_snapshot, toggle
from discuss.domain.value import (
    CommentId,
    EntityId,
    EntityType,
    PostId,
    ReactionCategory,
    UserDisplay,
    UserId,
)


@dataclass
class _CommentRecord:
    id: CommentId
    post_id: PostId
    parent_id: CommentId | None
    author_id: UserId
    content: str
    created_at: datetime
    reactions: list[Reaction] = field(default_factory=list)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryDiscussionStore:
    """Authoritative in-memory state shared by every viewer."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self.clock = clock
        self._post_reactions: dict[PostId, list[Reaction]] = {}
        self._comments: dict[CommentId, _CommentRecord] = {}
        self._users: dict[UserId, UserDisplay] = {}
        self._tokens: dict[str, UserId] = {}

    # Seeding

    def add_post(self, post_id: PostId) -> None:
        self._post_reactions.setdefault(post_id, [])

    def add_user(
        self, user_id: UserId, display: UserDisplay, token: str | None = None
    ) -> None:
        self._users[user_id] = display
        if token:
            self._tokens[token] = user_id

    def user_for_token(self, token: str | None) -> UserId | None:
        """Resolve a bearer token to its user."""
        if not token:
            return None
        return self._tokens.get(token)

    # Reads

    async def thread(
        self, post_id: PostId, viewer_id: UserId | None
    ) -> list[CommentNode]:
        """Assemble the comment tree of a post.

        Top-level comments and replies are both ordered oldest first.
        """
        self._require_post(post_id)
        records = sorted(
            (c for c in self._comments.values() if c.post_id == post_id),
            key=lambda c: c.created_at,
        )

        children: dict[CommentId | None, list[_CommentRecord]] = defaultdict(list)
        for record in records:
            children[record.parent_id].append(record)

        def build(record: _CommentRecord) -> CommentNode:
            return self._node(
                record, viewer_id, [build(child) for child in children[record.id]]
            )

        return [build(record) for record in children[None]]

    async def post_reactions(
        self, post_id: PostId, viewer_id: UserId | None
    ) -> ReactionSnapshot:
        self._require_post(post_id)
        return compute_snapshot(self._post_reactions[post_id], viewer_id)

    async def lookup_user(self, user_id: UserId) -> UserDisplay:
        display = self._users.get(user_id)
        if display is None:
            raise NotFoundError("User", str(user_id))
        return display

    # Writes

    async def create_comment(
        self,
        actor_id: UserId,
        post_id: PostId,
        content: str,
        parent_id: CommentId | None = None,
    ) -> CommentNode:
        with logfire.span(
            "store.create_comment",
            post_id=str(post_id),
            author_id=str(actor_id),
            parent_id=str(parent_id) if parent_id else None,
        ):
            self._require_post(post_id)
            if not content.strip():
                raise ValidationFailedError("Comment content must not be empty")
            if parent_id is not None:
                parent = self._require_comment(parent_id)
                if parent.post_id != post_id:
                    raise ValidationFailedError(
                        "Parent comment does not belong to this post"
                    )

            record = _CommentRecord(
                id=CommentId(uuid4().hex),
                post_id=post_id,
                parent_id=parent_id,
                author_id=actor_id,
                content=content,
                created_at=self.clock(),
            )
            self._comments[record.id] = record
            logfire.info("Comment stored", comment_id=str(record.id))
            return self._node(record, actor_id, [])

    async def edit_comment(
        self, actor_id: UserId, comment_id: CommentId, content: str
    ) -> CommentNode:
        with logfire.span("store.edit_comment", comment_id=str(comment_id)):
            record = self._require_comment(comment_id)
            if record.author_id != actor_id:
                raise NotAuthorizedError("comment", str(comment_id), str(actor_id))
            if not content.strip():
                raise ValidationFailedError("Comment content must not be empty")
            record.content = content
            replies = await self._replies(record, actor_id)
            return self._node(record, actor_id, replies)

    async def delete_comment(self, actor_id: UserId, comment_id: CommentId) -> None:
        """Delete a comment and every reply below it."""
        with logfire.span("store.delete_comment", comment_id=str(comment_id)):
            record = self._require_comment(comment_id)
            if record.author_id != actor_id:
                raise NotAuthorizedError("comment", str(comment_id), str(actor_id))

            doomed = [comment_id]
            index = 0
            while index < len(doomed):
                current = doomed[index]
                doomed.extend(
                    c.id for c in self._comments.values() if c.parent_id == current
                )
                index += 1
            for doomed_id in doomed:
                del self._comments[doomed_id]
            logfire.info(
                "Comment deleted", comment_id=str(comment_id), removed=len(doomed)
            )

    async def react(
        self,
        actor_id: UserId,
        entity_type: EntityType,
        entity_id: EntityId,
        category: ReactionCategory,
    ) -> ReactionSnapshot:
        """Toggle a user's reaction and return the resulting snapshot."""
        with logfire.span(
            "store.react",
            entity_type=entity_type.value,
            entity_id=str(entity_id),
            user_id=str(actor_id),
            category=category.value,
        ):
            if entity_type == EntityType.POST:
                post_id = PostId(entity_id)
                self._require_post(post_id)
                updated = toggle(
                    self._post_reactions[post_id], actor_id, category, self.clock()
                )
                self._post_reactions[post_id] = updated
            else:
                record = self._require_comment(CommentId(entity_id))
                updated = toggle(record.reactions, actor_id, category, self.clock())
                record.reactions = updated
            return compute_snapshot(updated, actor_id)

    # Helpers

    def _require_post(self, post_id: PostId) -> None:
        if post_id not in self._post_reactions:
            raise NotFoundError("Post", str(post_id))

    def _require_comment(self, comment_id: CommentId) -> _CommentRecord:
        record = self._comments.get(comment_id)
        if record is None:
            raise NotFoundError("Comment", str(comment_id))
        return record

    async def _replies(
        self, record: _CommentRecord, viewer_id: UserId | None
    ) -> Sequence[CommentNode]:
        thread = await self.thread(record.post_id, viewer_id)
        stack = list(thread)
        while stack:
            node = stack.pop()
            if node.id == record.id:
                return node.children
            stack.extend(node.children)
        return ()

    def _node(
        self,
        record: _CommentRecord,
        viewer_id: UserId | None,
        children: Sequence[CommentNode],
    ) -> CommentNode:
        return CommentNode(
            id=record.id,
            author_id=record.author_id,
            author_display=self._users.get(
                record.author_id, UserDisplay(name=str(record.author_id))
            ),
            created_at=record.created_at,
            content=record.content,
            reaction_state=compute_snapshot(record.reactions, viewer_id),
            children=children,
        )

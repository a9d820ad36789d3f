"""Test configuration and helpers."""

import asyncio
from collections import defaultdict
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone

import logfire

from discuss.domain.model import CommentNode, Reaction, ReactionSnapshot
from discuss.domain.repository import DiscussionRepository
from discuss.domain.service import comment_tree
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

# Keep spans local during tests
logfire.configure(send_to_logfire=False, console=False)

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_clock(start: datetime = BASE_TIME) -> Callable[[], datetime]:
    """Clock returning a strictly increasing timestamp on every call."""
    ticks = iter(range(1, 1_000_000))

    def clock() -> datetime:
        return start + timedelta(seconds=next(ticks))

    return clock


def make_reaction(user: str, action: ReactionCategory, seconds: int = 0) -> Reaction:
    """Helper to build a reaction at BASE_TIME plus an offset."""
    return Reaction(
        user_id=UserId(user),
        action=action,
        created_at=BASE_TIME + timedelta(seconds=seconds),
    )


def make_snapshot(
    *reactions: tuple[str, ReactionCategory], viewer: str | None = None
) -> ReactionSnapshot:
    """Helper to build a snapshot from (user, category) pairs in order."""
    raw = [
        make_reaction(user, action, seconds=index)
        for index, (user, action) in enumerate(reactions)
    ]
    return compute_snapshot(raw, UserId(viewer) if viewer else None)


def make_node(
    comment_id: str,
    *children: CommentNode,
    author: str = "author",
    content: str | None = None,
    reaction_state: ReactionSnapshot | None = None,
) -> CommentNode:
    """Helper to build a comment node with nested replies."""
    return CommentNode(
        id=CommentId(comment_id),
        author_id=UserId(author),
        author_display=UserDisplay(name=author.title()),
        created_at=BASE_TIME,
        content=content if content is not None else f"Comment {comment_id}",
        reaction_state=reaction_state or ReactionSnapshot.empty(),
        children=list(children),
    )


class GatedDiscussionRepository(DiscussionRepository):
    """Scriptable discussion repository for controller and facade tests.

    Reaction requests apply server toggle semantics for a single acting
    user. While `gate` is set to an unset Event, requests wait on it, so
    tests can observe the state between click and response. `fetch_gate`
    does the same for thread fetches, which answer with the thread as it
    was when the fetch arrived.
    """

    def __init__(self, viewer_id: str = "viewer") -> None:
        self.viewer_id = UserId(viewer_id)
        self.clock = make_clock(BASE_TIME + timedelta(days=1))
        self.reactions: dict[EntityId, list[Reaction]] = defaultdict(list)
        self.react_calls: list[tuple[EntityType, EntityId, ReactionCategory]] = []
        self.gate: asyncio.Event | None = None
        self.request_started = asyncio.Event()
        self.react_error: Exception | None = None
        # 1-based indices of react calls that fail with react_error
        self.failing_calls: set[int] | None = None
        self.fetch_error: Exception | None = None
        self.fetch_gate: asyncio.Event | None = None
        self.fetch_started = asyncio.Event()
        self.thread: Sequence[CommentNode] = []
        self.post_snapshot = ReactionSnapshot.empty()
        self.created: list[tuple[PostId, str, CommentId | None]] = []
        self.deleted: list[CommentId] = []
        self.delete_error: Exception | None = None
        self.fetch_count = 0

    def seed(self, entity_id: str, *reactions: Reaction) -> None:
        """Set the authoritative reaction list of an entity."""
        self.reactions[EntityId(entity_id)] = list(reactions)

    async def fetch_thread(self, post_id: PostId) -> list[CommentNode]:
        self.fetch_count += 1
        if self.fetch_error is not None:
            raise self.fetch_error
        thread = list(self.thread)
        gate = self.fetch_gate
        if gate is not None:
            self.fetch_started.set()
            await gate.wait()
        return thread

    async def fetch_post_reactions(self, post_id: PostId) -> ReactionSnapshot:
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.post_snapshot

    async def create_comment(
        self,
        post_id: PostId,
        content: str,
        parent_id: CommentId | None = None,
    ) -> CommentNode:
        self.created.append((post_id, content, parent_id))
        node = make_node(
            f"new-{len(self.created)}", author=str(self.viewer_id), content=content
        )
        self.thread = comment_tree.insert(self.thread, parent_id, node)
        return node

    async def edit_comment(self, comment_id: CommentId, content: str) -> CommentNode:
        self.thread = comment_tree.replace_content(self.thread, comment_id, content)
        return make_node(str(comment_id), author=str(self.viewer_id), content=content)

    async def delete_comment(self, comment_id: CommentId) -> None:
        if self.delete_error is not None:
            raise self.delete_error
        self.deleted.append(comment_id)
        self.thread = comment_tree.remove(self.thread, comment_id)

    async def react(
        self,
        entity_type: EntityType,
        entity_id: EntityId,
        category: ReactionCategory,
    ) -> ReactionSnapshot:
        self.react_calls.append((entity_type, entity_id, category))
        self.request_started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.react_error is not None and (
            self.failing_calls is None or len(self.react_calls) in self.failing_calls
        ):
            raise self.react_error
        self.reactions[entity_id] = toggle(
            self.reactions[entity_id], self.viewer_id, category, self.clock()
        )
        return compute_snapshot(self.reactions[entity_id], self.viewer_id)


async def settle() -> None:
    """Let every ready task run until nothing is left to do."""
    for _ in range(10):
        await asyncio.sleep(0)

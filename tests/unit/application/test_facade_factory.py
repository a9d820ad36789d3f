"""Unit tests for DiscussionFacadeFactory wired through the container."""

import pytest

from discuss.application import DiscussionFacadeFactory
from discuss.domain.repository import StaticViewerSession
from discuss.domain.value import (
    EntityId,
    EntityType,
    PostId,
    ReactionCategory,
    UserDisplay,
    UserId,
)
from discuss.persistence.repository.inmemory import InMemoryDiscussionStore
from tests.conftest import make_clock
from tests.harness import create_env_fixture

# Unit test fixture - in-memory remote side
unit_env = create_env_fixture()

ALICE = UserId("alice")
BOB = UserId("bob")


async def _arrange(
    unit_env,
) -> tuple[DiscussionFacadeFactory, InMemoryDiscussionStore]:
    store = await unit_env.get(InMemoryDiscussionStore)
    store.clock = make_clock()
    for post in ("p1", "p2"):
        store.add_post(PostId(post))
    store.add_user(ALICE, UserDisplay(name="Alice"))
    store.add_user(BOB, UserDisplay(name="Bob"))
    session = await unit_env.get(StaticViewerSession)
    session.sign_in(ALICE, "alice-token")
    return await unit_env.get(DiscussionFacadeFactory), store


class TestDiscussionFacadeFactory:
    """Tests for opening facades per post."""

    @pytest.mark.asyncio
    async def test_each_post_gets_its_own_state(self, unit_env):
        """Facades for different posts should not share controllers."""
        # Arrange
        factory, _ = await _arrange(unit_env)

        # Act
        first = factory.open(PostId("p1"))
        second = factory.open(PostId("p2"))

        # Assert
        assert first.controller is not second.controller
        assert first.resolver is not second.resolver
        assert first.interaction is not second.interaction

    @pytest.mark.asyncio
    async def test_conversation_against_store(self, unit_env):
        """Comment, reply and react should all land in the shared store."""
        # Arrange
        factory, store = await _arrange(unit_env)
        facade = factory.open(PostId("p1"))
        await facade.load_thread()

        # Act
        top = await facade.create_comment("Hello everyone")
        reply = await facade.create_comment("Replying", parent_id=top.value.id)
        reacted = await facade.react(EntityId(top.value.id), ReactionCategory.HAHA)
        await store.react(
            BOB, EntityType.COMMENT, EntityId(top.value.id), ReactionCategory.HAHA
        )
        await facade.load_thread()

        # Assert
        assert reply.ok and reacted.ok
        node = facade.find(top.value.id)
        assert [c.content for c in node.children] == ["Replying"]
        assert node.reaction_state.counts[ReactionCategory.HAHA] == 2
        assert node.reaction_state.viewer_reaction == ReactionCategory.HAHA
        reactors = await facade.list_reactors(EntityId(top.value.id))
        assert [r.display.name for r in reactors] == ["Alice", "Bob"]

"""Facade factory."""

from collections.abc import Callable
from datetime import datetime

import logfire

from discuss.application.facade import DiscussionFacade
from discuss.domain.repository import (
    DiscussionRepository,
    UserRepository,
    ViewerSession,
)
from discuss.domain.service import (
    OptimisticMutationController,
    ThreadInteractionState,
    UserProfileResolver,
)
from discuss.domain.value import PostId


class DiscussionFacadeFactory:
    """Opens a facade per post.

    Collaborators are shared; controller, resolver cache and interaction
    state are fresh for every opened thread, so nothing leaks from one
    post's discussion into the next.
    """

    def __init__(
        self,
        discussion_repository: DiscussionRepository,
        user_repository: UserRepository,
        viewer_session: ViewerSession,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize facade factory.

        Args:
            discussion_repository: Remote side for comments and reactions
            user_repository: User directory for reactor display names
            viewer_session: Identity of the viewer
            clock: Timestamp source for speculative reactions (tests)
        """
        self.discussion_repository = discussion_repository
        self.user_repository = user_repository
        self.viewer_session = viewer_session
        self.clock = clock

    def open(self, post_id: PostId) -> DiscussionFacade:
        """Create the facade for one post's thread (not yet loaded)."""
        if self.clock is None:
            controller = OptimisticMutationController(
                self.discussion_repository, self.viewer_session
            )
        else:
            controller = OptimisticMutationController(
                self.discussion_repository, self.viewer_session, clock=self.clock
            )
        logfire.info("Thread opened", post_id=str(post_id))
        return DiscussionFacade(
            post_id=post_id,
            discussion_repository=self.discussion_repository,
            viewer_session=self.viewer_session,
            controller=controller,
            resolver=UserProfileResolver(self.user_repository),
            interaction=ThreadInteractionState(),
        )

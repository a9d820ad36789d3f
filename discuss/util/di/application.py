"""Application layer DI providers."""

from dishka import Scope, provide

from discuss.application import DiscussionFacadeFactory
from discuss.domain.repository import (
    DiscussionRepository,
    UserRepository,
    ViewerSession,
)
from discuss.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_facade_factory(
        self,
        discussion_repository: DiscussionRepository,
        user_repository: UserRepository,
        viewer_session: ViewerSession,
    ) -> DiscussionFacadeFactory:
        """Provide the factory that opens one facade per post."""
        return DiscussionFacadeFactory(
            discussion_repository=discussion_repository,
            user_repository=user_repository,
            viewer_session=viewer_session,
        )

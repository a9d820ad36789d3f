"""Reference server store provider."""

from dishka import Scope, provide

from discuss.persistence.repository.inmemory import InMemoryDiscussionStore
from discuss.util.di.base import ProviderBase


class StoreProvider(ProviderBase):
    """Provides the authoritative store behind the reference server.

    One store per container; a fresh container starts from an empty store.
    """

    @provide(scope=Scope.APP)
    def get_store(self) -> InMemoryDiscussionStore:
        """Provide the in-memory discussion store."""
        return InMemoryDiscussionStore()

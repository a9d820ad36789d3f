"""In-memory user repository for testing."""

from discuss.domain.repository import UserRepository
from discuss.domain.value import UserDisplay, UserId

from .store import InMemoryDiscussionStore


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository."""

    def __init__(self, store: InMemoryDiscussionStore) -> None:
        self.store = store

    async def lookup_user(self, user_id: UserId) -> UserDisplay:
        """Look up a user's display information."""
        return await self.store.lookup_user(user_id)

"""User profile resolution for reaction lists."""

import asyncio

import logfire

from discuss.domain.repository import UserRepository
from discuss.domain.value import UserDisplay, UserId

from .base import Service


class UserProfileResolver(Service):
    """Resolves user ids referenced by reactions to display information.

    Results are memoized for the lifetime of the resolver (one rendered
    thread). Concurrent lookups of the same user share one request.
    A failed lookup degrades to the raw id as the display name and is
    not memoized, so a later render may retry it.
    """

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize profile resolver.

        Args:
            user_repository: User directory to look profiles up in
        """
        self.user_repository = user_repository
        self._cache: dict[UserId, UserDisplay] = {}
        self._in_flight: dict[UserId, asyncio.Task[UserDisplay]] = {}
        self._generation = 0

    async def resolve(self, user_id: UserId) -> UserDisplay:
        """Resolve one user.

        Args:
            user_id: User ID

        Returns:
            Display information, or the raw id as name if lookup failed
        """
        cached = self._cache.get(user_id)
        if cached is not None:
            return cached

        task = self._in_flight.get(user_id)
        if task is None:
            task = asyncio.ensure_future(self._lookup(user_id))
            self._in_flight[user_id] = task

        # One caller being cancelled must not cancel the shared lookup
        return await asyncio.shield(task)

    async def resolve_many(self, user_ids: list[UserId]) -> dict[UserId, UserDisplay]:
        """Resolve several users concurrently.

        Args:
            user_ids: User IDs (duplicates allowed)

        Returns:
            Mapping of each distinct user ID to its display information
        """
        distinct = list(dict.fromkeys(user_ids))
        displays = await asyncio.gather(*(self.resolve(uid) for uid in distinct))
        return dict(zip(distinct, displays))

    def prime(self, user_id: UserId, display: UserDisplay) -> None:
        """Seed the cache with display information already at hand."""
        self._cache.setdefault(user_id, display)

    def cached(self, user_id: UserId) -> UserDisplay | None:
        """Return memoized display information without resolving."""
        return self._cache.get(user_id)

    def clear(self) -> None:
        """Forget everything; called when the thread is torn down.

        Lookups still in flight finish for their callers but no longer
        write into the cache.
        """
        self._cache.clear()
        self._in_flight.clear()
        self._generation += 1

    async def _lookup(self, user_id: UserId) -> UserDisplay:
        generation = self._generation
        with logfire.span("profile_resolver.lookup", user_id=str(user_id)):
            try:
                display = await self.user_repository.lookup_user(user_id)
            except Exception as e:
                logfire.warn(
                    "User lookup failed, showing raw id",
                    user_id=str(user_id),
                    error_type=type(e).__name__,
                )
                return UserDisplay(name=str(user_id))
            else:
                if generation == self._generation:
                    self._cache[user_id] = display
                return display
            finally:
                if generation == self._generation:
                    self._in_flight.pop(user_id, None)

"""User repository interface."""

from abc import ABC, abstractmethod

from discuss.domain.value import UserDisplay, UserId


class UserRepository(ABC):
    """Lookup of user display information."""

    @abstractmethod
    async def lookup_user(self, user_id: UserId) -> UserDisplay:
        """Look up a user's display name and avatar.

        Args:
            user_id: The user's unique identifier

        Returns:
            Display information

        Raises:
            NotFoundError: If the user does not exist
        """
        pass

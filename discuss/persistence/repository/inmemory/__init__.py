"""In-memory repository implementations for testing."""

from .discussion import InMemoryDiscussionRepository
from .store import InMemoryDiscussionStore
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryDiscussionRepository",
    "InMemoryDiscussionStore",
    "InMemoryUserRepository",
]

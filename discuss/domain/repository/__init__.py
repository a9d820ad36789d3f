"""Collaborator interfaces for the discussion domain.

Interfaces are defined in the domain layer (dependency inversion).
Implementations live in the adapter and persistence layers.
"""

from discuss.domain.repository.discussion import DiscussionRepository
from discuss.domain.repository.user import UserRepository
from discuss.domain.repository.viewer import StaticViewerSession, ViewerSession

__all__ = [
    "DiscussionRepository",
    "UserRepository",
    "ViewerSession",
    "StaticViewerSession",
]

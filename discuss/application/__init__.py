"""Application layer: the discussion facade consumed by presentation."""

from .facade import DiscussionFacade, ReactorView
from .factory import DiscussionFacadeFactory
from .outcome import FailureKind, Outcome

__all__ = [
    "DiscussionFacade",
    "DiscussionFacadeFactory",
    "FailureKind",
    "Outcome",
    "ReactorView",
]

"""Domain services."""

from . import comment_tree, reaction_aggregator
from .base import Service
from .interaction_state import ThreadInteractionState
from .mutation_controller import OptimisticMutationController
from .profile_resolver import UserProfileResolver

__all__ = [
    "OptimisticMutationController",
    "Service",
    "ThreadInteractionState",
    "UserProfileResolver",
    "comment_tree",
    "reaction_aggregator",
]

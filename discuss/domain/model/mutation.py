"""Pending reaction mutation bookkeeping.

Owned exclusively by the optimistic mutation controller. A pending
mutation exists only between the viewer's click and the settlement of
the remote request it triggered; it is never persisted.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum

from discuss.domain.model.reaction import ReactionSnapshot
from discuss.domain.value import EntityId, ReactionCategory


class MutationPhase(str, Enum):
    """Lifecycle of a reaction mutation on one entity."""

    IDLE = "idle"
    SPECULATING = "speculating"
    RECONCILED = "reconciled"
    ROLLED_BACK = "rolled_back"


@dataclass
class PendingMutation:
    """In-flight optimistic reaction change on one entity.

    Attributes:
        entity_id: Entity being reacted to
        previous_snapshot: Last known-good snapshot, restored on failure
        speculative_snapshot: Locally computed state currently published
        dispatched_category: Category sent with the outstanding request
        in_flight: Whether a remote request is outstanding
        phase: Current lifecycle phase
        requests_sent: Number of remote calls issued for this mutation
        task: Task driving the remote request(s)
    """

    entity_id: EntityId
    previous_snapshot: ReactionSnapshot
    speculative_snapshot: ReactionSnapshot
    dispatched_category: ReactionCategory
    in_flight: bool = True
    phase: MutationPhase = MutationPhase.SPECULATING
    requests_sent: int = 0
    task: asyncio.Task | None = field(default=None, repr=False)

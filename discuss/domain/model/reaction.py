"""Reaction entities.

A reaction is one user's emoji-style response to a post or comment.
Each entity carries a snapshot: the reaction list plus derived counts,
total, and the current viewer's own reaction.
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from types import MappingProxyType

from pydantic import Field, field_serializer, field_validator, model_validator

from discuss.domain.model.common import DomainModel
from discuss.domain.value import ReactionCategory, UserId


class Reaction(DomainModel):
    """A single user's reaction on an entity.

    Business rules:
    - At most one current reaction per user per entity
    - Reacting again with the same category removes the reaction
    - Reacting with a different category replaces it
    """

    user_id: UserId
    action: ReactionCategory
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def _zero_counts() -> Mapping[ReactionCategory, int]:
    return MappingProxyType({category: 0 for category in ReactionCategory})


class ReactionSnapshot(DomainModel):
    """Render-ready reaction summary for one entity at one point in time.

    Invariants:
    - total == sum(counts.values())
    - every category is present in counts with a non-negative value

    viewer_reaction is a cached projection for the viewer the snapshot
    was computed for; it is not authoritative.

    Snapshots are immutable all the way down: reactions is a tuple and
    counts a read-only mapping.
    """

    reactions: tuple[Reaction, ...] = ()
    counts: Mapping[ReactionCategory, int] = Field(default_factory=_zero_counts)
    total: int = Field(default=0, ge=0)
    viewer_reaction: ReactionCategory | None = None

    @field_validator("counts", mode="after")
    @classmethod
    def freeze_counts(
        cls, v: Mapping[ReactionCategory, int]
    ) -> Mapping[ReactionCategory, int]:
        return MappingProxyType(dict(v))

    @field_serializer("counts")
    def dump_counts(self, counts: Mapping[ReactionCategory, int]) -> dict:
        return dict(counts)

    @model_validator(mode="after")
    def check_counts(self) -> "ReactionSnapshot":
        """Validate count invariants."""
        missing = set(ReactionCategory) - set(self.counts)
        if missing:
            raise ValueError(f"Missing counts for categories: {sorted(missing)}")
        if any(value < 0 for value in self.counts.values()):
            raise ValueError("Reaction counts must be non-negative")
        if self.total != sum(self.counts.values()):
            raise ValueError("Reaction total must equal the sum of counts")
        return self

    @classmethod
    def empty(cls) -> "ReactionSnapshot":
        """Snapshot of an entity nobody has reacted to."""
        return cls()

    def reaction_of(self, user_id: UserId) -> Reaction | None:
        """Return the reaction a user currently has on the entity."""
        return next((r for r in self.reactions if r.user_id == user_id), None)

"""Reaction aggregation.

Pure functions that derive snapshots from raw reaction lists and apply
a viewer's toggle. Nothing here touches the network, so the same rules
run on the client (speculative state) and in the in-memory store
(authoritative state).
"""

from collections.abc import Sequence
from datetime import datetime

from discuss.domain.error import UnauthenticatedError
from discuss.domain.model.reaction import Reaction, ReactionSnapshot
from discuss.domain.value import ReactionCategory, UserId


def unique_reactions(reactions: Sequence[Reaction]) -> list[Reaction]:
    """De-duplicate reactions by user.

    When a user appears more than once, the entry with the latest
    created_at wins (the later position wins a tie). The result keeps
    the list order of the winning entries.

    Args:
        reactions: Raw reaction list, possibly with duplicates

    Returns:
        At most one reaction per user
    """
    winners: dict[UserId, int] = {}
    for index, reaction in enumerate(reactions):
        current = winners.get(reaction.user_id)
        if current is None or reaction.created_at >= reactions[current].created_at:
            winners[reaction.user_id] = index
    return [reactions[index] for index in sorted(winners.values())]


def compute_snapshot(
    reactions: Sequence[Reaction], viewer_id: UserId | None
) -> ReactionSnapshot:
    """Build a render-ready snapshot from a raw reaction list.

    Args:
        reactions: Raw reaction list
        viewer_id: Viewer the snapshot is computed for (None when anonymous)

    Returns:
        Snapshot with per-category counts, total and the viewer's reaction
    """
    deduped = unique_reactions(reactions)

    counts = {category: 0 for category in ReactionCategory}
    for reaction in deduped:
        counts[reaction.action] += 1

    viewer_reaction = None
    if viewer_id is not None:
        own = next((r for r in deduped if r.user_id == viewer_id), None)
        viewer_reaction = own.action if own else None

    return ReactionSnapshot(
        reactions=deduped,
        counts=counts,
        total=sum(counts.values()),
        viewer_reaction=viewer_reaction,
    )


def toggle(
    reactions: Sequence[Reaction],
    viewer_id: UserId | None,
    category: ReactionCategory,
    now: datetime,
) -> list[Reaction]:
    """Apply a viewer's reaction click to a reaction list.

    - No existing reaction: append one
    - Existing reaction with the same category: remove it
    - Existing reaction with a different category: replace it (the new
      entry is appended at the end)

    Args:
        reactions: Current reaction list
        viewer_id: Viewer clicking
        category: Category clicked
        now: Timestamp for a newly added reaction

    Returns:
        New reaction list; the input is not modified

    Raises:
        UnauthenticatedError: If viewer_id is None
    """
    if viewer_id is None:
        raise UnauthenticatedError("add reaction")

    current = next(
        (r for r in unique_reactions(reactions) if r.user_id == viewer_id), None
    )
    others = [r for r in reactions if r.user_id != viewer_id]

    if current is not None and current.action == category:
        return others
    return [*others, Reaction(user_id=viewer_id, action=category, created_at=now)]


def apply_toggle(
    snapshot: ReactionSnapshot,
    viewer_id: UserId | None,
    category: ReactionCategory,
    now: datetime,
) -> ReactionSnapshot:
    """Toggle on a snapshot and recompute its derived fields."""
    return compute_snapshot(
        toggle(snapshot.reactions, viewer_id, category, now), viewer_id
    )

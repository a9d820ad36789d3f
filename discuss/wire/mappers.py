"""Mapping between wire payloads and domain models."""

import logfire

from discuss.domain.model.comment import CommentNode
from discuss.domain.model.reaction import Reaction, ReactionSnapshot
from discuss.domain.service.reaction_aggregator import compute_snapshot
from discuss.domain.value import CommentId, UserDisplay, UserId
from discuss.wire.payload import (
    AuthorPayload,
    CommentPayload,
    ReactionPayload,
    ReactionSummaryPayload,
    UserDetailsPayload,
)


def reaction_from_payload(payload: ReactionPayload) -> Reaction:
    return Reaction(
        user_id=UserId(payload.user_id),
        action=payload.action,
        created_at=payload.created_at,
    )


def reaction_to_payload(reaction: Reaction) -> ReactionPayload:
    return ReactionPayload(
        user_id=str(reaction.user_id),
        action=reaction.action,
        created_at=reaction.created_at,
    )


def snapshot_from_payload(
    payload: ReactionSummaryPayload, viewer_id: UserId | None
) -> ReactionSnapshot:
    """Build a snapshot from a reaction summary.

    Counts and total are recomputed from the reaction list, which is the
    source of truth; a disagreeing server total is logged and ignored.

    Args:
        payload: Reaction summary as received
        viewer_id: Viewer the snapshot is computed for

    Returns:
        Consistent reaction snapshot
    """
    snapshot = compute_snapshot(
        [reaction_from_payload(r) for r in payload.reactions], viewer_id
    )
    reported = payload.total_reactions
    if reported is not None and reported != snapshot.total:
        logfire.warn(
            "Server reaction total disagrees with reaction list",
            reported=reported,
            derived=snapshot.total,
        )
    return snapshot


def snapshot_to_payload(snapshot: ReactionSnapshot) -> ReactionSummaryPayload:
    return ReactionSummaryPayload(
        reactions=[reaction_to_payload(r) for r in snapshot.reactions],
        reaction_counts={c.value: n for c, n in snapshot.counts.items()},
        total_reactions=snapshot.total,
        user_reaction=snapshot.viewer_reaction,
    )


def display_from_payload(payload: UserDetailsPayload | AuthorPayload) -> UserDisplay:
    return UserDisplay(name=payload.full_name or payload.id, avatar=payload.avatar)


def comment_from_payload(
    payload: CommentPayload, viewer_id: UserId | None
) -> CommentNode:
    """Convert a comment payload and its replies to a domain node."""
    return CommentNode(
        id=CommentId(payload.id),
        author_id=UserId(payload.user_id.id),
        author_display=display_from_payload(payload.user_id),
        created_at=payload.time,
        content=payload.content,
        reaction_state=snapshot_from_payload(payload, viewer_id),
        children=[comment_from_payload(reply, viewer_id) for reply in payload.replies],
    )


def comment_to_payload(node: CommentNode) -> CommentPayload:
    """Convert a domain node and its replies to a comment payload."""
    summary = snapshot_to_payload(node.reaction_state)
    return CommentPayload(
        id=str(node.id),
        content=node.content,
        time=node.created_at,
        author=node.author_display.name,
        avatar=node.author_display.avatar,
        user_id=AuthorPayload(
            id=str(node.author_id),
            full_name=node.author_display.name,
            avatar=node.author_display.avatar,
        ),
        replies=[comment_to_payload(child) for child in node.children],
        reactions=summary.reactions,
        reaction_counts=summary.reaction_counts,
        total_reactions=summary.total_reactions,
        user_reaction=summary.user_reaction,
    )

"""Optimistic reaction mutation controller."""

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone

import logfire

from discuss.domain.error import NotFoundError, UnauthenticatedError
from discuss.domain.model.mutation import MutationPhase, PendingMutation
from discuss.domain.model.reaction import ReactionSnapshot
from discuss.domain.repository import DiscussionRepository, ViewerSession
from discuss.domain.value import EntityId, EntityType, ReactionCategory, UserId

from .base import Service
from .reaction_aggregator import apply_toggle

SnapshotListener = Callable[[EntityId, ReactionSnapshot], None]

# Follow-up requests allowed after a superseded response before the
# server's answer is accepted as final
MAX_FOLLOW_UPS = 2


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _retrieve_outcome(task: asyncio.Future) -> None:
    # Marks a failure as retrieved when every awaiting caller was cancelled
    if not task.cancelled():
        task.exception()


class OptimisticMutationController(Service):
    """Single writer of per-entity reaction snapshots.

    A viewer's click is applied locally and published at once, then sent
    to the server. The server's answer replaces the speculative snapshot;
    a failure restores the last known-good one.

    Per entity the lifecycle is Idle -> Speculating -> (Reconciled |
    RolledBack) -> Idle. Only one request per entity is outstanding at a
    time: clicks arriving while one is in flight are folded into the
    speculative snapshot instead of issuing another request.

    Race guard: while an entity is speculating, a refresh reporting
    fewer reactions than the speculative snapshot is discarded, so a
    background reload can never erase an optimistic click.

    Refreshes obtain a ticket from begin_refresh() before they are sent.
    Each click and each settlement stamps its entity with a newer ticket;
    a refresh answered with an older ticket predates the viewer's latest
    change to that entity and is discarded, even once the entity is idle.
    """

    def __init__(
        self,
        discussion_repository: DiscussionRepository,
        viewer_session: ViewerSession,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize mutation controller.

        Args:
            discussion_repository: Remote side receiving reaction toggles
            viewer_session: Identity of the acting viewer
            clock: Source of timestamps for speculative reactions
        """
        self.discussion_repository = discussion_repository
        self.viewer_session = viewer_session
        self.clock = clock
        self._snapshots: dict[EntityId, ReactionSnapshot] = {}
        self._entity_types: dict[EntityId, EntityType] = {}
        self._pending: dict[EntityId, PendingMutation] = {}
        self._listeners: list[SnapshotListener] = []
        self._epoch = 0
        self._written_at: dict[EntityId, int] = {}

    # Read side

    def snapshot(self, entity_id: EntityId) -> ReactionSnapshot:
        """Currently published snapshot (empty for unknown entities)."""
        return self._snapshots.get(entity_id, ReactionSnapshot.empty())

    def phase(self, entity_id: EntityId) -> MutationPhase:
        """Lifecycle phase of an entity."""
        pending = self._pending.get(entity_id)
        return pending.phase if pending else MutationPhase.IDLE

    def pending(self, entity_id: EntityId) -> PendingMutation | None:
        """Outstanding mutation on an entity, if any."""
        return self._pending.get(entity_id)

    def is_tracked(self, entity_id: EntityId) -> bool:
        return entity_id in self._entity_types

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a callback invoked on every published snapshot.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Refresh side

    def begin_refresh(self) -> int:
        """Issue the ticket for a fetch that is about to be sent."""
        self._epoch += 1
        return self._epoch

    def track(
        self,
        entity_id: EntityId,
        entity_type: EntityType,
        snapshot: ReactionSnapshot,
        ticket: int | None = None,
    ) -> ReactionSnapshot:
        """Register an entity and feed it a freshly fetched snapshot.

        Args:
            entity_id: Entity ID
            entity_type: Whether the entity is a post or a comment
            snapshot: Snapshot reported by the server
            ticket: Ticket of the fetch that produced the snapshot

        Returns:
            The snapshot that is now visible for the entity
        """
        self._entity_types[entity_id] = entity_type
        return self.apply_refresh(entity_id, snapshot, ticket)

    def apply_refresh(
        self,
        entity_id: EntityId,
        snapshot: ReactionSnapshot,
        ticket: int | None = None,
    ) -> ReactionSnapshot:
        """Feed a snapshot from a fetch or refresh.

        A refresh whose ticket predates the entity's latest click or
        settlement is discarded. Otherwise idle entities mirror the
        refresh. A speculating entity keeps its speculative snapshot
        visible: a refresh with fewer reactions is stale and discarded,
        any other refresh becomes the rollback baseline.

        Args:
            entity_id: Entity ID
            snapshot: Snapshot reported by the server
            ticket: Ticket from begin_refresh() (None skips the ordering check)

        Returns:
            The snapshot that is now visible for the entity
        """
        if ticket is not None and ticket < self._written_at.get(entity_id, 0):
            logfire.info(
                "Discarded refresh issued before the latest reaction change",
                entity_id=str(entity_id),
                ticket=ticket,
            )
            return self.snapshot(entity_id)

        pending = self._pending.get(entity_id)
        if pending is None or not pending.in_flight:
            self._publish(entity_id, snapshot)
            return snapshot

        if snapshot.total < pending.speculative_snapshot.total:
            logfire.info(
                "Discarded stale refresh during speculation",
                entity_id=str(entity_id),
                refresh_total=snapshot.total,
                speculative_total=pending.speculative_snapshot.total,
            )
        else:
            pending.previous_snapshot = snapshot
            logfire.debug(
                "Refresh held as rollback baseline during speculation",
                entity_id=str(entity_id),
            )
        return pending.speculative_snapshot

    def forget(self, entity_id: EntityId) -> None:
        """Stop tracking an entity that no longer exists.

        An in-flight mutation still settles; its result is simply not
        mirrored anywhere.
        """
        self._snapshots.pop(entity_id, None)
        self._entity_types.pop(entity_id, None)
        self._written_at.pop(entity_id, None)

    def reset(self) -> None:
        """Drop all tracked state; called when the thread is torn down."""
        self._snapshots.clear()
        self._entity_types.clear()
        self._written_at.clear()
        self._listeners.clear()

    # Write side

    async def toggle(
        self, entity_id: EntityId, category: ReactionCategory
    ) -> ReactionSnapshot:
        """Toggle the viewer's reaction on an entity.

        The speculative snapshot is published before the first suspension
        point. Callers clicking while a request is in flight await the
        same outcome as the click that started it.

        Args:
            entity_id: Entity ID
            category: Category clicked

        Returns:
            The authoritative snapshot once reconciled

        Raises:
            UnauthenticatedError: If no viewer is signed in (no state change)
            NotFoundError: If the entity is not tracked
            RemoteRejectedError: If the server refused (after rollback)
            RemoteUnavailableError: If the server was unreachable (after rollback)
        """
        viewer_id = self.viewer_session.current_viewer_id()
        if viewer_id is None:
            logfire.warn(
                "Reaction rejected for anonymous viewer", entity_id=str(entity_id)
            )
            raise UnauthenticatedError("add reaction")
        if entity_id not in self._entity_types:
            raise NotFoundError("Entity", str(entity_id))

        self._mark_written(entity_id)
        pending = self._pending.get(entity_id)
        if pending is not None and pending.in_flight:
            pending.speculative_snapshot = apply_toggle(
                pending.speculative_snapshot, viewer_id, category, self.clock()
            )
            self._publish(entity_id, pending.speculative_snapshot)
            logfire.info(
                "Coalesced reaction click into in-flight mutation",
                entity_id=str(entity_id),
                category=category.value,
            )
        else:
            previous = self.snapshot(entity_id)
            pending = PendingMutation(
                entity_id=entity_id,
                previous_snapshot=previous,
                speculative_snapshot=apply_toggle(
                    previous, viewer_id, category, self.clock()
                ),
                dispatched_category=category,
            )
            self._pending[entity_id] = pending
            self._publish(entity_id, pending.speculative_snapshot)
            pending.task = asyncio.ensure_future(self._drive(pending, viewer_id))
            pending.task.add_done_callback(_retrieve_outcome)

        # A cancelled caller must not cancel the request other clicks share
        return await asyncio.shield(pending.task)

    async def _drive(
        self, pending: PendingMutation, viewer_id: UserId
    ) -> ReactionSnapshot:
        entity_id = pending.entity_id
        entity_type = self._entity_types.get(entity_id, EntityType.COMMENT)

        with logfire.span(
            "mutation_controller.react",
            entity_id=str(entity_id),
            entity_type=entity_type.value,
            viewer_id=str(viewer_id),
        ):
            category = pending.dispatched_category
            while True:
                pending.requests_sent += 1
                try:
                    response = await self.discussion_repository.react(
                        entity_type, entity_id, category
                    )
                except Exception as e:
                    self._roll_back(pending, e)
                    raise

                intent = pending.speculative_snapshot.viewer_reaction
                own = response.reaction_of(viewer_id)
                reported = own.action if own else None

                if reported == intent or pending.requests_sent > MAX_FOLLOW_UPS:
                    self._reconcile(pending, response)
                    return response

                # The server applied an older click; move it to the newest intent
                pending.previous_snapshot = response
                category = intent if intent is not None else reported
                pending.dispatched_category = category
                logfire.info(
                    "Superseded reaction response, sending follow-up",
                    entity_id=str(entity_id),
                    reported=reported.value if reported else None,
                    intent=intent.value if intent else None,
                )

    def _reconcile(self, pending: PendingMutation, response: ReactionSnapshot) -> None:
        pending.phase = MutationPhase.RECONCILED
        pending.in_flight = False
        self._pending.pop(pending.entity_id, None)
        if pending.entity_id in self._entity_types:
            self._mark_written(pending.entity_id)
            self._publish(pending.entity_id, response)
        logfire.info(
            "Reaction reconciled",
            entity_id=str(pending.entity_id),
            total=response.total,
            requests_sent=pending.requests_sent,
        )

    def _roll_back(self, pending: PendingMutation, error: Exception) -> None:
        pending.phase = MutationPhase.ROLLED_BACK
        pending.in_flight = False
        self._pending.pop(pending.entity_id, None)
        if pending.entity_id in self._entity_types:
            self._mark_written(pending.entity_id)
            self._publish(pending.entity_id, pending.previous_snapshot)
        logfire.warn(
            "Reaction rolled back",
            entity_id=str(pending.entity_id),
            error_type=type(error).__name__,
            error=str(error),
        )

    def _mark_written(self, entity_id: EntityId) -> None:
        self._epoch += 1
        self._written_at[entity_id] = self._epoch

    def _publish(self, entity_id: EntityId, snapshot: ReactionSnapshot) -> None:
        self._snapshots[entity_id] = snapshot
        for listener in list(self._listeners):
            listener(entity_id, snapshot)

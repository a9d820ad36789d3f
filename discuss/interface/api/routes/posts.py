"""Post reaction routes."""

from typing import Any

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header

from discuss.domain.value import EntityId, EntityType, PostId
from discuss.interface.api.auth import optional_user, require_user
from discuss.interface.api.envelope import envelope
from discuss.persistence.repository.inmemory import InMemoryDiscussionStore
from discuss.wire.mappers import snapshot_to_payload
from discuss.wire.payload import ReactBody

router = APIRouter(prefix="/api/v1/forum", tags=["posts"], route_class=DishkaRoute)


@router.get("/view-detail-post/{post_id}")
async def view_post_reactions(
    post_id: str,
    store: FromDishka[InMemoryDiscussionStore],
    authorization: str | None = Header(default=None),
) -> dict[str, Any]:
    """Get the reaction summary of a post."""
    viewer_id = optional_user(store, authorization)
    snapshot = await store.post_reactions(PostId(post_id), viewer_id)
    return envelope(snapshot_to_payload(snapshot))


@router.post("/reaction-post/{post_id}")
async def react_to_post(
    post_id: str,
    body: ReactBody,
    store: FromDishka[InMemoryDiscussionStore],
    authorization: str | None = Header(default=None),
) -> dict[str, Any]:
    """Toggle the caller's reaction on a post.

    Requires authentication.
    """
    user_id = require_user(store, authorization, "add reaction")
    snapshot = await store.react(
        user_id, EntityType.POST, EntityId(post_id), body.action
    )
    return envelope(snapshot_to_payload(snapshot))

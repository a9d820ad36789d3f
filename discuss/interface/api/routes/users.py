"""Profile routes."""

from typing import Any

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter

from discuss.domain.value import UserId
from discuss.interface.api.envelope import envelope
from discuss.persistence.repository.inmemory import InMemoryDiscussionStore
from discuss.wire.payload import UserDetailsPayload

router = APIRouter(prefix="/api/v1/profiles", tags=["users"], route_class=DishkaRoute)


@router.get("/{user_id}")
async def get_profile(
    user_id: str, store: FromDishka[InMemoryDiscussionStore]
) -> dict[str, Any]:
    """Get a user's public display information.

    Args:
        user_id: User identifier
        store: Discussion store (injected)

    Returns:
        Envelope with id, full name and avatar

    Raises:
        NotFoundError: If the user does not exist (answered with 404)
    """
    display = await store.lookup_user(UserId(user_id))
    return envelope(
        UserDetailsPayload(id=user_id, full_name=display.name, avatar=display.avatar)
    )

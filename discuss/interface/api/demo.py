"""Demo content for a freshly started reference server."""

import logfire

from discuss.domain.value import PostId, UserDisplay, UserId
from discuss.persistence.repository.inmemory import InMemoryDiscussionStore

DEMO_POST_ID = PostId("welcome")

# (user id, display name, bearer token)
DEMO_USERS = [
    ("alice", "Alice Nguyen", "alice-token"),
    ("bob", "Bob Tran", "bob-token"),
]


async def seed_demo(store: InMemoryDiscussionStore) -> None:
    """Create a post, two users and a short thread."""
    store.add_post(DEMO_POST_ID)
    for user_id, name, token in DEMO_USERS:
        store.add_user(UserId(user_id), UserDisplay(name=name), token=token)

    first = await store.create_comment(
        UserId("alice"), DEMO_POST_ID, "Welcome to the discussion!"
    )
    await store.create_comment(
        UserId("bob"), DEMO_POST_ID, "Glad to be here.", parent_id=first.id
    )
    logfire.info("Demo content seeded", post_id=str(DEMO_POST_ID))

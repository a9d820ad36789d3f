"""Comment routes."""

from typing import Any

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header

from discuss.domain.value import CommentId, EntityId, EntityType, PostId
from discuss.interface.api.auth import optional_user, require_user
from discuss.interface.api.envelope import envelope
from discuss.persistence.repository.inmemory import InMemoryDiscussionStore
from discuss.wire.mappers import comment_to_payload, snapshot_to_payload
from discuss.wire.payload import CreateCommentBody, EditCommentBody, ReactBody

router = APIRouter(prefix="/api/v1/comment", tags=["comments"], route_class=DishkaRoute)


@router.get("/view-comments/{post_id}")
async def view_comments(
    post_id: str,
    store: FromDishka[InMemoryDiscussionStore],
    authorization: str | None = Header(default=None),
) -> dict[str, Any]:
    """Get the comment tree of a post.

    Reaction summaries are computed for the caller when authenticated.

    Args:
        post_id: Post identifier
        store: Discussion store (injected)
        authorization: Optional bearer credentials

    Returns:
        Envelope with top-level comments, replies nested
    """
    viewer_id = optional_user(store, authorization)
    thread = await store.thread(PostId(post_id), viewer_id)
    return envelope([comment_to_payload(node) for node in thread])


@router.post("/create-comment/{post_id}")
async def create_comment(
    post_id: str,
    body: CreateCommentBody,
    store: FromDishka[InMemoryDiscussionStore],
    authorization: str | None = Header(default=None),
) -> dict[str, Any]:
    """Create a comment or a reply.

    Requires authentication.
    """
    user_id = require_user(store, authorization, "comment")
    parent_id = CommentId(body.parent_comment_id) if body.parent_comment_id else None
    node = await store.create_comment(user_id, PostId(post_id), body.content, parent_id)
    return envelope(comment_to_payload(node), "Comment created")


@router.put("/update-comment/{comment_id}")
async def update_comment(
    comment_id: str,
    body: EditCommentBody,
    store: FromDishka[InMemoryDiscussionStore],
    authorization: str | None = Header(default=None),
) -> dict[str, Any]:
    """Replace a comment's content.

    Requires authentication and ownership.
    """
    user_id = require_user(store, authorization, "edit comment")
    node = await store.edit_comment(user_id, CommentId(comment_id), body.content)
    return envelope(comment_to_payload(node), "Comment updated")


@router.delete("/delete-comment/{comment_id}")
async def delete_comment(
    comment_id: str,
    store: FromDishka[InMemoryDiscussionStore],
    authorization: str | None = Header(default=None),
) -> dict[str, Any]:
    """Delete a comment together with its replies.

    Requires authentication and ownership.
    """
    user_id = require_user(store, authorization, "delete comment")
    await store.delete_comment(user_id, CommentId(comment_id))
    return envelope(message="Comment deleted")


@router.post("/reaction-comment/{comment_id}")
async def react_to_comment(
    comment_id: str,
    body: ReactBody,
    store: FromDishka[InMemoryDiscussionStore],
    authorization: str | None = Header(default=None),
) -> dict[str, Any]:
    """Toggle the caller's reaction on a comment.

    Same category as the current reaction removes it; a different one
    replaces it.
    """
    user_id = require_user(store, authorization, "add reaction")
    snapshot = await store.react(
        user_id, EntityType.COMMENT, EntityId(comment_id), body.action
    )
    return envelope(snapshot_to_payload(snapshot))

"""JSON wire format of the discussion API.

Field names follow the server's camelCase convention. Every response is
wrapped in an envelope: {"success": bool, "message": str, "data": ...}.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from discuss.domain.value import ReactionCategory


class WireModel(BaseModel):
    """Base for wire payloads: accepts both aliases and field names."""

    model_config = ConfigDict(populate_by_name=True)


class Envelope(WireModel):
    """Response envelope."""

    success: bool = True
    message: str = ""
    data: Any = None


class ReactionPayload(WireModel):
    """One reaction as sent over the wire."""

    user_id: str = Field(alias="userId")
    action: ReactionCategory
    created_at: datetime = Field(alias="createdAt")


class ReactionSummaryPayload(WireModel):
    """Reaction state of a post or comment."""

    reactions: list[ReactionPayload] = Field(default_factory=list)
    reaction_counts: dict[str, int] = Field(
        default_factory=dict, alias="reactionCounts"
    )
    total_reactions: int | None = Field(default=None, alias="totalReactions")
    user_reaction: ReactionCategory | None = Field(default=None, alias="userReaction")


class AuthorPayload(WireModel):
    """Populated author reference of a comment."""

    id: str = Field(alias="_id")
    full_name: str = Field(alias="fullName")
    avatar: str | None = None


class CommentPayload(ReactionSummaryPayload):
    """A comment with its replies nested."""

    id: str
    content: str
    time: datetime
    author: str | None = None  # Denormalized author name
    avatar: str | None = None  # Denormalized author avatar
    user_id: AuthorPayload = Field(alias="userId")
    replies: list["CommentPayload"] = Field(default_factory=list)


class UserDetailsPayload(WireModel):
    """Public profile of a user."""

    id: str = Field(alias="_id")
    full_name: str = Field(alias="fullName")
    avatar: str | None = None


class CreateCommentBody(WireModel):
    """Body of a create-comment request."""

    content: str
    parent_comment_id: str | None = Field(default=None, alias="parentCommentId")


class EditCommentBody(WireModel):
    """Body of an update-comment request."""

    content: str


class ReactBody(WireModel):
    """Body of a reaction request."""

    action: ReactionCategory

"""Domain value objects for discussions.

Value objects are immutable and defined by their values, not identity.
"""

from enum import Enum

from pydantic import Field, field_validator

from discuss.domain.value.common import ValueObject


class ReactionCategory(str, Enum):
    """Emoji-style reaction kinds.

    Declaration order is the display order.
    """

    LIKE = "like"
    LOVE = "love"
    HAHA = "haha"
    WOW = "wow"
    SAD = "sad"
    ANGRY = "angry"

    @classmethod
    def ordered(cls) -> list["ReactionCategory"]:
        """Return all categories in display order."""
        return list(cls)


class EntityType(str, Enum):
    """Type of entity that can carry reactions."""

    POST = "post"
    COMMENT = "comment"


class UserDisplay(ValueObject):
    """Display information for a user.

    Resolved lazily from the user directory. When resolution fails the
    raw user id is used as the name and no avatar is shown.
    """

    name: str = Field(min_length=1)
    avatar: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Reject whitespace-only names."""
        if not v.strip():
            raise ValueError("Display name must not be blank")
        return v.strip()

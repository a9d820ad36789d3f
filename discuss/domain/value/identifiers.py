"""Strongly typed identifiers for discussion entities.

Identifiers are opaque strings assigned by the server. NewType keeps
post, comment and user ids from being mixed up in signatures.
"""

from typing import NewType

UserId = NewType("UserId", str)
PostId = NewType("PostId", str)
CommentId = NewType("CommentId", str)

# Any reaction-bearing entity: a post or a comment
EntityId = NewType("EntityId", str)

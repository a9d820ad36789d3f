"""Discriminated results returned across the facade boundary."""

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class FailureKind(str, Enum):
    """Expected failure conditions surfaced to the presentation layer."""

    UNAUTHENTICATED = "unauthenticated"
    VALIDATION_FAILED = "validation_failed"
    NOT_AUTHORIZED = "not_authorized"
    REMOTE_REJECTED = "remote_rejected"
    REMOTE_UNAVAILABLE = "remote_unavailable"
    NOT_FOUND = "not_found"


class Outcome(BaseModel, Generic[T]):
    """Success with a value, or failure with a kind and a user-facing message."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    ok: bool
    value: T | None = None
    kind: FailureKind | None = None
    message: str | None = None

    @classmethod
    def success(cls, value: T | None = None) -> "Outcome[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failed(cls, kind: FailureKind, message: str) -> "Outcome[T]":
        return cls(ok=False, kind=kind, message=message)

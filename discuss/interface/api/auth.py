"""Bearer-token authentication for the reference server."""

from discuss.domain.error import UnauthenticatedError
from discuss.domain.value import UserId
from discuss.persistence.repository.inmemory import InMemoryDiscussionStore


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def optional_user(
    store: InMemoryDiscussionStore, authorization: str | None
) -> UserId | None:
    """Resolve the caller from an Authorization header.

    Args:
        store: Store holding the issued tokens
        authorization: Raw Authorization header value

    Returns:
        The caller, or None when no credentials were sent

    Raises:
        UnauthenticatedError: If credentials were sent but are not valid
    """
    token = _bearer_token(authorization)
    if token is None:
        if authorization:
            raise UnauthenticatedError("use the discussion API")
        return None
    user_id = store.user_for_token(token)
    if user_id is None:
        raise UnauthenticatedError("use the discussion API")
    return user_id


def require_user(
    store: InMemoryDiscussionStore, authorization: str | None, action: str
) -> UserId:
    """Resolve the caller, rejecting anonymous requests."""
    user_id = optional_user(store, authorization)
    if user_id is None:
        raise UnauthenticatedError(action)
    return user_id

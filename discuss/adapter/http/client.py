"""HTTP implementation of the discussion collaborators.

Talks to the discussion API over httpx. Transport failures, HTTP error
statuses and unsuccessful envelopes are translated into domain errors;
payloads that cannot be decoded raise MalformedPayloadError.
"""

from typing import Any, TypeVar

import httpx
import logfire
from pydantic import BaseModel, TypeAdapter, ValidationError

from discuss.adapter.error import MalformedPayloadError
from discuss.config import RemoteSettings
from discuss.domain.error import (
    NotFoundError,
    RemoteRejectedError,
    RemoteUnavailableError,
    UnauthenticatedError,
)
from discuss.domain.model.comment import CommentNode
from discuss.domain.model.reaction import ReactionSnapshot
from discuss.domain.repository import (
    DiscussionRepository,
    UserRepository,
    ViewerSession,
)
from discuss.domain.value import (
    CommentId,
    EntityId,
    EntityType,
    PostId,
    ReactionCategory,
    UserDisplay,
    UserId,
)
from discuss.wire.mappers import (
    comment_from_payload,
    display_from_payload,
    snapshot_from_payload,
)
from discuss.wire.payload import (
    CommentPayload,
    CreateCommentBody,
    EditCommentBody,
    Envelope,
    ReactBody,
    ReactionSummaryPayload,
    UserDetailsPayload,
)

M = TypeVar("M")

_COMMENT_LIST = TypeAdapter(list[CommentPayload])


def create_http_client(settings: RemoteSettings) -> httpx.AsyncClient:
    """Create the shared async HTTP client for the discussion API."""
    return httpx.AsyncClient(
        base_url=settings.base_url,
        timeout=settings.timeout_seconds,
        headers={"Accept": "application/json"},
    )


class HttpApi:
    """Thin request helper shared by the HTTP repositories."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: RemoteSettings,
        viewer_session: ViewerSession,
    ) -> None:
        """Initialize API helper.

        Args:
            client: Async HTTP client (base URL and timeout preconfigured)
            settings: Remote API settings
            viewer_session: Source of the bearer token
        """
        self.client = client
        self.settings = settings
        self.viewer_session = viewer_session

    async def request(
        self, method: str, path: str, body: BaseModel | None = None
    ) -> Any:
        """Send a request and unwrap the response envelope.

        Args:
            method: HTTP method
            path: Path below the API prefix
            body: Optional JSON body

        Returns:
            The envelope's data

        Raises:
            RemoteUnavailableError: On transport failures and timeouts
            UnauthenticatedError: On 401
            NotFoundError: On 404
            RemoteRejectedError: On other error statuses or unsuccessful envelopes
            MalformedPayloadError: If the response cannot be decoded
        """
        url = f"{self.settings.api_prefix}{path}"
        headers = {}
        token = self.viewer_session.access_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self.client.request(
                method,
                url,
                json=body.model_dump(mode="json", by_alias=True) if body else None,
                headers=headers,
            )
        except httpx.TransportError as e:
            logfire.warn(
                "Discussion API unreachable",
                method=method,
                url=url,
                error_type=type(e).__name__,
            )
            raise RemoteUnavailableError(f"{method} {url} failed: {e}") from e

        envelope = self._envelope(response, url)

        if response.status_code == 401:
            raise UnauthenticatedError("use the discussion API")
        if response.status_code == 404:
            raise NotFoundError("Resource", url)
        if response.is_error or not envelope.success:
            logfire.warn(
                "Discussion API rejected request",
                method=method,
                url=url,
                status_code=response.status_code,
                message=envelope.message,
            )
            raise RemoteRejectedError(
                envelope.message or f"{method} {url} rejected",
                status_code=response.status_code,
            )
        return envelope.data

    @staticmethod
    def _envelope(response: httpx.Response, url: str) -> Envelope:
        try:
            return Envelope.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            if response.is_error:
                # Error pages from proxies carry no envelope
                return Envelope(success=False, message=response.reason_phrase)
            raise MalformedPayloadError(f"Undecodable response from {url}") from e


def parse(model: type[M] | TypeAdapter, data: Any) -> M:
    """Validate envelope data against a payload model."""
    try:
        if isinstance(model, TypeAdapter):
            return model.validate_python(data)
        return model.model_validate(data)
    except ValidationError as e:
        raise MalformedPayloadError(f"Unexpected payload: {e}") from e


class HttpDiscussionRepository(DiscussionRepository):
    """Discussion repository backed by the HTTP API."""

    def __init__(self, api: HttpApi) -> None:
        self.api = api

    @property
    def _viewer(self) -> UserId | None:
        return self.api.viewer_session.current_viewer_id()

    async def fetch_thread(self, post_id: PostId) -> list[CommentNode]:
        data = await self.api.request("GET", f"/comment/view-comments/{post_id}")
        payloads = parse(_COMMENT_LIST, data or [])
        return [comment_from_payload(p, self._viewer) for p in payloads]

    async def fetch_post_reactions(self, post_id: PostId) -> ReactionSnapshot:
        data = await self.api.request("GET", f"/forum/view-detail-post/{post_id}")
        return snapshot_from_payload(parse(ReactionSummaryPayload, data), self._viewer)

    async def create_comment(
        self,
        post_id: PostId,
        content: str,
        parent_id: CommentId | None = None,
    ) -> CommentNode:
        data = await self.api.request(
            "POST",
            f"/comment/create-comment/{post_id}",
            CreateCommentBody(content=content, parent_comment_id=parent_id),
        )
        return comment_from_payload(parse(CommentPayload, data), self._viewer)

    async def edit_comment(self, comment_id: CommentId, content: str) -> CommentNode:
        data = await self.api.request(
            "PUT",
            f"/comment/update-comment/{comment_id}",
            EditCommentBody(content=content),
        )
        return comment_from_payload(parse(CommentPayload, data), self._viewer)

    async def delete_comment(self, comment_id: CommentId) -> None:
        await self.api.request("DELETE", f"/comment/delete-comment/{comment_id}")

    async def react(
        self,
        entity_type: EntityType,
        entity_id: EntityId,
        category: ReactionCategory,
    ) -> ReactionSnapshot:
        if entity_type == EntityType.POST:
            path = f"/forum/reaction-post/{entity_id}"
        else:
            path = f"/comment/reaction-comment/{entity_id}"
        data = await self.api.request("POST", path, ReactBody(action=category))
        return snapshot_from_payload(parse(ReactionSummaryPayload, data), self._viewer)


class HttpUserRepository(UserRepository):
    """User directory backed by the HTTP API."""

    def __init__(self, api: HttpApi) -> None:
        self.api = api

    async def lookup_user(self, user_id: UserId) -> UserDisplay:
        data = await self.api.request("GET", f"/profiles/{user_id}")
        return display_from_payload(parse(UserDetailsPayload, data))

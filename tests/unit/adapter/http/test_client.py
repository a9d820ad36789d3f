"""Unit tests for the HTTP adapter's response handling."""

import json

import httpx
import pytest

from discuss.adapter.error import MalformedPayloadError
from discuss.adapter.http.client import (
    HttpApi,
    HttpDiscussionRepository,
    HttpUserRepository,
)
from discuss.config import RemoteSettings
from discuss.domain.error import (
    NotFoundError,
    RemoteRejectedError,
    RemoteUnavailableError,
    UnauthenticatedError,
)
from discuss.domain.repository import StaticViewerSession
from discuss.domain.value import (
    CommentId,
    EntityId,
    EntityType,
    PostId,
    ReactionCategory,
    UserId,
)


def _repositories(handler, token: str | None = "secret"):
    """HTTP repositories over a mock transport."""
    settings = RemoteSettings(base_url="http://forum.test", api_prefix="/api/v1")
    client = httpx.AsyncClient(
        base_url=settings.base_url, transport=httpx.MockTransport(handler)
    )
    session = StaticViewerSession(UserId("u1") if token else None, token)
    api = HttpApi(client=client, settings=settings, viewer_session=session)
    return HttpDiscussionRepository(api), HttpUserRepository(api)


def _ok(data) -> httpx.Response:
    return httpx.Response(200, json={"success": True, "message": "", "data": data})


class TestRequests:
    """Tests for how requests are built."""

    @pytest.mark.asyncio
    async def test_reaction_request_shape(self):
        """A comment reaction should POST the action with bearer auth."""
        # Arrange
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _ok(
                {
                    "reactions": [
                        {
                            "userId": "u1",
                            "action": "like",
                            "createdAt": "2024-01-01T00:00:00Z",
                        }
                    ],
                    "totalReactions": 1,
                }
            )

        repo, _ = _repositories(handler)

        # Act
        snapshot = await repo.react(
            EntityType.COMMENT, EntityId("c9"), ReactionCategory.LIKE
        )

        # Assert
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/api/v1/comment/reaction-comment/c9"
        assert request.headers["Authorization"] == "Bearer secret"
        assert json.loads(request.content) == {"action": "like"}
        assert snapshot.viewer_reaction == ReactionCategory.LIKE

    @pytest.mark.asyncio
    async def test_post_reaction_path(self):
        """Post reactions should go to the forum endpoint."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _ok({"reactions": []})

        repo, _ = _repositories(handler)

        await repo.react(EntityType.POST, EntityId("p1"), ReactionCategory.SAD)

        assert seen[0].url.path == "/api/v1/forum/reaction-post/p1"

    @pytest.mark.asyncio
    async def test_create_reply_sends_parent(self):
        """Replies should carry parentCommentId in the body."""
        # Arrange
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return _ok(
                {
                    "id": "c2",
                    "content": "reply",
                    "time": "2024-01-01T00:00:00Z",
                    "userId": {"_id": "u1", "fullName": "Ann"},
                }
            )

        repo, _ = _repositories(handler)

        # Act
        node = await repo.create_comment(PostId("p1"), "reply", CommentId("c1"))

        # Assert
        assert bodies == [{"content": "reply", "parentCommentId": "c1"}]
        assert node.id == CommentId("c2")

    @pytest.mark.asyncio
    async def test_anonymous_request_has_no_auth_header(self):
        """Without a token no Authorization header should be sent."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _ok([])

        repo, _ = _repositories(handler, token=None)

        thread = await repo.fetch_thread(PostId("p1"))

        assert thread == []
        assert "Authorization" not in seen[0].headers


class TestErrorMapping:
    """Tests for translating responses into domain errors."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status_code", "error"),
        [
            (401, UnauthenticatedError),
            (404, NotFoundError),
            (400, RemoteRejectedError),
            (500, RemoteRejectedError),
        ],
    )
    async def test_error_statuses(self, status_code, error):
        """Error statuses should raise the matching domain error."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                status_code, json={"success": False, "message": "nope", "data": None}
            )

        repo, _ = _repositories(handler)

        with pytest.raises(error):
            await repo.delete_comment(CommentId("c1"))

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope_rejected(self):
        """A 200 with success=false should still be a rejection."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, json={"success": False, "message": "Comment locked"}
            )

        repo, _ = _repositories(handler)

        with pytest.raises(RemoteRejectedError, match="Comment locked"):
            await repo.edit_comment(CommentId("c1"), "text")

    @pytest.mark.asyncio
    async def test_transport_failure_unavailable(self):
        """Connection errors should raise RemoteUnavailableError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        repo, _ = _repositories(handler)

        with pytest.raises(RemoteUnavailableError):
            await repo.fetch_post_reactions(PostId("p1"))

    @pytest.mark.asyncio
    async def test_non_json_success_is_malformed(self):
        """An undecodable 200 should raise MalformedPayloadError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>oops</html>")

        repo, _ = _repositories(handler)

        with pytest.raises(MalformedPayloadError):
            await repo.fetch_thread(PostId("p1"))

    @pytest.mark.asyncio
    async def test_unexpected_shape_is_malformed(self):
        """A payload with the wrong shape should raise MalformedPayloadError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return _ok({"fullName": "missing id"})

        _, users = _repositories(handler)

        with pytest.raises(MalformedPayloadError):
            await users.lookup_user(UserId("u2"))

    @pytest.mark.asyncio
    async def test_error_page_without_envelope(self):
        """A proxy error page should still map by status."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad Gateway")

        repo, _ = _repositories(handler)

        with pytest.raises(RemoteRejectedError) as exc_info:
            await repo.fetch_thread(PostId("p1"))
        assert exc_info.value.status_code == 502

"""Remote discussion API providers."""

from collections.abc import AsyncIterator

import httpx
import logfire
from dishka import Scope, provide

from discuss.adapter.http.client import (
    HttpApi,
    HttpDiscussionRepository,
    HttpUserRepository,
    create_http_client,
)
from discuss.config import RemoteSettings
from discuss.domain.repository import (
    DiscussionRepository,
    UserRepository,
    ViewerSession,
)
from discuss.util.di.base import ProviderBase


class RemoteProvider(ProviderBase):
    """Remote component base."""

    __mock_component__ = "remote"


class ProdRemoteProvider(RemoteProvider):
    """Production remote provider talking to the discussion API over HTTP."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_http_client(
        self, settings: RemoteSettings
    ) -> AsyncIterator[httpx.AsyncClient]:
        """Provide the shared HTTP client, closed with the container."""
        client = create_http_client(settings)
        logfire.info("Discussion API client created", base_url=settings.base_url)
        yield client
        await client.aclose()

    @provide(scope=Scope.APP)
    def get_http_api(
        self,
        client: httpx.AsyncClient,
        settings: RemoteSettings,
        viewer_session: ViewerSession,
    ) -> HttpApi:
        """Provide the request helper shared by HTTP repositories."""
        return HttpApi(client=client, settings=settings, viewer_session=viewer_session)

    @provide(scope=Scope.APP)
    def get_discussion_repository(self, api: HttpApi) -> DiscussionRepository:
        """Provide HTTP discussion repository."""
        return HttpDiscussionRepository(api)

    @provide(scope=Scope.APP)
    def get_user_repository(self, api: HttpApi) -> UserRepository:
        """Provide HTTP user repository."""
        return HttpUserRepository(api)

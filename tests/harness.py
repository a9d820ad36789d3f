"""Test harness for unit, integration and E2E tests.

Settings are loaded from environment variables (configure via .env or export).
"""

import httpx
import pytest_asyncio
from fastapi import FastAPI

from discuss.adapter.http.client import HttpApi
from discuss.config import RemoteSettings
from discuss.domain.repository import StaticViewerSession
from discuss.domain.value import UserId
from discuss.interface.api.app import create_app
from discuss.persistence.repository.inmemory import InMemoryDiscussionStore
from discuss.util.di import Component
from tests.di import build_test_container


def create_env_fixture(unmock: set[Component] | None = None):
    """Factory for creating test environment fixtures.

    Creates a pytest fixture that:
    - Builds a test container with specified unmocking
    - Yields request-scoped container for service access
    - Closes the container afterwards

    Args:
        unmock: Components to use real implementations for

    Returns:
        Pytest fixture function that yields AsyncContainer

    Usage:
        # Unit tests - in-memory remote side
        unit_env = create_env_fixture()

        @pytest.mark.asyncio
        async def test_load_thread(unit_env):
            factory = await unit_env.get(DiscussionFacadeFactory)
            facade = factory.open(PostId("p1"))
            outcome = await facade.load_thread()
            assert outcome.ok
    """

    @pytest_asyncio.fixture
    async def _test_environment():
        container = build_test_container(unmock=unmock or set())

        async with container() as request_container:
            yield request_container

        await container.close()

    return _test_environment


def create_server_fixture():
    """Factory for fixtures running the reference server in-process.

    The fixture yields a ServerHarness whose store is empty; tests seed
    it directly and talk to the app over httpx.ASGITransport.
    """

    @pytest_asyncio.fixture
    async def _server():
        container = build_test_container()
        store = await container.get(InMemoryDiscussionStore)
        harness = ServerHarness(app=create_app(container), store=store)

        yield harness

        await harness.aclose()
        await container.close()

    return _server


class ServerHarness:
    """In-process reference server plus helpers to build clients for it."""

    base_url = "http://testserver"

    def __init__(self, app: FastAPI, store: InMemoryDiscussionStore) -> None:
        self.app = app
        self.store = store
        self._clients: list[httpx.AsyncClient] = []

    def http_client(self) -> httpx.AsyncClient:
        client = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=self.app), base_url=self.base_url
        )
        self._clients.append(client)
        return client

    def api(self, viewer: str | None = None, token: str | None = None) -> HttpApi:
        """Request helper acting as one viewer."""
        session = StaticViewerSession(UserId(viewer) if viewer else None, token)
        return HttpApi(
            client=self.http_client(),
            settings=RemoteSettings(base_url=self.base_url),
            viewer_session=session,
        )

    async def aclose(self) -> None:
        for client in self._clients:
            await client.aclose()

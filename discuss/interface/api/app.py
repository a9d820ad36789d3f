"""FastAPI reference server for the discussion API."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dishka import AsyncContainer
from fastapi import FastAPI

from discuss.config import Settings
from discuss.interface.api.demo import seed_demo
from discuss.interface.api.envelope import register_error_handlers
from discuss.interface.api.routes import comments, health, posts, users
from discuss.persistence.repository.inmemory import InMemoryDiscussionStore
from discuss.util.di.container import create_container, setup_di
from discuss.util.observability import instrument_fastapi


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    container: AsyncContainer = app.state.dishka_container
    settings = await container.get(Settings)
    if settings.server.seed_demo:
        await seed_demo(await container.get(InMemoryDiscussionStore))
    yield
    await container.close()


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function
    without a container. scripts/start_server.py handles this.

    Args:
        container: Prebuilt DI container (tests); production container
            and instrumentation when omitted
    """
    app_instance = FastAPI(
        title="Discussion API",
        description="Reference server for threaded comments and reactions",
        version="0.1.0",
        lifespan=lifespan,
    )

    if container is None:
        # Instrument FastAPI for automatic tracing of HTTP requests
        instrument_fastapi(app_instance)
        container = create_container()

    setup_di(app_instance, container)
    register_error_handlers(app_instance)

    app_instance.include_router(health.router)
    app_instance.include_router(comments.router)
    app_instance.include_router(posts.router)
    app_instance.include_router(users.router)

    return app_instance

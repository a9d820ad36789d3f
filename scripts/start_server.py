#!/usr/bin/env python3
"""Start the reference discussion server, logging startup errors to Logfire."""

import sys

import logfire
import uvicorn

from discuss.config import Settings
from discuss.util.logging import setup_logging
from discuss.util.observability import configure_logfire


def main() -> int:
    """Start the server and log any startup errors to Logfire."""
    settings = Settings()

    # Configure logging and Logfire early to catch startup errors
    setup_logging(settings)
    configure_logfire(settings, service_name="discuss-server")

    try:
        logfire.info(
            "Starting reference server",
            host=settings.server.host,
            port=settings.server.port,
        )

        uvicorn.run(
            "discuss.interface.api.app:create_app",
            factory=True,
            host=settings.server.host,
            port=settings.server.port,
            log_level="debug" if settings.debug else "info",
        )

        return 0

    except Exception as e:
        logfire.error(
            "Server startup failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())

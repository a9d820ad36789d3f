"""Observability configuration using Logfire.

Usage:
    import logfire

    # Structured logging
    logfire.info("Reaction reconciled", entity_id=entity_id, total=total)

    # Manual spans for critical operations
    with logfire.span("facade.react", entity_id=entity_id):
        ...
"""

import logfire
from fastapi import FastAPI

from discuss.config import Settings


def configure_logfire(settings: Settings, service_name: str = "discuss") -> None:
    """Configure Logfire for observability.

    - Development: local console only unless a token is provided
    - Production: sends to Logfire cloud when a token is provided

    Args:
        settings: Application settings
        service_name: Service name reported with every span
    """
    # Priority: explicit setting > token presence > default (False)
    if settings.observability.send_to_logfire is not None:
        send_to_logfire = settings.observability.send_to_logfire
    elif settings.observability.logfire_token:
        send_to_logfire = True
    else:
        send_to_logfire = False

    config_kwargs = {
        "service_name": service_name,
        "service_version": "0.1.0",
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    }

    if settings.observability.logfire_token:
        config_kwargs["token"] = settings.observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
        has_token=bool(settings.observability.logfire_token),
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Instrument the reference server with Logfire.

    Args:
        app: FastAPI application instance
    """
    logfire.instrument_fastapi(app, capture_headers=False)
    logfire.info("FastAPI instrumented")


def instrument_httpx() -> None:
    """Instrument outbound httpx requests to the discussion API."""
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")

"""Application configuration."""

from typing import Literal

from pydantic import BaseModel, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RemoteSettings(BaseModel):
    """Discussion API client configuration."""

    # Base URL of the discussion API server
    base_url: str = "http://localhost:8000"

    # Path prefix in front of every endpoint
    api_prefix: str = "/api/v1"

    # Per-request timeout; a timed-out mutation is rolled back like any failure
    timeout_seconds: float = 10.0

    # Bearer token for the signed-in viewer (optional)
    access_token: str | None = None

    # Viewer the token belongs to (optional)
    viewer_id: str | None = None


class ServerSettings(BaseModel):
    """Reference discussion server configuration."""

    host: str = "localhost"
    port: int = 8000

    # Seed a demo post, users and thread on startup
    seed_demo: bool = True

    @computed_field
    @property
    def base_url(self) -> str:
        """Base URL the reference server is reachable at."""
        return f"http://{self.host}:{self.port}"


class ObservabilitySettings(BaseModel):
    """Observability configuration for Logfire."""

    # Logfire API token (optional - if not set, logs only go to console)
    # Can be set via OBSERVABILITY__LOGFIRE_TOKEN env var
    logfire_token: str | None = None

    # Whether to send telemetry to Logfire cloud
    # If None, will auto-determine: sends if token is present, otherwise console-only
    send_to_logfire: bool | None = None


class Settings(BaseSettings):
    """Application settings.

    Set environment variables to override, for example:
        ENVIRONMENT=production
        REMOTE__BASE_URL=https://forum.example.com
        REMOTE__ACCESS_TOKEN=...
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows REMOTE__BASE_URL syntax
        extra="ignore",
    )

    environment: Literal["test", "development", "staging", "production"] = "development"
    debug: bool = False

    # Nested settings
    remote: RemoteSettings = RemoteSettings()
    server: ServerSettings = ServerSettings()
    observability: ObservabilitySettings = ObservabilitySettings()

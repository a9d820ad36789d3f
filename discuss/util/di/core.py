"""Core DI providers (non-mockable)."""

from dishka import Scope, alias, provide

from discuss.config import RemoteSettings, Settings
from discuss.domain.repository import StaticViewerSession, ViewerSession
from discuss.domain.value import UserId
from discuss.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_remote_settings(self, settings: Settings) -> RemoteSettings:
        """Provide remote API settings."""
        return settings.remote

    @provide(scope=Scope.APP)
    def provide_viewer_session(self, remote: RemoteSettings) -> StaticViewerSession:
        """Provide the viewer session, signed in when a token is configured."""
        viewer_id = UserId(remote.viewer_id) if remote.viewer_id else None
        return StaticViewerSession(viewer_id=viewer_id, token=remote.access_token)

    viewer_session = alias(source=StaticViewerSession, provides=ViewerSession)

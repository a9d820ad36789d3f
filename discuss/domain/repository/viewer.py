"""Viewer session interface."""

from abc import ABC, abstractmethod

from discuss.domain.value import UserId


class ViewerSession(ABC):
    """Identity of the user looking at the thread."""

    @abstractmethod
    def current_viewer_id(self) -> UserId | None:
        """Return the signed-in viewer, or None when anonymous."""
        pass

    @abstractmethod
    def access_token(self) -> str | None:
        """Return the bearer token for remote calls, if any."""
        pass


class StaticViewerSession(ViewerSession):
    """Viewer session held in memory.

    Sign-in and sign-out are driven by the surrounding application.
    """

    def __init__(self, viewer_id: UserId | None = None, token: str | None = None):
        self._viewer_id = viewer_id
        self._token = token

    def current_viewer_id(self) -> UserId | None:
        return self._viewer_id

    def access_token(self) -> str | None:
        return self._token

    def sign_in(self, viewer_id: UserId, token: str | None = None) -> None:
        """Switch to a signed-in viewer."""
        self._viewer_id = viewer_id
        self._token = token

    def sign_out(self) -> None:
        """Forget the current viewer."""
        self._viewer_id = None
        self._token = None

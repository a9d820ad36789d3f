"""Infrastructure providers."""

# Import bases
from .remote import RemoteProvider
from .store import StoreProvider

# Import implementations (needed for __subclasses__())
from .remote import ProdRemoteProvider  # noqa: F401

__all__ = [
    "ProdRemoteProvider",
    "RemoteProvider",
    "StoreProvider",
]

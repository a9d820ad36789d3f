"""Mock providers for testing."""

from .remote import MockRemoteProvider
from .container import build_test_container

__all__ = [
    "MockRemoteProvider",
    "build_test_container",
]

"""Mock providers for testing."""

from .identity import MockIdentityProvider
from .notifier import MockNotifierProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockIdentityProvider",
    "MockNotifierProvider",
    "MockPersistenceProvider",
    "build_test_container",
]

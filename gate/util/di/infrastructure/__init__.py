"""Infrastructure providers."""

# Import bases
from .identity import IdentityProvider
from .notifier import NotifierProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .identity import ProdIdentityProvider  # noqa: F401
from .notifier import ProdNotifierProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "IdentityProvider",
    "NotifierProvider",
    "PersistenceProvider",
    "ProdIdentityProvider",
    "ProdNotifierProvider",
    "ProdPersistenceProvider",
]

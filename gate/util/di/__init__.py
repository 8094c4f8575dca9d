"""Dependency injection wiring.

Config, domain and application providers are always real. Persistence, the
identity provider and reset link delivery are components: each has a base
provider with a production subclass here and a mock subclass in the test
suite.
"""

from typing import Type

from gate.util.di.application import ProdApplicationProvider
from gate.util.di.base import COMPONENTS, Component, ProviderBase
from gate.util.di.core import ProdConfigProvider
from gate.util.di.domain import ProdDomainProvider
from gate.util.di.infrastructure import (
    IdentityProvider,
    NotifierProvider,
    PersistenceProvider,
    ProdIdentityProvider,
    ProdNotifierProvider,
    ProdPersistenceProvider,
)

PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    # Components
    PersistenceProvider,
    IdentityProvider,
    NotifierProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Resolve a provider class from the ``PROVIDERS`` list.

    Args:
        base: Entry of ``PROVIDERS``
        use_mock: For components, pick the mock subclass instead of the
            production one; ignored for always-real providers

    Returns:
        Provider class (not instantiated)

    Raises:
        ValueError: If the component has no implementation of that kind
    """
    if base.__mock_component__ is None:
        return base

    for implementation in base.__subclasses__():
        if implementation.__is_mock__ == use_mock:
            return implementation

    kind = "mock" if use_mock else "production"
    raise ValueError(f"No {kind} implementation for {base.__mock_component__}")


__all__ = [
    "COMPONENTS",
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "IdentityProvider",
    "NotifierProvider",
    "PersistenceProvider",
    "ProdIdentityProvider",
    "ProdNotifierProvider",
    "ProdPersistenceProvider",
]

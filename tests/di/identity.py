"""Mock identity provider providers for testing."""

from dishka import Scope, provide

from gate.adapter.supabase.client import MockIdentityClient
from gate.domain.service import IdentityProviderClient
from gate.util.di.infrastructure.identity import IdentityProvider


class MockIdentityProvider(IdentityProvider):
    """Mock identity provider using the in-memory client."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_mock_identity_client(self) -> MockIdentityClient:
        """Provide mock client (concrete type, for seeding and fault injection)."""
        return MockIdentityClient()

    @provide(scope=Scope.APP)
    def get_identity_client(self, client: MockIdentityClient) -> IdentityProviderClient:
        return client

"""Identity provider infrastructure providers."""

from dishka import Scope, provide

from gate.adapter.supabase.client import RealSupabaseIdentityClient
from gate.config import Settings
from gate.domain.service import IdentityProviderClient
from gate.util.di.base import ProviderBase


class IdentityProvider(ProviderBase):
    """Identity provider component base."""

    __mock_component__ = "identity"


class ProdIdentityProvider(IdentityProvider):
    """Production identity provider backed by Supabase."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_identity_client(self, settings: Settings) -> IdentityProviderClient:
        """Provide Supabase identity client.

        Raises:
            ValueError: If the service-role key is not configured
        """
        if not settings.identity.service_key:
            raise ValueError("Identity provider service key must be configured")

        return RealSupabaseIdentityClient(
            url=settings.identity.url,
            service_key=settings.identity.service_key,
            timeout=settings.identity.timeout,
            page_size=settings.identity.page_size,
        )

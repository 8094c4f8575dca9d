"""Identity provider port."""

from gate.domain.model.identity import ExternalIdentity, Session
from gate.domain.value import ExternalIdentityId


class IdentityProviderClient:
    """Client interface for the external identity provider.

    Implementations raise ``IdentityProviderError`` on failure and
    ``IdentityAlreadyExistsError`` when creating an identity for an email the
    provider already knows.
    """

    async def create_identity(self, email: str, password: str) -> ExternalIdentity:
        """Create a pre-confirmed identity.

        Args:
            email: Identity email
            password: Plaintext password

        Returns:
            The created identity
        """
        raise NotImplementedError

    async def get_identity(
        self, identity_id: ExternalIdentityId
    ) -> ExternalIdentity | None:
        """Fetch an identity by id.

        Returns:
            The identity, or None if the provider does not know the id
        """
        raise NotImplementedError

    async def list_identities(self) -> list[ExternalIdentity]:
        """List every identity known to the provider."""
        raise NotImplementedError

    async def update_password(
        self, identity_id: ExternalIdentityId, password: str
    ) -> ExternalIdentity:
        """Replace the password of an existing identity."""
        raise NotImplementedError

    async def sign_in(self, email: str, password: str) -> Session:
        """Mint a session with email and password credentials."""
        raise NotImplementedError

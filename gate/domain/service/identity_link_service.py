"""Identity linking domain service.

An operator record only holds a weak reference to its account in the external
identity provider. The provider sits outside any transaction of ours, so the
two can drift apart: an identity may exist without being linked, or a linked
id may point at an identity that was deleted. Every method here reconciles
instead of assuming the reference is intact.
"""

import logfire

from gate.adapter.error import IdentityAlreadyExistsError, IdentityProviderError
from gate.domain.error import InternalError
from gate.domain.model.identity import ExternalIdentity
from gate.domain.model.operator import Operator
from gate.domain.service.identity_provider import IdentityProviderClient
from gate.domain.service.operator_service import OperatorService
from gate.domain.value import ExternalIdentityId

from .base import Service


class IdentityLinkService(Service):
    """Domain service reconciling operators with external identities."""

    def __init__(
        self,
        identity_client: IdentityProviderClient,
        operator_service: OperatorService,
    ) -> None:
        """Initialize identity link service.

        Args:
            identity_client: Identity provider client
            operator_service: Operator service used to persist links
        """
        self.identity_client = identity_client
        self.operator_service = operator_service

    async def find_by_email(self, email: str) -> ExternalIdentity | None:
        """Find an identity by case-insensitive email over the full listing.

        Args:
            email: Email to look for

        Returns:
            The first matching identity, None if there is none
        """
        with logfire.span("identity_link_service.find_by_email", email=email):
            identities = await self.identity_client.list_identities()
            for identity in identities:
                if identity.matches_email(email):
                    return identity
            logfire.info(
                "No identity with email", email=email, scanned=len(identities)
            )
            return None

    async def resolve_for_login(
        self, operator: Operator, password: str
    ) -> ExternalIdentityId:
        """Return the operator's identity id, linking one if needed.

        An existing identity with the operator's email is adopted; otherwise a
        new pre-confirmed identity is created with the supplied password.

        Args:
            operator: Operator that just passed password verification
            password: Plaintext password the operator logged in with

        Returns:
            The identity id linked to the operator

        Raises:
            IdentityProviderError: If lookup or creation fails
        """
        if operator.identity_id:
            return operator.identity_id

        with logfire.span(
            "identity_link_service.resolve_for_login", operator_id=str(operator.id)
        ):
            email = operator.email.root
            identity = await self.find_by_email(email)
            if identity:
                logfire.info(
                    "Adopting existing identity",
                    operator_id=str(operator.id),
                    identity_id=identity.id,
                )
            else:
                identity = await self.identity_client.create_identity(email, password)
                logfire.info(
                    "Identity created at login",
                    operator_id=str(operator.id),
                    identity_id=identity.id,
                )

            return await self.operator_service.link_identity(operator.id, identity.id)

    async def reconcile_for_registration(
        self, operator: Operator, password: str
    ) -> ExternalIdentityId:
        """Make sure an identity exists for the operator with the given password.

        Safe to call again after a registration that failed half way: a linked
        identity that vanished is recreated, an unlinked identity that already
        exists is found by email and updated.

        Args:
            operator: Pre-authorized operator being registered
            password: New plaintext password

        Returns:
            Id of the identity now holding the password

        Raises:
            IdentityProviderError: If the provider fails
            InternalError: If the provider reports a duplicate that cannot be found
        """
        with logfire.span(
            "identity_link_service.reconcile_for_registration",
            operator_id=str(operator.id),
            linked=operator.identity_id is not None,
        ):
            email = operator.email.root

            if operator.identity_id:
                existing = await self.identity_client.get_identity(operator.identity_id)
                if existing is None:
                    logfire.warn(
                        "Linked identity missing, recreating",
                        operator_id=str(operator.id),
                        identity_id=operator.identity_id,
                    )
                    created = await self.identity_client.create_identity(
                        email, password
                    )
                    return created.id

                updated = await self.identity_client.update_password(
                    existing.id, password
                )
                return updated.id

            try:
                created = await self.identity_client.create_identity(email, password)
                return created.id
            except IdentityAlreadyExistsError:
                logfire.info(
                    "Identity already exists, locating by email",
                    operator_id=str(operator.id),
                )

            identity = await self.find_by_email(email)
            if identity is None:
                logfire.error(
                    "Identity reported as existing but not found",
                    operator_id=str(operator.id),
                )
                raise InternalError(
                    "Identity provider reports an existing account that could not be found"
                )

            updated = await self.identity_client.update_password(identity.id, password)
            return updated.id

    async def propagate_password(self, operator: Operator, password: str) -> bool:
        """Push a new password to the operator's linked identity.

        Failures are logged and reported through the return value only.

        Args:
            operator: Operator whose password just changed
            password: New plaintext password

        Returns:
            True if the identity was updated, False if the operator has no
            linked identity or the update failed
        """
        if not operator.identity_id:
            return False

        with logfire.span(
            "identity_link_service.propagate_password",
            operator_id=str(operator.id),
            identity_id=operator.identity_id,
        ):
            try:
                await self.identity_client.update_password(
                    operator.identity_id, password
                )
            except IdentityProviderError as e:
                logfire.warn(
                    "Password not propagated to identity provider",
                    operator_id=str(operator.id),
                    identity_id=operator.identity_id,
                    error=str(e),
                )
                return False

            logfire.info("Password propagated", operator_id=str(operator.id))
            return True

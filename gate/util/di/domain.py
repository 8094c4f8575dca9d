"""Domain layer DI providers."""

from dishka import Scope, provide

from gate.config import AuthSettings
from gate.domain.repository import OperatorRepository
from gate.domain.service import (
    IdentityLinkService,
    IdentityProviderClient,
    OperatorService,
    PasswordService,
)
from gate.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider.

    Domain services are REQUEST-scoped to align with the repository/session
    lifecycle. Each HTTP request gets fresh service instances with their own
    transaction.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_password_service(self) -> PasswordService:
        """Provide password hashing service (stateless)."""
        return PasswordService()

    @provide
    def get_operator_service(
        self, operator_repository: OperatorRepository, auth_settings: AuthSettings
    ) -> OperatorService:
        """Provide operator credential domain service."""
        return OperatorService(
            operator_repository=operator_repository, auth_settings=auth_settings
        )

    @provide
    def get_identity_link_service(
        self,
        identity_client: IdentityProviderClient,
        operator_service: OperatorService,
    ) -> IdentityLinkService:
        """Provide identity linking domain service."""
        return IdentityLinkService(
            identity_client=identity_client, operator_service=operator_service
        )

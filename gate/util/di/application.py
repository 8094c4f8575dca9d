"""Application layer DI providers."""

from dishka import Scope, provide

from gate.application.usecase.auth import (
    LoginUseCase,
    RegisterUseCase,
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
)
from gate.config import AuthSettings
from gate.domain.service import (
    IdentityLinkService,
    IdentityProviderClient,
    OperatorService,
    PasswordService,
    ResetLinkNotifier,
)
from gate.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider."""

    @provide(scope=Scope.REQUEST)
    def get_login_use_case(
        self,
        operator_service: OperatorService,
        password_service: PasswordService,
        identity_link_service: IdentityLinkService,
        identity_client: IdentityProviderClient,
    ) -> LoginUseCase:
        """Provide login use case."""
        return LoginUseCase(
            operator_service=operator_service,
            password_service=password_service,
            identity_link_service=identity_link_service,
            identity_client=identity_client,
        )

    @provide(scope=Scope.REQUEST)
    def get_register_use_case(
        self,
        operator_service: OperatorService,
        password_service: PasswordService,
        identity_link_service: IdentityLinkService,
        identity_client: IdentityProviderClient,
        auth_settings: AuthSettings,
    ) -> RegisterUseCase:
        """Provide register use case."""
        return RegisterUseCase(
            operator_service=operator_service,
            password_service=password_service,
            identity_link_service=identity_link_service,
            identity_client=identity_client,
            auth_settings=auth_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_request_password_reset_use_case(
        self, operator_service: OperatorService, notifier: ResetLinkNotifier
    ) -> RequestPasswordResetUseCase:
        """Provide password reset request use case."""
        return RequestPasswordResetUseCase(
            operator_service=operator_service, notifier=notifier
        )

    @provide(scope=Scope.REQUEST)
    def get_reset_password_use_case(
        self,
        operator_service: OperatorService,
        password_service: PasswordService,
        identity_link_service: IdentityLinkService,
        auth_settings: AuthSettings,
    ) -> ResetPasswordUseCase:
        """Provide password reset use case."""
        return ResetPasswordUseCase(
            operator_service=operator_service,
            password_service=password_service,
            identity_link_service=identity_link_service,
            auth_settings=auth_settings,
        )

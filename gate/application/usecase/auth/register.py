"""Registration use case."""

import logfire
from pydantic import BaseModel

from gate.adapter.error import IdentityProviderError
from gate.config import AuthSettings
from gate.domain.error import ForbiddenError, InternalError, InvalidInputError
from gate.domain.model.identity import Session
from gate.domain.service import (
    IdentityLinkService,
    IdentityProviderClient,
    OperatorService,
    PasswordService,
)

from ..base import BaseUseCase
from .common import parse_email

NOT_ELIGIBLE_MESSAGE = (
    "Email not authorized or already registered. "
    "If you already have an account, use login."
)
REGISTERED_MESSAGE = "Registration completed successfully."
AUTO_LOGIN_FAILED_MESSAGE = (
    "Registration completed, but automatic login failed. Please log in manually."
)


class RegisterRequest(BaseModel):
    """Registration request."""

    email: str
    password: str


class RegisterResponse(BaseModel):
    """Registration response.

    ``session`` is None when the credentials were saved but the automatic
    sign-in afterwards failed.
    """

    success: bool = True
    message: str
    session: Session | None = None
    auto_login_failed: bool = False


class RegisterUseCase(BaseUseCase[RegisterRequest, RegisterResponse]):
    """Use case for first-time registration of a pre-authorized operator."""

    def __init__(
        self,
        operator_service: OperatorService,
        password_service: PasswordService,
        identity_link_service: IdentityLinkService,
        identity_client: IdentityProviderClient,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize register use case.

        Args:
            operator_service: Operator credential domain service
            password_service: Password hashing domain service
            identity_link_service: Identity linking domain service
            identity_client: Identity provider client used for sign-in
            auth_settings: Authentication settings (minimum password length)
        """
        self.operator_service = operator_service
        self.password_service = password_service
        self.identity_link_service = identity_link_service
        self.identity_client = identity_client
        self.auth_settings = auth_settings

    async def execute(self, request: RegisterRequest) -> RegisterResponse:
        """Execute registration flow.

        Steps:
        1. Check the operator is pre-authorized and not registered yet
        2. Hash the password
        3. Claim the record by storing the hash while none is stored
        4. Reconcile the external identity (create, heal or update it) and
           link it if the record has no link yet
        5. Sign in; a failure here keeps the registration

        Only the request that claims the record touches the identity
        provider, so concurrent registrations cannot overwrite each other.
        A provider failure releases the claim, and repeating the call
        converges on one record linked to one identity.

        Args:
            request: Registration request with email and password

        Returns:
            Registration response, with a session unless auto-login failed

        Raises:
            InvalidInputError: If email is missing or the password is too short
            ForbiddenError: If the email is not pre-authorized or already
                registered, including by a concurrent request
            InternalError: If the identity provider fails; the operator stays
                unregistered
        """
        min_length = self.auth_settings.min_password_length
        if not request.email or len(request.password) < min_length:
            raise InvalidInputError(
                "Email and password are required. "
                f"Password must be at least {min_length} characters."
            )

        email = parse_email(request.email)

        with logfire.span("register_operator", email=email.root if email else None):
            operator = await self.operator_service.find_by_email(email) if email else None
            if operator is None or operator.is_registered:
                logfire.warn(
                    "Registration refused",
                    reason="already registered" if operator else "not authorized",
                )
                raise ForbiddenError(NOT_ELIGIBLE_MESSAGE)

            password_hash = await self.password_service.hash(request.password)

            if not await self.operator_service.claim_registration(
                operator.id, password_hash
            ):
                raise ForbiddenError(NOT_ELIGIBLE_MESSAGE)

            try:
                identity_id = await self.identity_link_service.reconcile_for_registration(
                    operator, request.password
                )
            except IdentityProviderError as e:
                await self.operator_service.release_registration(
                    operator.id, password_hash
                )
                logfire.error(
                    "Identity provider failed during registration",
                    operator_id=str(operator.id),
                    error=str(e),
                )
                raise InternalError(f"Could not create account: {e}") from e
            except InternalError:
                await self.operator_service.release_registration(
                    operator.id, password_hash
                )
                raise

            await self.operator_service.link_identity(operator.id, identity_id)

            try:
                session = await self.identity_client.sign_in(
                    operator.email.root, request.password
                )
            except IdentityProviderError as e:
                logfire.warn(
                    "Automatic login after registration failed",
                    operator_id=str(operator.id),
                    error=str(e),
                )
                return RegisterResponse(
                    message=AUTO_LOGIN_FAILED_MESSAGE, auto_login_failed=True
                )

            logfire.info("Operator registered", operator_id=str(operator.id))
            return RegisterResponse(message=REGISTERED_MESSAGE, session=session)

"""Login use case."""

import logfire
from pydantic import BaseModel

from gate.adapter.error import IdentityProviderError
from gate.domain.error import InternalError, InvalidInputError, UnauthorizedError
from gate.domain.model.identity import Session
from gate.domain.service import (
    IdentityLinkService,
    IdentityProviderClient,
    OperatorService,
    PasswordService,
)

from ..base import BaseUseCase
from .common import parse_email

NOT_AUTHORIZED_MESSAGE = (
    "Email not authorized. Contact the administrator to be added to the system."
)
NOT_REGISTERED_MESSAGE = (
    "Registration not completed. Use the Register tab to complete registration."
)
WRONG_PASSWORD_MESSAGE = "Incorrect password"


class LoginRequest(BaseModel):
    """Login request."""

    email: str
    password: str


class LoginResponse(BaseModel):
    """Login response carrying the identity provider session."""

    success: bool = True
    session: Session


class LoginUseCase(BaseUseCase[LoginRequest, LoginResponse]):
    """Use case for operator login with email and password."""

    def __init__(
        self,
        operator_service: OperatorService,
        password_service: PasswordService,
        identity_link_service: IdentityLinkService,
        identity_client: IdentityProviderClient,
    ) -> None:
        """Initialize login use case.

        Args:
            operator_service: Operator credential domain service
            password_service: Password hashing domain service
            identity_link_service: Identity linking domain service
            identity_client: Identity provider client used for sign-in
        """
        self.operator_service = operator_service
        self.password_service = password_service
        self.identity_link_service = identity_link_service
        self.identity_client = identity_client

    async def execute(self, request: LoginRequest) -> LoginResponse:
        """Execute login flow.

        Steps:
        1. Look up the operator by normalized email
        2. Verify the password against the stored hash
        3. Link an external identity if the operator has none yet
        4. Sign in with the identity provider and return the session

        Args:
            request: Login request with email and password

        Returns:
            Login response with the session

        Raises:
            InvalidInputError: If email or password is missing
            UnauthorizedError: If the email is unknown, registration is
                incomplete or the password is wrong
            InternalError: If the stored hash is malformed or the identity
                provider fails
        """
        if not request.email or not request.password:
            raise InvalidInputError("Email and password are required")

        email = parse_email(request.email)

        with logfire.span("login_operator", email=email.root if email else None):
            operator = await self.operator_service.find_by_email(email) if email else None
            if operator is None:
                logfire.warn("Login for unknown email")
                raise UnauthorizedError(NOT_AUTHORIZED_MESSAGE)

            if not operator.is_registered:
                logfire.warn("Login before registration", operator_id=str(operator.id))
                raise UnauthorizedError(NOT_REGISTERED_MESSAGE)

            if not await self.password_service.verify(
                request.password, operator.password_hash
            ):
                logfire.warn("Wrong password", operator_id=str(operator.id))
                raise UnauthorizedError(WRONG_PASSWORD_MESSAGE)

            if self.password_service.needs_rehash(operator.password_hash):
                await self.operator_service.update_password_hash(
                    operator.id, await self.password_service.hash(request.password)
                )
                logfire.info("Legacy password hash upgraded", operator_id=str(operator.id))

            try:
                await self.identity_link_service.resolve_for_login(
                    operator, request.password
                )
                session = await self.identity_client.sign_in(
                    operator.email.root, request.password
                )
            except IdentityProviderError as e:
                logfire.error(
                    "Identity provider failed during login",
                    operator_id=str(operator.id),
                    error=str(e),
                )
                raise InternalError(f"Authentication service error: {e}") from e

            logfire.info("Operator logged in", operator_id=str(operator.id))
            return LoginResponse(session=session)

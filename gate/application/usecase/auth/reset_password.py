"""Password reset use case (phase 2)."""

from datetime import datetime, timezone

import logfire
from pydantic import BaseModel

from gate.config import AuthSettings
from gate.domain.error import InvalidInputError
from gate.domain.service import IdentityLinkService, OperatorService, PasswordService

from ..base import BaseUseCase
from .common import parse_email, parse_reset_token

INVALID_TOKEN_MESSAGE = "Invalid or expired token"
EXPIRED_TOKEN_MESSAGE = "Token expired. Request a new reset."
RESET_DONE_MESSAGE = "Password reset successfully."


class ResetPasswordRequest(BaseModel):
    """Password reset with the token from the emailed link."""

    email: str
    token: str
    new_password: str


class ResetPasswordResponse(BaseModel):
    """Password reset response.

    ``identity_synced`` is False when the new password only reached the
    local record; sign-in through the identity provider may then still
    expect the old password.
    """

    success: bool = True
    message: str = RESET_DONE_MESSAGE
    identity_synced: bool


class ResetPasswordUseCase(BaseUseCase[ResetPasswordRequest, ResetPasswordResponse]):
    """Use case consuming a reset token and setting a new password."""

    def __init__(
        self,
        operator_service: OperatorService,
        password_service: PasswordService,
        identity_link_service: IdentityLinkService,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize reset password use case.

        Args:
            operator_service: Operator credential domain service
            password_service: Password hashing domain service
            identity_link_service: Identity linking domain service
            auth_settings: Authentication settings (minimum password length)
        """
        self.operator_service = operator_service
        self.password_service = password_service
        self.identity_link_service = identity_link_service
        self.auth_settings = auth_settings

    async def execute(self, request: ResetPasswordRequest) -> ResetPasswordResponse:
        """Execute password reset.

        Steps:
        1. Find the operator holding the token
        2. Reject expired tokens, leaving them in place
        3. Swap the password and clear the token in one conditional update
        4. Push the new password to the linked identity (best effort)

        Args:
            request: Email, token and new password

        Returns:
            Reset response

        Raises:
            InvalidInputError: If the password is too short, or the token is
                unknown, expired or consumed concurrently
        """
        if not request.email:
            raise InvalidInputError("Email is required")

        min_length = self.auth_settings.min_password_length
        if len(request.new_password) < min_length:
            raise InvalidInputError(
                f"Password must be at least {min_length} characters"
            )

        email = parse_email(request.email)
        token = parse_reset_token(request.token)
        if email is None or token is None:
            raise InvalidInputError(INVALID_TOKEN_MESSAGE)

        with logfire.span("reset_password", email=email.root, token=token.masked()):
            operator = await self.operator_service.find_for_reset(email, token)
            if operator is None:
                raise InvalidInputError(INVALID_TOKEN_MESSAGE)

            if operator.reset_token_expired(datetime.now(timezone.utc)):
                logfire.warn("Expired reset token used", operator_id=str(operator.id))
                raise InvalidInputError(EXPIRED_TOKEN_MESSAGE)

            password_hash = await self.password_service.hash(request.new_password)
            consumed = await self.operator_service.consume_reset_token(
                operator, token, password_hash
            )
            if not consumed:
                raise InvalidInputError(INVALID_TOKEN_MESSAGE)

            identity_synced = await self.identity_link_service.propagate_password(
                operator, request.new_password
            )

            logfire.info(
                "Password reset",
                operator_id=str(operator.id),
                identity_synced=identity_synced,
            )
            return ResetPasswordResponse(identity_synced=identity_synced)

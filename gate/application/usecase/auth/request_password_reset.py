"""Password reset request use case (phase 1)."""

import logfire
from pydantic import BaseModel

from gate.adapter.error import NotifierError
from gate.domain.error import InvalidInputError
from gate.domain.service import OperatorService, ResetLinkNotifier

from ..base import BaseUseCase
from .common import parse_email

RESET_REQUESTED_MESSAGE = (
    "If the email is registered, you will receive a link to reset your password."
)


class RequestPasswordResetRequest(BaseModel):
    """Password reset request."""

    email: str


class RequestPasswordResetResponse(BaseModel):
    """Identical for known and unknown emails."""

    success: bool = True
    message: str = RESET_REQUESTED_MESSAGE


class RequestPasswordResetUseCase(
    BaseUseCase[RequestPasswordResetRequest, RequestPasswordResetResponse]
):
    """Use case issuing a reset token to a registered operator."""

    def __init__(
        self, operator_service: OperatorService, notifier: ResetLinkNotifier
    ) -> None:
        """Initialize request password reset use case.

        Args:
            operator_service: Operator credential domain service
            notifier: Reset link delivery
        """
        self.operator_service = operator_service
        self.notifier = notifier

    async def execute(
        self, request: RequestPasswordResetRequest
    ) -> RequestPasswordResetResponse:
        """Issue a reset token if the email belongs to a registered operator.

        Unknown emails, unregistered operators and delivery failures all get
        the same response as a successful request.

        Raises:
            InvalidInputError: If email is missing
        """
        if not request.email:
            raise InvalidInputError("Email is required")

        email = parse_email(request.email)

        with logfire.span("request_password_reset", email=email.root if email else None):
            operator = (
                await self.operator_service.find_registered_by_email(email)
                if email
                else None
            )
            if operator is None:
                logfire.info("Reset requested for unregistered email")
                return RequestPasswordResetResponse()

            token, expires_at = await self.operator_service.issue_reset_token(operator)
            link = self.operator_service.build_reset_link(operator.email, token)

            try:
                await self.notifier.send_reset_link(operator.email.root, link, expires_at)
            except NotifierError as e:
                logfire.error(
                    "Reset link delivery failed",
                    operator_id=str(operator.id),
                    error=str(e),
                )

            return RequestPasswordResetResponse()

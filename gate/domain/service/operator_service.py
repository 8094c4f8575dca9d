"""Operator credential domain service."""

import secrets
from datetime import datetime, timedelta, timezone
from urllib.parse import quote

import logfire

from gate.config import AuthSettings
from gate.domain.model.operator import Operator
from gate.domain.repository import OperatorRepository
from gate.domain.value import Email, ExternalIdentityId, OperatorId, ResetToken

from .base import Service

# 32 random bytes, URL-safe
RESET_TOKEN_BYTES = 32


class OperatorService(Service):
    """Domain service for operator credential records."""

    def __init__(
        self, operator_repository: OperatorRepository, auth_settings: AuthSettings
    ) -> None:
        """Initialize operator service.

        Args:
            operator_repository: Operator repository
            auth_settings: Authentication settings (reset link base, token TTL)
        """
        self.operator_repository = operator_repository
        self.auth_settings = auth_settings

    async def find_by_email(self, email: Email) -> Operator | None:
        with logfire.span("operator_service.find_by_email", email=email.root):
            operator = await self.operator_repository.find_by_email(email)
            if not operator:
                logfire.info("Operator not found", email=email.root)
            return operator

    async def find_registered_by_email(self, email: Email) -> Operator | None:
        with logfire.span("operator_service.find_registered_by_email", email=email.root):
            return await self.operator_repository.find_registered_by_email(email)

    async def find_for_reset(self, email: Email, token: ResetToken) -> Operator | None:
        """Find the operator holding a reset token, expired or not.

        Args:
            email: Operator email from the link
            token: Reset token from the link

        Returns:
            The matching operator, None if email and token do not match
        """
        with logfire.span(
            "operator_service.find_for_reset", email=email.root, token=token.masked()
        ):
            operator = await self.operator_repository.find_by_email_and_reset_token(
                email, token
            )
            if not operator:
                logfire.warn("Reset token not found", email=email.root, token=token.masked())
            return operator

    async def update_password_hash(
        self, operator_id: OperatorId, password_hash: str
    ) -> None:
        with logfire.span(
            "operator_service.update_password_hash", operator_id=str(operator_id)
        ):
            await self.operator_repository.update_password_hash(
                operator_id, password_hash
            )
            logfire.info("Password hash updated", operator_id=str(operator_id))

    async def link_identity(
        self, operator_id: OperatorId, identity_id: ExternalIdentityId
    ) -> ExternalIdentityId:
        """Link an external identity unless one is already linked.

        Returns:
            The identity id stored on the record after the call
        """
        with logfire.span(
            "operator_service.link_identity",
            operator_id=str(operator_id),
            identity_id=identity_id,
        ):
            stored = await self.operator_repository.link_identity(
                operator_id, identity_id
            )
            if stored != identity_id:
                logfire.warn(
                    "Operator already linked to another identity",
                    operator_id=str(operator_id),
                    stored_identity_id=stored,
                    identity_id=identity_id,
                )
            return stored

    async def claim_registration(
        self, operator_id: OperatorId, password_hash: str
    ) -> bool:
        """Store the first password hash unless the operator is already registered.

        Returns:
            False if another registration claimed the record first
        """
        with logfire.span(
            "operator_service.claim_registration", operator_id=str(operator_id)
        ):
            claimed = await self.operator_repository.claim_registration(
                operator_id, password_hash
            )
            if not claimed:
                logfire.warn(
                    "Registration already claimed", operator_id=str(operator_id)
                )
            return claimed

    async def release_registration(
        self, operator_id: OperatorId, password_hash: str
    ) -> None:
        with logfire.span(
            "operator_service.release_registration", operator_id=str(operator_id)
        ):
            await self.operator_repository.release_registration(
                operator_id, password_hash
            )
            logfire.info("Registration claim released", operator_id=str(operator_id))

    async def issue_reset_token(self, operator: Operator) -> tuple[ResetToken, datetime]:
        """Issue a new reset token, replacing any pending one.

        Args:
            operator: Registered operator requesting the reset

        Returns:
            The token and its expiry
        """
        with logfire.span(
            "operator_service.issue_reset_token", operator_id=str(operator.id)
        ):
            token = ResetToken(secrets.token_urlsafe(RESET_TOKEN_BYTES))
            expires_at = datetime.now(timezone.utc) + timedelta(
                minutes=self.auth_settings.reset_token_ttl_minutes
            )
            await self.operator_repository.set_reset_token(
                operator.id, token, expires_at
            )
            logfire.info(
                "Reset token issued",
                operator_id=str(operator.id),
                replaced=operator.has_pending_reset,
                token=token.masked(),
                expires_at=expires_at.isoformat(),
            )
            return token, expires_at

    def build_reset_link(self, email: Email, token: ResetToken) -> str:
        """Build the dashboard link that carries a reset token."""
        return (
            f"{self.auth_settings.dashboard_url}/reset-password"
            f"?token={quote(token.root, safe='')}&email={quote(email.root, safe='')}"
        )

    async def consume_reset_token(
        self, operator: Operator, token: ResetToken, password_hash: str
    ) -> bool:
        """Replace the password and clear the token if it is still valid.

        Returns:
            False if another request consumed or replaced the token first,
            or it expired in the meantime
        """
        with logfire.span(
            "operator_service.consume_reset_token",
            operator_id=str(operator.id),
            token=token.masked(),
        ):
            consumed = await self.operator_repository.consume_reset_token(
                operator.id, token, password_hash, datetime.now(timezone.utc)
            )
            if consumed:
                logfire.info("Reset token consumed", operator_id=str(operator.id))
            else:
                logfire.warn(
                    "Reset token no longer valid at consumption",
                    operator_id=str(operator.id),
                    token=token.masked(),
                )
            return consumed

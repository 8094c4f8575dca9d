"""Operator repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from gate.domain.model.operator import Operator
from gate.domain.value import Email, ExternalIdentityId, OperatorId, ResetToken


class OperatorRepository(ABC):
    """Repository for Operator credential records.

    Every mutating method writes a single row in a single statement, so a
    record is never observed with half of an update applied.
    """

    @abstractmethod
    async def find_by_email(self, email: Email) -> Operator | None:
        """Find an operator by normalized email.

        Args:
            email: The operator's email

        Returns:
            The operator if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_registered_by_email(self, email: Email) -> Operator | None:
        """Find an operator that has completed registration.

        Args:
            email: The operator's email

        Returns:
            The operator if found and its password hash is set, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email_and_reset_token(
        self, email: Email, token: ResetToken
    ) -> Operator | None:
        """Find an operator holding the given reset token.

        Expiry is not checked here.

        Args:
            email: The operator's email
            token: The reset token from the link

        Returns:
            The operator if email and token match, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, operator: Operator) -> Operator:
        """Save an operator (create or update).

        Used for administrative seeding.

        Args:
            operator: The operator to save

        Returns:
            The saved operator
        """
        pass

    @abstractmethod
    async def update_password_hash(
        self, operator_id: OperatorId, password_hash: str
    ) -> None:
        """Replace the stored password hash."""
        pass

    @abstractmethod
    async def link_identity(
        self, operator_id: OperatorId, identity_id: ExternalIdentityId
    ) -> ExternalIdentityId:
        """Store the external identity id if none is stored yet.

        Args:
            operator_id: The operator's ID
            identity_id: Identity id to link

        Returns:
            The identity id stored after the call, which is the previous one
            if the record was already linked
        """
        pass

    @abstractmethod
    async def claim_registration(
        self, operator_id: OperatorId, password_hash: str
    ) -> bool:
        """Set the first password hash of a pre-authorized operator.

        The update applies only while no hash is stored, so of two concurrent
        registrations exactly one claims the record.

        Args:
            operator_id: The operator's ID
            password_hash: Hash of the registration password

        Returns:
            True if this call set the hash, False if the operator was
            already registered
        """
        pass

    @abstractmethod
    async def release_registration(
        self, operator_id: OperatorId, password_hash: str
    ) -> None:
        """Undo a claim whose registration could not be finished.

        Clears the hash only if it is still the one written by the claim.
        """
        pass

    @abstractmethod
    async def set_reset_token(
        self, operator_id: OperatorId, token: ResetToken, expires_at: datetime
    ) -> None:
        """Store a reset token and its expiry together, replacing any previous one."""
        pass

    @abstractmethod
    async def consume_reset_token(
        self,
        operator_id: OperatorId,
        token: ResetToken,
        password_hash: str,
        now: datetime,
    ) -> bool:
        """Conditionally replace the password and clear the reset token.

        The update applies only if the record still holds ``token`` and the
        token expires after ``now``.

        Args:
            operator_id: The operator's ID
            token: The token presented by the caller
            password_hash: The new password hash
            now: Current time

        Returns:
            True if the token was consumed, False if it was already gone,
            replaced or expired
        """
        pass

"""In-memory operator repository for testing."""

import asyncio
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError

from gate.domain.error import InternalError
from gate.domain.model.operator import Operator
from gate.domain.repository.operator import OperatorRepository
from gate.domain.value import Email, ExternalIdentityId, OperatorId, ResetToken


class InMemoryOperatorRepository(OperatorRepository):
    """In-memory implementation of OperatorRepository for testing.

    Writes hold a lock so conditional updates behave like single
    statements against a real database.
    """

    def __init__(self) -> None:
        self._operators: dict[OperatorId, Operator] = {}
        self._lock = asyncio.Lock()

    def _get(self, operator_id: OperatorId) -> Operator:
        operator = self._operators.get(operator_id)
        if operator is None:
            raise InternalError(f"Operator not found: {operator_id}")
        return operator

    def _put(self, operator: Operator, **changes) -> None:
        changes["updated_at"] = datetime.now(timezone.utc)
        # Re-validate so a broken reset token pair can never be stored
        self._operators[operator.id] = Operator.model_validate(
            {**dict(operator), **changes}
        )

    async def find_by_id(self, operator_id: OperatorId) -> Optional[Operator]:
        return self._operators.get(operator_id)

    async def find_by_email(self, email: Email) -> Optional[Operator]:
        for operator in self._operators.values():
            if operator.email == email:
                return operator
        return None

    async def find_registered_by_email(self, email: Email) -> Optional[Operator]:
        operator = await self.find_by_email(email)
        if operator and operator.is_registered:
            return operator
        return None

    async def find_by_email_and_reset_token(
        self, email: Email, token: ResetToken
    ) -> Optional[Operator]:
        operator = await self.find_by_email(email)
        if operator and operator.reset_token == token:
            return operator
        return None

    async def save(self, operator: Operator) -> Operator:
        """Save an operator (create or update).

        Raises:
            IntegrityError: If another operator already uses the email
        """
        async with self._lock:
            for existing in self._operators.values():
                if existing.email == operator.email and existing.id != operator.id:
                    raise IntegrityError("Duplicate operator email", None, Exception())
            self._operators[operator.id] = operator
            return operator

    async def update_password_hash(
        self, operator_id: OperatorId, password_hash: str
    ) -> None:
        async with self._lock:
            self._put(self._get(operator_id), password_hash=password_hash)

    async def link_identity(
        self, operator_id: OperatorId, identity_id: ExternalIdentityId
    ) -> ExternalIdentityId:
        async with self._lock:
            operator = self._get(operator_id)
            if operator.identity_id:
                return operator.identity_id
            self._put(operator, identity_id=identity_id)
            return identity_id

    async def claim_registration(
        self, operator_id: OperatorId, password_hash: str
    ) -> bool:
        async with self._lock:
            operator = self._get(operator_id)
            if operator.password_hash is not None:
                return False
            self._put(operator, password_hash=password_hash)
            return True

    async def release_registration(
        self, operator_id: OperatorId, password_hash: str
    ) -> None:
        async with self._lock:
            operator = self._get(operator_id)
            if operator.password_hash == password_hash:
                self._put(operator, password_hash=None)

    async def set_reset_token(
        self, operator_id: OperatorId, token: ResetToken, expires_at: datetime
    ) -> None:
        async with self._lock:
            self._put(
                self._get(operator_id),
                reset_token=token,
                reset_token_expires_at=expires_at,
            )

    async def consume_reset_token(
        self,
        operator_id: OperatorId,
        token: ResetToken,
        password_hash: str,
        now: datetime,
    ) -> bool:
        async with self._lock:
            operator = self._operators.get(operator_id)
            if operator is None or operator.reset_token != token:
                return False
            if operator.reset_token_expired(now):
                return False
            self._put(
                operator,
                password_hash=password_hash,
                reset_token=None,
                reset_token_expires_at=None,
            )
            return True

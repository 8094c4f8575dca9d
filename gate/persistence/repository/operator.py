"""PostgreSQL implementation of Operator repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from gate.domain.error import InternalError
from gate.domain.model import Operator
from gate.domain.repository import OperatorRepository
from gate.domain.value import Email, ExternalIdentityId, OperatorId, ResetToken
from gate.persistence.mappers import operator_to_dict, row_to_operator
from gate.persistence.tables import operators_table


class PostgresOperatorRepository(OperatorRepository):
    """PostgreSQL implementation of OperatorRepository.

    Conditional writes are single UPDATE statements, so PostgreSQL's row
    lock serializes concurrent callers on the same record.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _find_one(self, *conditions) -> Optional[Operator]:
        stmt = select(operators_table).where(and_(*conditions))
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_operator(dict(row)) if row else None

    async def find_by_id(self, operator_id: OperatorId) -> Optional[Operator]:
        return await self._find_one(operators_table.c.id == operator_id)

    async def find_by_email(self, email: Email) -> Optional[Operator]:
        return await self._find_one(operators_table.c.email == email.root)

    async def find_registered_by_email(self, email: Email) -> Optional[Operator]:
        return await self._find_one(
            operators_table.c.email == email.root,
            operators_table.c.password_hash.is_not(None),
        )

    async def find_by_email_and_reset_token(
        self, email: Email, token: ResetToken
    ) -> Optional[Operator]:
        return await self._find_one(
            operators_table.c.email == email.root,
            operators_table.c.reset_token == token.root,
        )

    async def save(self, operator: Operator) -> Operator:
        """Save an operator (create or update).

        Args:
            operator: Operator to save

        Returns:
            Saved operator
        """
        operator_dict = operator_to_dict(operator)

        existing = await self.find_by_id(operator.id)

        if existing:
            stmt = (
                update(operators_table)
                .where(operators_table.c.id == operator.id)
                .values(**operator_dict)
            )
        else:
            stmt = insert(operators_table).values(**operator_dict)

        await self.session.execute(stmt)
        await self.session.flush()
        return operator

    async def update_password_hash(
        self, operator_id: OperatorId, password_hash: str
    ) -> None:
        stmt = (
            update(operators_table)
            .where(operators_table.c.id == operator_id)
            .values(password_hash=password_hash, updated_at=func.now())
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def link_identity(
        self, operator_id: OperatorId, identity_id: ExternalIdentityId
    ) -> ExternalIdentityId:
        """Link identity with COALESCE so an existing link is never overwritten."""
        stmt = (
            update(operators_table)
            .where(operators_table.c.id == operator_id)
            .values(
                identity_id=func.coalesce(operators_table.c.identity_id, identity_id),
                updated_at=func.now(),
            )
            .returning(operators_table.c.identity_id)
        )
        result = await self.session.execute(stmt)
        stored = result.scalar_one_or_none()
        await self.session.flush()

        if stored is None:
            raise InternalError(f"Operator not found: {operator_id}")
        return ExternalIdentityId(stored)

    async def claim_registration(
        self, operator_id: OperatorId, password_hash: str
    ) -> bool:
        """Conditional UPDATE; the row lock holds concurrent claims until commit."""
        stmt = (
            update(operators_table)
            .where(
                and_(
                    operators_table.c.id == operator_id,
                    operators_table.c.password_hash.is_(None),
                )
            )
            .values(password_hash=password_hash, updated_at=func.now())
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0  # type: ignore[attr-defined]

    async def release_registration(
        self, operator_id: OperatorId, password_hash: str
    ) -> None:
        stmt = (
            update(operators_table)
            .where(
                and_(
                    operators_table.c.id == operator_id,
                    operators_table.c.password_hash == password_hash,
                )
            )
            .values(password_hash=None, updated_at=func.now())
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def set_reset_token(
        self, operator_id: OperatorId, token: ResetToken, expires_at: datetime
    ) -> None:
        stmt = (
            update(operators_table)
            .where(operators_table.c.id == operator_id)
            .values(
                reset_token=token.root,
                reset_token_expires_at=expires_at,
                updated_at=func.now(),
            )
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def consume_reset_token(
        self,
        operator_id: OperatorId,
        token: ResetToken,
        password_hash: str,
        now: datetime,
    ) -> bool:
        """Compare-and-swap on the reset token.

        Returns:
            True if exactly this call cleared the token
        """
        stmt = (
            update(operators_table)
            .where(
                and_(
                    operators_table.c.id == operator_id,
                    operators_table.c.reset_token == token.root,
                    operators_table.c.reset_token_expires_at > now,
                )
            )
            .values(
                password_hash=password_hash,
                reset_token=None,
                reset_token_expires_at=None,
                updated_at=func.now(),
            )
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0  # type: ignore[attr-defined]

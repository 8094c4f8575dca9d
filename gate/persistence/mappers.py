"""Mappers for converting between database rows and domain models.

Domain models are immutable pydantic models, so rows are mapped by hand
instead of through SQLAlchemy's ORM.
"""

from typing import Any, Dict
from uuid import UUID

from gate.domain.model import Operator
from gate.domain.value import Email, ExternalIdentityId, OperatorId, ResetToken, StoreId


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_operator(row: Dict[str, Any]) -> Operator:
    """Convert database row to Operator domain model.

    Args:
        row: Database row as dict

    Returns:
        Operator domain model
    """
    return Operator(
        id=OperatorId(_uuid(row["id"])),
        email=Email(row["email"]),
        password_hash=row.get("password_hash"),
        identity_id=ExternalIdentityId(row["identity_id"])
        if row.get("identity_id")
        else None,
        reset_token=ResetToken(row["reset_token"]) if row.get("reset_token") else None,
        reset_token_expires_at=row.get("reset_token_expires_at"),
        store_id=StoreId(_uuid(row["store_id"])) if row.get("store_id") else None,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def operator_to_dict(operator: Operator) -> Dict[str, Any]:
    """Convert Operator domain model to database dict.

    Args:
        operator: Operator domain model

    Returns:
        Dict suitable for database insertion/update
    """
    # Email and ResetToken are RootModels and dump to their plain string
    return operator.model_dump()

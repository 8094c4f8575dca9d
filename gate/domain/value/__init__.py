"""Domain value objects for gate."""

from gate.domain.value.identifiers import ExternalIdentityId, OperatorId, StoreId
from gate.domain.value.types import Email, HashScheme, ResetToken

__all__ = [
    # Identifiers
    "OperatorId",
    "StoreId",
    "ExternalIdentityId",
    # Types
    "Email",
    "HashScheme",
    "ResetToken",
]

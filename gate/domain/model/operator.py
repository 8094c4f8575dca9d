"""Operator credential record.

One record per dashboard operator. Records are created out of band by an
administrator with no password (pre-authorization); registration sets the
password hash, password reset replaces it.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, model_validator

from gate.domain.model.common import DomainModel
from gate.domain.value import Email, ExternalIdentityId, OperatorId, ResetToken, StoreId


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Operator(DomainModel):
    """Operator credential record.

    Business rules:
    - password_hash is None until registration completes; such a record never logs in
    - reset_token and reset_token_expires_at are both set or both None
    - identity_id is created or reused, never cleared
    - store_id is tenant scoping, passed through unchanged
    """

    id: OperatorId
    email: Email
    password_hash: Optional[str] = None
    identity_id: Optional[ExternalIdentityId] = None
    reset_token: Optional[ResetToken] = None
    reset_token_expires_at: Optional[datetime] = None
    store_id: Optional[StoreId] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def check_reset_pair(self) -> "Operator":
        """Reject records with only half of the reset token pair."""
        if (self.reset_token is None) != (self.reset_token_expires_at is None):
            raise ValueError(
                "reset_token and reset_token_expires_at must be set together"
            )
        return self

    @property
    def is_registered(self) -> bool:
        """Whether the operator has completed registration."""
        return self.password_hash is not None

    @property
    def has_pending_reset(self) -> bool:
        return self.reset_token is not None

    def reset_token_expired(self, now: datetime) -> bool:
        """Whether the pending reset token has expired at ``now``.

        A token expiring exactly at ``now`` is already expired.
        """
        if self.reset_token_expires_at is None:
            return True
        return self.reset_token_expires_at <= now

"""External identity and session.

Both are owned by the identity provider. The service only keeps a weak
reference (Operator.identity_id) to an identity and hands sessions straight
back to the caller.
"""

from typing import Any, Optional

from pydantic import Field

from gate.domain.model.common import DomainModel
from gate.domain.value import ExternalIdentityId


class ExternalIdentity(DomainModel):
    """Account in the external identity provider."""

    id: ExternalIdentityId
    email: Optional[str] = None

    def matches_email(self, email: str) -> bool:
        """Case-insensitive email comparison."""
        return bool(self.email) and self.email.lower() == email.lower()


class Session(DomainModel):
    """Session minted by the identity provider. Never persisted."""

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "bearer"
    user: dict[str, Any] = Field(default_factory=dict)

"""Test configuration and fixtures."""

from datetime import datetime
from uuid import uuid4

from gate.domain.model import Operator
from gate.domain.value import Email, ExternalIdentityId, OperatorId, ResetToken
from gate.util.password import hash_password


def make_operator(
    email: str = "a@x.com",
    password: str | None = None,
    password_hash: str | None = None,
    identity_id: str | None = None,
    reset_token: str | None = None,
    reset_token_expires_at: datetime | None = None,
) -> Operator:
    """Build an operator record for tests.

    Args:
        email: Operator email (normalized by the Email value object)
        password: Plaintext password to hash; leave None for a pre-authorized,
            unregistered operator
        password_hash: Stored hash to use as-is (overrides ``password``)
        identity_id: Linked external identity id
        reset_token: Pending reset token
        reset_token_expires_at: Expiry of the pending reset token

    Returns:
        Operator domain model
    """
    if password_hash is None and password is not None:
        password_hash = hash_password(password)

    return Operator(
        id=OperatorId(uuid4()),
        email=Email(email),
        password_hash=password_hash,
        identity_id=ExternalIdentityId(identity_id) if identity_id else None,
        reset_token=ResetToken(reset_token) if reset_token else None,
        reset_token_expires_at=reset_token_expires_at,
    )

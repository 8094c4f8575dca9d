"""Domain value objects for operator authentication.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and normalization.
"""

from enum import Enum

from pydantic import field_validator

from gate.domain.value.common import RootValueObject


class Email(RootValueObject[str]):
    """Operator email address.

    Emails are case-insensitive: the value is stripped and lowercased on
    construction, so every lookup and write uses the normalized form.
    """

    @field_validator("root")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize and sanity-check the address."""
        v = v.strip().lower()
        if len(v) < 3 or len(v) > 320:
            raise ValueError("Email must be 3-320 characters")
        if "@" not in v:
            raise ValueError("Email must contain '@'")
        return v


class ResetToken(RootValueObject[str]):
    """Single-use password reset token (URL-safe)."""

    @field_validator("root")
    @classmethod
    def validate_token_format(cls, v: str) -> str:
        """Validate token is not empty."""
        if len(v) < 1 or len(v) > 255:
            raise ValueError("Token must be 1-255 characters")
        return v

    def masked(self) -> str:
        """Prefix safe to put in logs."""
        return self.root[:8] + "..."


class HashScheme(str, Enum):
    """Password hash encodings found in operator records."""

    SCRYPT = "scrypt"
    # Written by the old reset flow; verified, then rehashed on login
    BCRYPT = "bcrypt"

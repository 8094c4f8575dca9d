"""Helpers shared by the authentication use cases."""

from pydantic import ValidationError

from gate.domain.value import Email, ResetToken


def parse_email(raw: str) -> Email | None:
    """Normalize a submitted email.

    Returns:
        The normalized email, or None if it can never match a record
    """
    try:
        return Email(raw)
    except ValidationError:
        return None


def parse_reset_token(raw: str) -> ResetToken | None:
    try:
        return ResetToken(raw)
    except ValidationError:
        return None

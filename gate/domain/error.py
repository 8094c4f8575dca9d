"""Domain layer errors.

Every failure surfaced to a caller is a ``DomainError`` carrying one of four
categories. The interface layer maps the category to a transport status; the
domain never knows about HTTP.
"""

from enum import Enum


class ErrorCategory(str, Enum):
    """Failure taxonomy shared by all handlers."""

    INVALID_INPUT = "invalid_input"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    INTERNAL = "internal"


class DomainError(Exception):
    """Base domain error."""

    category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInputError(DomainError):
    """Missing or malformed input, or an invalid/expired reset token."""

    category = ErrorCategory.INVALID_INPUT


class UnauthorizedError(DomainError):
    """Unknown email, unregistered record or wrong password."""

    category = ErrorCategory.UNAUTHORIZED


class ForbiddenError(DomainError):
    """Registration attempted for an unknown or already registered email."""

    category = ErrorCategory.FORBIDDEN


class InternalError(DomainError):
    """Store or identity provider failure, or an unexpected state."""

    category = ErrorCategory.INTERNAL


class MalformedPasswordHashError(InternalError):
    """Raised when a stored password hash cannot be parsed."""

    def __init__(self, reason: str):
        super().__init__(f"Malformed stored password hash: {reason}")

"""Domain services for gate."""

from .base import Service
from .identity_link_service import IdentityLinkService
from .identity_provider import IdentityProviderClient
from .notifier import ResetLinkNotifier
from .operator_service import OperatorService
from .password_service import PasswordService

__all__ = [
    "Service",
    "IdentityProviderClient",
    "IdentityLinkService",
    "OperatorService",
    "PasswordService",
    "ResetLinkNotifier",
]

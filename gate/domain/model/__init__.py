"""Domain model entities for gate."""

from gate.domain.model.identity import ExternalIdentity, Session
from gate.domain.model.operator import Operator

__all__ = [
    "Operator",
    "ExternalIdentity",
    "Session",
]

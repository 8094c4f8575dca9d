"""Repository interfaces for the gate domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from gate.domain.repository.operator import OperatorRepository

__all__ = [
    "OperatorRepository",
]

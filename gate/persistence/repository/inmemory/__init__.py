"""In-memory repository implementations for testing."""

from .operator import InMemoryOperatorRepository

__all__ = ["InMemoryOperatorRepository"]

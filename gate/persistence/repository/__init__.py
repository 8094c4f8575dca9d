"""PostgreSQL repository implementations."""

from gate.persistence.repository.operator import PostgresOperatorRepository

__all__ = ["PostgresOperatorRepository"]

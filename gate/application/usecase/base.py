"""Base use case."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


class BaseUseCase(ABC, Generic[RequestT, ResponseT]):
    """One authentication flow, run through ``execute``.

    Collaborator failures are translated into domain errors here; adapter
    exceptions never escape ``execute``.
    """

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        pass

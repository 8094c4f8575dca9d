"""Base class for value objects."""

from typing import Generic, TypeVar

from pydantic import RootModel, ConfigDict

T = TypeVar("T")


class RootValueObject(RootModel[T], Generic[T]):
    """Immutable wrapper around a single primitive value.

    The wrapped value lives in ``.root`` and ``model_dump()`` returns the
    primitive itself, so wrappers such as Email or ResetToken serialize as
    plain strings.
    """

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.root)

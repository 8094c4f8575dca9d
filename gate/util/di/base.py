"""Provider base class and component names."""

from typing import ClassVar, Literal, get_args

from dishka import Provider

# Collaborators that tests replace with in-memory doubles
Component = Literal["persistence", "identity", "notifier"]
COMPONENTS: frozenset[str] = frozenset(get_args(Component))


class ProviderBase(Provider):
    """Base for every gate provider.

    A provider that declares ``__mock_component__`` is the base of a
    swappable component; its subclasses set ``__is_mock__`` to say which
    side they implement. Providers without a component are always real.
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False

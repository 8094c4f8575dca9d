"""Base class for domain services."""


class Service:
    """Marker base for domain services.

    Services are constructed by the DI container with their repositories,
    ports and settings; they hold no per-call state.
    """

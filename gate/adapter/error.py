"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class ProviderError(AdapterError):
    """External provider error."""

    pass


class IdentityProviderError(ProviderError):
    """Identity provider call failed."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class IdentityAlreadyExistsError(IdentityProviderError):
    """Identity provider already holds an account for the email."""

    pass


class NotifierError(ProviderError):
    """Reset link could not be delivered."""

    pass

"""Configuration providers."""

from dishka import Scope, provide

from gate.config import AuthSettings, Settings
from gate.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Settings read once per container from the environment and ``.env``.

    ``AuthSettings`` is exposed on its own because the domain and use cases
    only need the reset link base, token TTL and password length.
    """

    scope = Scope.APP

    @provide
    def provide_settings(self) -> Settings:
        return Settings()

    @provide
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        return settings.auth

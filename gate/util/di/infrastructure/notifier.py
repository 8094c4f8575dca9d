"""Reset link delivery infrastructure providers."""

from dishka import Scope, provide

from gate.adapter.webhook.notifier import WebhookResetLinkNotifier
from gate.config import Settings
from gate.domain.service import ResetLinkNotifier
from gate.util.di.base import ProviderBase


class NotifierProvider(ProviderBase):
    """Notifier component base."""

    __mock_component__ = "notifier"


class ProdNotifierProvider(NotifierProvider):
    """Production notifier posting to the reset webhook."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_reset_link_notifier(self, settings: Settings) -> ResetLinkNotifier:
        """Provide webhook notifier (disabled when no URL is configured)."""
        return WebhookResetLinkNotifier(
            webhook_url=settings.notifications.reset_webhook_url,
            timeout=settings.notifications.timeout,
        )

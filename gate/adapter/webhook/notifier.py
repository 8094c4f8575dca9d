"""Reset link delivery over an HTTP webhook.

The webhook owner (mail relay, automation workflow) turns the payload into
the actual email; this service only hands the link over.
"""

from dataclasses import dataclass
from datetime import datetime

import httpx
import logfire

from gate.adapter.error import NotifierError
from gate.domain.service.notifier import ResetLinkNotifier


class WebhookResetLinkNotifier(ResetLinkNotifier):
    """Posts reset links as JSON to a configured webhook."""

    def __init__(
        self,
        webhook_url: str | None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize webhook notifier.

        Args:
            webhook_url: Target URL; delivery is disabled when None
            timeout: Seconds per request
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._transport = transport

    async def send_reset_link(self, email: str, link: str, expires_at: datetime) -> None:
        """Post the reset link to the webhook.

        Raises:
            NotifierError: If the webhook rejects the payload or is unreachable
        """
        if not self.webhook_url:
            logfire.warn("Reset webhook not configured, link not delivered", email=email)
            return

        payload = {
            "email": email,
            "reset_link": link,
            "expires_at": expires_at.isoformat(),
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(self.webhook_url, json=payload)
        except httpx.HTTPError as e:
            logfire.error("Reset webhook HTTP error", error=str(e))
            raise NotifierError(f"HTTP error delivering reset link: {e}")

        if response.status_code >= 300:
            logfire.error(
                "Reset webhook rejected payload",
                status_code=response.status_code,
                error=response.text,
            )
            raise NotifierError(f"Reset webhook failed: {response.status_code}")

        logfire.info("Reset link delivered", email=email)


@dataclass(frozen=True)
class SentResetLink:
    email: str
    link: str
    expires_at: datetime


class RecordingResetLinkNotifier(ResetLinkNotifier):
    """Mock notifier for testing. Keeps every link it was asked to send."""

    def __init__(self) -> None:
        self.sent: list[SentResetLink] = []
        self.fail = False

    async def send_reset_link(self, email: str, link: str, expires_at: datetime) -> None:
        if self.fail:
            raise NotifierError("Reset webhook failed: mock failure")
        self.sent.append(SentResetLink(email=email, link=link, expires_at=expires_at))

    def last_for(self, email: str) -> SentResetLink | None:
        """Most recent link sent to ``email``."""
        for sent in reversed(self.sent):
            if sent.email == email:
                return sent
        return None

"""Reset link delivery port."""

from datetime import datetime


class ResetLinkNotifier:
    """Hands a password reset link to a delivery channel."""

    async def send_reset_link(self, email: str, link: str, expires_at: datetime) -> None:
        """Deliver a reset link.

        Args:
            email: Recipient email
            link: Full reset link including the token
            expires_at: When the token stops being accepted

        Raises:
            NotifierError: If delivery failed
        """
        raise NotImplementedError

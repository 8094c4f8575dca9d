"""Reset link webhook adapter."""

from .notifier import RecordingResetLinkNotifier, SentResetLink, WebhookResetLinkNotifier

__all__ = ["WebhookResetLinkNotifier", "RecordingResetLinkNotifier", "SentResetLink"]

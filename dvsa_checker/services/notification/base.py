"""Base notification types."""

from abc import ABC, abstractmethod
from typing import Optional

from ...core.enums import NotificationUrgency


class NotificationChannel(ABC):
    """Abstract base class for notification channels."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get channel name."""

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Check if channel is enabled."""

    @abstractmethod
    async def send(
        self,
        title: str,
        message: str,
        urgency: NotificationUrgency = NotificationUrgency.NORMAL,
        action_url: Optional[str] = None,
    ) -> bool:
        """
        Send notification through this channel.

        Args:
            title: Notification title
            message: Notification message
            urgency: Urgency hint
            action_url: Page the user should open to act on the notification

        Returns:
            True if successful
        """

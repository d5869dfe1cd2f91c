"""Notification fan-out to the configured channels."""

import asyncio
from typing import List, Optional, Union

from loguru import logger

from ...core.config.config_models import NotificationConfig
from ...core.enums import NotificationUrgency
from .base import NotificationChannel
from .channels.console import ConsoleChannel
from .channels.telegram import TelegramChannel


class NotificationService:
    """Deliver user notifications; delivery failures are logged, never raised."""

    def __init__(
        self,
        config: Optional[NotificationConfig] = None,
        channels: Optional[List[NotificationChannel]] = None,
    ):
        """
        Initialize notification service.

        Args:
            config: Channel configuration, used when channels is not given
            channels: Explicit channel list (tests, custom front-ends)
        """
        self.config = config or NotificationConfig()
        if channels is None:
            channels = [ConsoleChannel(enabled=self.config.console)]
            if self.config.telegram.enabled:
                channels.append(TelegramChannel(self.config.telegram))
        self.channels = channels

    @property
    def enabled_channels(self) -> List[NotificationChannel]:
        return [channel for channel in self.channels if channel.enabled]

    async def show(
        self,
        title: str,
        body: str,
        urgency: Union[NotificationUrgency, str] = NotificationUrgency.NORMAL,
        action_url: Optional[str] = None,
    ) -> bool:
        """
        Show a notification on every enabled channel.

        Args:
            title: Notification title
            body: Notification body
            urgency: low, normal or critical
            action_url: Page the user should open to act on the notification

        Returns:
            True if at least one channel delivered it
        """
        urgency = NotificationUrgency(urgency)
        channels = self.enabled_channels
        if not channels:
            logger.warning(f"No notification channels enabled, dropping: {title}")
            return False

        results = await asyncio.gather(
            *(channel.send(title, body, urgency, action_url) for channel in channels),
            return_exceptions=True,
        )

        any_success = False
        for channel, result in zip(channels, results):
            if isinstance(result, Exception):
                logger.error(f"Notification channel '{channel.name}' failed: {result}")
            elif result is True:
                any_success = True

        if not any_success:
            logger.warning(f"All channels failed for notification: {title}")
        return any_success

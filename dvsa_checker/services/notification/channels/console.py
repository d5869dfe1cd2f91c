"""Console notification channel: writes notifications to the log."""

from typing import Optional

from loguru import logger

from ....core.enums import NotificationUrgency
from ..base import NotificationChannel

_LEVELS = {
    NotificationUrgency.LOW: "INFO",
    NotificationUrgency.NORMAL: "SUCCESS",
    NotificationUrgency.CRITICAL: "WARNING",
}


class ConsoleChannel(NotificationChannel):
    """Log-backed channel, always available."""

    def __init__(self, enabled: bool = True):
        self._enabled = enabled

    @property
    def name(self) -> str:
        return "console"

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def send(
        self,
        title: str,
        message: str,
        urgency: NotificationUrgency = NotificationUrgency.NORMAL,
        action_url: Optional[str] = None,
    ) -> bool:
        text = f"[NOTIFICATION] {title}: {message}"
        if action_url:
            text += f" ({action_url})"
        logger.log(_LEVELS.get(urgency, "INFO"), text)
        return True

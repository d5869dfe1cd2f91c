"""Telegram notification channel."""

import functools
from typing import Any, Callable, Optional

from loguru import logger

from ....core.config.config_models import TelegramConfig
from ....core.enums import NotificationUrgency
from ....core.retry import get_telegram_retry
from ..base import NotificationChannel

TELEGRAM_MESSAGE_LIMIT = 4096


def safe_telegram_call(operation_name: str) -> Callable:
    """
    Async decorator that logs any Telegram failure and returns False instead.

    Args:
        operation_name: Human-readable label used in log messages.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> bool:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.error(f"Telegram {operation_name} failed: {e}")
                return False

        return wrapper

    return decorator


def escape_markdown(text: str) -> str:
    """Escape Telegram Markdown special characters: * _ ` [ ] ( )"""
    for char in ["*", "_", "`", "[", "]", "(", ")"]:
        text = text.replace(char, "\\" + char)
    return text


class TelegramChannel(NotificationChannel):
    """Telegram notification channel using python-telegram-bot."""

    def __init__(self, config: TelegramConfig):
        """
        Initialize Telegram channel.

        Args:
            config: Telegram configuration
        """
        self._config = config
        self._bot: Optional[Any] = None

    @property
    def name(self) -> str:
        return "telegram"

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def _get_or_create_bot(self) -> Optional[Any]:
        """Get cached bot or create a new one."""
        if self._bot is not None:
            return self._bot

        token = self._config.bot_token.get_secret_value()
        if not token:
            logger.error("Telegram bot_token missing")
            return None

        from telegram import Bot

        self._bot = Bot(token=token)
        return self._bot

    @staticmethod
    def format_message(
        title: str, message: str, urgency: NotificationUrgency, action_url: Optional[str]
    ) -> str:
        prefix = "🚨 " if urgency == NotificationUrgency.CRITICAL else ""
        text = f"{prefix}*{escape_markdown(title)}*\n\n{escape_markdown(message)}"
        if action_url:
            text += f"\n\n{escape_markdown(action_url)}"
        return text[:TELEGRAM_MESSAGE_LIMIT]

    @safe_telegram_call("notification")
    @get_telegram_retry()
    async def _send_text(self, text: str) -> bool:
        bot = self._get_or_create_bot()
        if bot is None:
            return False
        await bot.send_message(chat_id=self._config.chat_id, text=text, parse_mode="Markdown")
        return True

    async def send(
        self,
        title: str,
        message: str,
        urgency: NotificationUrgency = NotificationUrgency.NORMAL,
        action_url: Optional[str] = None,
    ) -> bool:
        if not self._config.chat_id:
            logger.error("Telegram chat_id missing")
            return False

        success = await self._send_text(self.format_message(title, message, urgency, action_url))
        if success:
            logger.info("Telegram notification sent successfully")
        return success

"""Tests for notification service and channels."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import SecretStr
from telegram.error import NetworkError

from dvsa_checker.core.config.config_models import NotificationConfig, TelegramConfig
from dvsa_checker.core.enums import NotificationUrgency
from dvsa_checker.services.notification import NotificationService
from dvsa_checker.services.notification.base import NotificationChannel
from dvsa_checker.services.notification.channels.console import ConsoleChannel
from dvsa_checker.services.notification.channels.telegram import (
    TelegramChannel,
    escape_markdown,
)


def make_channel(name: str, enabled: bool = True, result=True) -> MagicMock:
    channel = MagicMock(spec=NotificationChannel)
    channel.name = name
    channel.enabled = enabled
    if isinstance(result, Exception):
        channel.send = AsyncMock(side_effect=result)
    else:
        channel.send = AsyncMock(return_value=result)
    return channel


def telegram_config(**overrides) -> TelegramConfig:
    values = {"enabled": True, "bot_token": SecretStr("test-token"), "chat_id": "123456"}
    values.update(overrides)
    return TelegramConfig(**values)


def test_default_channels_console_only():
    """Test telegram is added only when enabled."""
    notifier = NotificationService()
    assert [c.name for c in notifier.channels] == ["console"]


def test_default_channels_with_telegram():
    """Test telegram channel is built from config."""
    notifier = NotificationService(NotificationConfig(telegram=telegram_config()))
    assert [c.name for c in notifier.channels] == ["console", "telegram"]


@pytest.mark.asyncio
async def test_show_fans_out_to_enabled_channels():
    """Test every enabled channel receives the notification."""
    first, second = make_channel("first"), make_channel("second")
    disabled = make_channel("disabled", enabled=False)
    notifier = NotificationService(channels=[first, disabled, second])

    result = await notifier.show(
        "Earlier Test Slot Found!", "body", "critical", action_url="https://example.test"
    )

    assert result is True
    first.send.assert_awaited_once_with(
        "Earlier Test Slot Found!", "body", NotificationUrgency.CRITICAL, "https://example.test"
    )
    second.send.assert_awaited_once()
    disabled.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_show_never_raises_on_channel_failure():
    """Test a raising channel does not prevent delivery on the others."""
    broken = make_channel("broken", result=RuntimeError("boom"))
    working = make_channel("working")
    notifier = NotificationService(channels=[broken, working])

    assert await notifier.show("Title", "Body") is True
    working.send.assert_awaited_once()


@pytest.mark.asyncio
async def test_show_all_channels_failed():
    """Test show returns False when nothing was delivered."""
    notifier = NotificationService(
        channels=[make_channel("a", result=False), make_channel("b", result=RuntimeError("x"))]
    )
    assert await notifier.show("Title", "Body") is False


@pytest.mark.asyncio
async def test_show_without_channels():
    """Test show returns False with no enabled channel."""
    notifier = NotificationService(channels=[ConsoleChannel(enabled=False)])
    assert await notifier.show("Title", "Body") is False


@pytest.mark.asyncio
async def test_console_channel_always_delivers():
    """Test console channel logs and reports success."""
    channel = ConsoleChannel()
    assert channel.name == "console"
    assert await channel.send("Title", "Body", NotificationUrgency.LOW) is True


class TestTelegramChannel:
    """Telegram delivery through python-telegram-bot."""

    def test_escape_markdown(self):
        assert escape_markdown("a_b*c[d](e)`") == "a\\_b\\*c\\[d\\]\\(e\\)\\`"

    def test_format_message_critical(self):
        text = TelegramChannel.format_message(
            "Booking Complete!", "Done", NotificationUrgency.CRITICAL, None
        )
        assert text == "🚨 *Booking Complete!*\n\nDone"

    def test_format_message_with_action_url(self):
        text = TelegramChannel.format_message(
            "Found", "Slot", NotificationUrgency.NORMAL, "https://example.test/x"
        )
        assert text.endswith("\n\nhttps://example.test/x")

    @pytest.mark.asyncio
    async def test_send_success(self):
        channel = TelegramChannel(telegram_config())

        with patch("telegram.Bot") as MockBot:
            bot = MockBot.return_value
            bot.send_message = AsyncMock()
            assert await channel.send("Title", "Body") is True

        MockBot.assert_called_once_with(token="test-token")
        bot.send_message.assert_awaited_once_with(
            chat_id="123456", text="*Title*\n\nBody", parse_mode="Markdown"
        )

    @pytest.mark.asyncio
    async def test_send_missing_chat_id(self):
        channel = TelegramChannel(telegram_config(chat_id=""))

        with patch("telegram.Bot") as MockBot:
            assert await channel.send("Title", "Body") is False

        MockBot.assert_not_called()

    @pytest.mark.asyncio
    async def test_send_missing_token(self):
        channel = TelegramChannel(telegram_config(bot_token=SecretStr("")))

        with patch("telegram.Bot") as MockBot:
            assert await channel.send("Title", "Body") is False

        MockBot.assert_not_called()

    @pytest.mark.asyncio
    async def test_send_error_returns_false(self):
        channel = TelegramChannel(telegram_config())

        with patch("telegram.Bot") as MockBot:
            MockBot.return_value.send_message = AsyncMock(side_effect=ValueError("bad request"))
            assert await channel.send("Title", "Body") is False

        MockBot.return_value.send_message.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_network_error_is_retried(self):
        channel = TelegramChannel(telegram_config())

        with patch("telegram.Bot") as MockBot:
            MockBot.return_value.send_message = AsyncMock(
                side_effect=[NetworkError("connection reset"), None]
            )
            assert await channel.send("Title", "Body") is True

        assert MockBot.return_value.send_message.await_count == 2

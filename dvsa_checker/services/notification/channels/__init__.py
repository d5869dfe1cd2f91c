"""Notification channels."""

from .console import ConsoleChannel
from .telegram import TelegramChannel

__all__ = ["ConsoleChannel", "TelegramChannel"]

"""Notification boundary."""

from .base import NotificationChannel
from .channels import ConsoleChannel, TelegramChannel
from .notification_service import NotificationService

__all__ = ["ConsoleChannel", "NotificationChannel", "NotificationService", "TelegramChannel"]

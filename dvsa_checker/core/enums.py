"""Centralized enum definitions for DVSA Checker."""

from enum import Enum


class BookingMode(str, Enum):
    """What to do when a qualifying slot is found."""

    AUTO_BOOK = "auto_book"
    NOTIFY = "notify"  # dry run: actionable notification, no booking
    PASSIVE = "passive"

    @classmethod
    def values(cls) -> list:
        """Return list of all enum values."""
        return [e.value for e in cls]

    @classmethod
    def parse(cls, value: object) -> "BookingMode":
        """
        Parse a booking mode, accepting the legacy camelCase spellings.

        Unknown or empty values fall back to PASSIVE.
        """
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower().replace("-", "_")
        aliases = {"autobook": cls.AUTO_BOOK, "auto_book": cls.AUTO_BOOK, "notify": cls.NOTIFY}
        return aliases.get(normalized, cls.PASSIVE)


class MonitorState(str, Enum):
    """Lifecycle controller states."""

    IDLE = "idle"
    MONITORING = "monitoring"


class NotificationUrgency(str, Enum):
    """Urgency hint passed to notification channels."""

    LOW = "low"
    NORMAL = "normal"
    CRITICAL = "critical"

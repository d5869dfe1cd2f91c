"""Check cycle result type."""

from dataclasses import dataclass
import datetime
from typing import Any, Dict, Optional

from ..constants import Calendar


@dataclass(frozen=True)
class CheckOutcome:
    """Result of exactly one orchestrator invocation."""

    found: bool
    message: Optional[str] = None
    location_name: Optional[str] = None
    date: Optional[datetime.date] = None
    skipped: bool = False

    @classmethod
    def not_found(cls, message: Optional[str] = None) -> "CheckOutcome":
        return cls(found=False, message=message)

    @classmethod
    def skipped_check(cls) -> "CheckOutcome":
        """Outcome of an invocation dropped because another cycle was running."""
        return cls(found=False, message="A check is already in progress", skipped=True)

    @classmethod
    def found_at(cls, location_name: str, slot_date: datetime.date) -> "CheckOutcome":
        """Build a found outcome with the user-facing message."""
        message = (
            f"Test found at {location_name} on {slot_date.strftime(Calendar.DISPLAY_FORMAT)}"
        )
        return cls(found=True, message=message, location_name=location_name, date=slot_date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "found": self.found,
            "message": self.message,
            "location_name": self.location_name,
            "date": self.date.isoformat() if self.date else None,
            "skipped": self.skipped,
        }

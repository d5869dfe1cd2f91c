"""Custom exception classes for DVSA Checker."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


class CheckerError(Exception):
    """Base exception for DVSA Checker."""

    def __init__(
        self, message: str, recoverable: bool = True, details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize checker error.

        Args:
            message: Error message
            recoverable: Whether the next scheduled check may succeed without user action
            details: Additional error details
        """
        self.message = message
        self.recoverable = recoverable
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "recoverable": self.recoverable,
            "details": self.details,
            "timestamp": self.timestamp,
        }


class SettingsValidationError(CheckerError):
    """Monitor settings are not sufficient to start monitoring."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, recoverable=False, details=details)
        self.field = field


# Authentication Errors
class LoginError(CheckerError):
    """Login operation failed."""

    def __init__(self, message: str = "Login failed", recoverable: bool = True):
        super().__init__(message, recoverable)


class InvalidCredentialsError(LoginError):
    """The site rejected the licence number / booking reference pair."""

    def __init__(self, site_message: str = ""):
        self.site_message = site_message
        message = "Login failed due to invalid credentials"
        if site_message:
            message += f": {site_message}"
        super().__init__(message, recoverable=False)


class ChallengeError(CheckerError):
    """Anti-automation challenge handling failed."""

    def __init__(
        self,
        message: str = "Challenge verification failed",
        recoverable: bool = True,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, recoverable, details)


class ChallengeUnresolvedError(ChallengeError):
    """A challenge appeared during login but could not be solved."""

    def __init__(self, message: str = "CAPTCHA appeared but could not be solved"):
        super().__init__(message, recoverable=True)


class NavigationTimeoutError(CheckerError):
    """A bounded wait on the automation surface exceeded its timeout."""

    def __init__(
        self,
        message: str = "Timed out waiting for page",
        selector: Optional[str] = None,
        timeout_ms: Optional[int] = None,
    ):
        self.selector = selector
        self.timeout_ms = timeout_ms
        details: Dict[str, Any] = {}
        if selector:
            details["selector"] = selector
        if timeout_ms is not None:
            details["timeout_ms"] = timeout_ms
        super().__init__(message, recoverable=True, details=details)


class BookingError(CheckerError):
    """Appointment rebooking failed."""

    def __init__(
        self,
        message: str = "Booking failed",
        recoverable: bool = False,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, recoverable, details)


class BrowserError(CheckerError):
    """Automation surface is unavailable."""

    def __init__(self, message: str = "Browser is not available", recoverable: bool = True):
        super().__init__(message, recoverable)


# Configuration Errors
class ConfigurationError(CheckerError):
    """Configuration error occurred."""

    def __init__(
        self,
        message: str = "Configuration error",
        recoverable: bool = False,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, recoverable, details)


class SelectorMapError(ConfigurationError):
    """Selector map is incomplete or malformed."""

    def __init__(self, message: str, missing_steps: Optional[List[str]] = None):
        self.missing_steps = missing_steps or []
        if self.missing_steps:
            message += f" Missing: {', '.join(self.missing_steps)}"
        super().__init__(message, details={"missing_steps": self.missing_steps})

"""Timing-related constants (timeouts, intervals, limits)."""

from typing import Final


class Timeouts:
    """Timeout values - MILLISECONDS for Playwright, SECONDS noted separately."""

    # Playwright timeouts (milliseconds)
    NAVIGATION: Final[int] = 30_000
    SELECTOR_WAIT: Final[int] = 30_000
    SESSION_RESTORE_MARKER: Final[int] = 5_000
    LOGIN_MARKER: Final[int] = 15_000
    CALENDAR_ADVANCE: Final[int] = 10_000
    BOOKING_FIRST_SLOT: Final[int] = 5_000

    # API/Service timeouts (seconds)
    CAPTCHA_SOLVE_SECONDS: Final[int] = 180
    REMOTE_CONFIG_SECONDS: Final[int] = 15
    SHUTDOWN_SECONDS: Final[int] = 30


class Intervals:
    """Polling interval bounds in MINUTES."""

    CHECK_MIN_MINUTES: Final[int] = 1
    CHECK_DEFAULT_MINUTES: Final[int] = 5
    CHECK_MAX_MINUTES: Final[int] = 24 * 60


class Calendar:
    """Booking calendar scanning limits."""

    MAX_PAGES: Final[int] = 6
    DATE_ATTRIBUTE: Final[str] = "data-date"
    DISPLAY_FORMAT: Final[str] = "%d/%m/%Y"

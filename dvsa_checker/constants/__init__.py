"""Constants for DVSA Checker.

All classes can be imported directly from this package:
    from dvsa_checker.constants import Timeouts, Intervals
"""

from .timing import Calendar, Intervals, Timeouts

__all__ = ["Calendar", "Intervals", "Timeouts"]

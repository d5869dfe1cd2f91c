"""Check cycle components: login, navigation, scanning, booking and dispatch."""

from .booking_flow import BookingFlow
from .centre_navigator import CentreNavigator
from .challenge_resolver import ChallengeResolver
from .check_orchestrator import CheckOrchestrator
from .login_flow import LoginFlow
from .outcome_dispatcher import OutcomeDispatcher
from .slot_scanner import SlotScanner, parse_slot_date

__all__ = [
    "BookingFlow",
    "CentreNavigator",
    "ChallengeResolver",
    "CheckOrchestrator",
    "LoginFlow",
    "OutcomeDispatcher",
    "SlotScanner",
    "parse_slot_date",
]

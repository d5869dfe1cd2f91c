"""What happens once a qualifying date has been found."""

from typing import Awaitable, Callable, Optional

from ...constants import Calendar
from ...core.config.config_models import MonitorSettings
from ...core.enums import BookingMode, NotificationUrgency
from ...core.events import EventBus
from ...core.result import CheckOutcome
from ...selector.site_config import SiteConfig
from ..browser.surface import AutomationPage
from ..notification.notification_service import NotificationService
from .booking_flow import BookingFlow


class OutcomeDispatcher:
    """Acts on a found outcome according to the booking mode."""

    def __init__(
        self,
        notifier: NotificationService,
        booking_flow: BookingFlow,
        stop_monitoring: Callable[[], Awaitable[bool]],
        events: Optional[EventBus] = None,
    ):
        """
        Initialize dispatcher.

        Args:
            notifier: Notification boundary
            booking_flow: Runs the rebooking in auto-book mode
            stop_monitoring: Stops the lifecycle controller
            events: Event bus for user-facing log lines
        """
        self.notifier = notifier
        self.booking_flow = booking_flow
        self.stop_monitoring = stop_monitoring
        self.events = events or EventBus()

    async def dispatch(
        self,
        page: AutomationPage,
        outcome: CheckOutcome,
        settings: MonitorSettings,
        site: SiteConfig,
    ) -> None:
        mode = settings.booking_mode

        if mode == BookingMode.AUTO_BOOK:
            self.events.log("Auto-booking enabled. Attempting to book...")
            await self.booking_flow.book(page, site.selectors)
            # Monitoring ends whether or not the booking went through
            await self.stop_monitoring()
            return

        if mode == BookingMode.NOTIFY:
            self.events.log("Dry Run mode: Sending notification only.")
            display_date = outcome.date.strftime(Calendar.DISPLAY_FORMAT) if outcome.date else ""
            await self.notifier.show(
                "Earlier Test Slot Found!",
                f"Click here to book a test at {outcome.location_name} for {display_date}.",
                urgency=NotificationUrgency.CRITICAL,
                action_url=site.urls.public_url,
            )
            return

        await self.notifier.show("Earlier Test Found!", outcome.message or "")

"""Automatic rebooking of a found slot."""

from typing import Optional

from loguru import logger

from ...constants import Timeouts
from ...core.enums import NotificationUrgency
from ...core.events import EventBus
from ...core.exceptions import BookingError
from ...selector.selector_map import SelectorMap, SelectorStep
from ..browser.surface import AutomationPage
from ..notification.notification_service import NotificationService

BOOKING_SUCCESS_MESSAGE = "AUTO-BOOKING SUCCESSFUL! Check your email for confirmation."


class BookingFlow:
    """Confirms the first time slot on the clicked date."""

    def __init__(self, notifier: NotificationService, events: Optional[EventBus] = None):
        self.notifier = notifier
        self.events = events or EventBus()

    async def book(self, page: AutomationPage, selectors: SelectorMap) -> bool:
        """
        Run the four booking steps on a page showing the chosen date's slots.

        Never raises; the result is logged and notified either way.

        Returns:
            True if the change was confirmed
        """
        step = "select_slot"
        try:
            self.events.log("Selecting first available time...")
            await page.wait_for(
                selectors[SelectorStep.FIRST_AVAILABLE_SLOT_RADIO], Timeouts.BOOKING_FIRST_SLOT
            )
            await page.click(selectors[SelectorStep.FIRST_AVAILABLE_SLOT_RADIO])

            step = "confirm_slot"
            await page.click_and_wait(selectors[SelectorStep.CONFIRM_SLOT_BUTTON])

            step = "final_confirmation"
            self.events.log("Confirming final change...")
            await page.wait_for(selectors[SelectorStep.FINAL_CONFIRMATION_CHECKBOX])
            await page.click(selectors[SelectorStep.FINAL_CONFIRMATION_CHECKBOX])

            step = "confirm_change"
            await page.click_and_wait(selectors[SelectorStep.CONFIRM_CHANGE_BUTTON])
        except Exception as e:
            error = BookingError(f"AUTO-BOOKING FAILED: {e}", details={"step": step})
            self.events.log(error.message, "ERROR")
            logger.error(f"Booking error details: {error.to_dict()}")
            await self.notifier.show("Booking Failed", error.message, NotificationUrgency.CRITICAL)
            return False

        self.events.log(BOOKING_SUCCESS_MESSAGE, "SUCCESS")
        await self.notifier.show(
            "Booking Complete!", BOOKING_SUCCESS_MESSAGE, NotificationUrgency.CRITICAL
        )
        return True

"""Calendar scan for the first bookable date before the cutoff."""

from datetime import date
from typing import Optional

from loguru import logger

from ...constants import Calendar, Timeouts
from ...selector.selector_map import SelectorMap, SelectorStep
from ..browser.surface import AutomationPage


def parse_slot_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a calendar anchor's date attribute.

    Accepts ``YYYY-MM-DD`` and ISO timestamps; anything else yields None.
    """
    if not value:
        return None
    text = value.strip()
    if "T" in text:
        text = text.split("T", 1)[0]
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


class SlotScanner:
    """Pages through a centre's calendar looking for a qualifying date."""

    def __init__(
        self,
        max_pages: int = Calendar.MAX_PAGES,
        advance_timeout_ms: int = Timeouts.CALENDAR_ADVANCE,
    ):
        self.max_pages = max_pages
        self.advance_timeout_ms = advance_timeout_ms

    async def find_earlier_date(
        self, page: AutomationPage, selectors: SelectorMap, cutoff: date
    ) -> Optional[date]:
        """
        Find and click the first bookable date strictly earlier than cutoff.

        Args:
            page: Page showing a centre's calendar
            selectors: Selector map snapshot for this check
            cutoff: Only dates before this qualify

        Returns:
            The clicked date, or None if no page had a qualifying date
        """
        header = selectors[SelectorStep.CALENDAR_MONTH_YEAR_HEADER]

        for page_index in range(self.max_pages):
            anchors = await page.query_all(selectors[SelectorStep.AVAILABLE_DATE_ANCHOR])
            for anchor in anchors:
                raw = await anchor.get_attribute(Calendar.DATE_ATTRIBUTE)
                slot_date = parse_slot_date(raw)
                if slot_date is None:
                    logger.debug(f"Skipping calendar entry with unparsable date: {raw!r}")
                    continue
                if slot_date < cutoff:
                    await anchor.click()
                    return slot_date

            if page_index == self.max_pages - 1:
                break

            current_month = ((await page.text_content(header)) or "").strip()
            await page.click(selectors[SelectorStep.CALENDAR_NEXT_MONTH_BUTTON])
            await page.wait_for_text_change(header, current_month, self.advance_timeout_ms)

        return None

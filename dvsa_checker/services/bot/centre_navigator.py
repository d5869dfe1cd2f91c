"""Moving between the centre search and a centre's calendar."""

from ...core.config.config_models import Centre
from ...selector.selector_map import SelectorMap, SelectorStep
from ..browser.surface import AutomationPage


class CentreNavigator:
    """Page transitions around the centre search form."""

    async def open_centre_search(self, page: AutomationPage, selectors: SelectorMap) -> None:
        """Follow the change-date link from the booking overview."""
        await page.click_and_wait(selectors[SelectorStep.CHANGE_TEST_DATE_LINK])

    async def select_centre(
        self, page: AutomationPage, selectors: SelectorMap, centre: Centre
    ) -> None:
        """Search for a centre by name, pick it and open its calendar."""
        await page.wait_for(selectors[SelectorStep.TEST_CENTRE_INPUT])
        await page.type(selectors[SelectorStep.TEST_CENTRE_INPUT], centre.name)
        await page.click_and_wait(selectors[SelectorStep.FIND_CENTRE_BUTTON])

        radio = selectors.centre_radio(centre.id)
        await page.wait_for(radio)
        await page.click(radio)
        await page.click_and_wait(selectors[SelectorStep.CONTINUE_TO_CALENDAR_BUTTON])

    async def back_to_search(self, page: AutomationPage) -> None:
        """Return from a calendar to the centre search (results page, then search)."""
        await page.go_back()
        await page.go_back()

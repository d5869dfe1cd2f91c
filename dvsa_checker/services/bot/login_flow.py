"""Getting an authenticated page: session restore first, full login otherwise."""

import re
from typing import Optional

from loguru import logger

from ...constants import Timeouts
from ...core.config.config_models import MonitorSettings
from ...core.events import EventBus
from ...core.exceptions import (
    ChallengeUnresolvedError,
    InvalidCredentialsError,
    NavigationTimeoutError,
)
from ...selector.selector_map import SelectorStep
from ...selector.site_config import SiteConfig
from ..browser.surface import AutomationPage
from ..session.session_manager import SessionManager
from .challenge_resolver import ChallengeResolver

_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


class LoginFlow:
    """Authenticates a page against the booking site."""

    def __init__(
        self,
        session_manager: SessionManager,
        challenge_resolver: ChallengeResolver,
        events: Optional[EventBus] = None,
    ):
        self.session_manager = session_manager
        self.challenge_resolver = challenge_resolver
        self.events = events or EventBus()

    async def ensure_logged_in(
        self, page: AutomationPage, settings: MonitorSettings, site: SiteConfig
    ) -> bool:
        """
        Make sure the page is authenticated.

        Returns:
            True if a saved session was reused, False if a full login ran

        Raises:
            InvalidCredentialsError: If the site rejected the credentials
            ChallengeUnresolvedError: If a challenge appeared and could not be solved
            NavigationTimeoutError: If the authenticated page never appeared
        """
        restored = await self.session_manager.try_restore(
            page, site.urls.logged_in_url, site.selectors[SelectorStep.CHANGE_TEST_DATE_LINK]
        )
        if restored:
            return True

        await self.login(page, settings, site)
        return False

    async def login(
        self, page: AutomationPage, settings: MonitorSettings, site: SiteConfig
    ) -> None:
        """Run the credential login and save the resulting session."""
        selectors = site.selectors
        self.events.log("Performing full login...")

        await page.navigate(site.urls.login_url)
        await page.type(selectors[SelectorStep.LICENCE_NUMBER_INPUT], settings.licence_number)
        await page.type(selectors[SelectorStep.BOOKING_REFERENCE_INPUT], settings.booking_reference)
        try:
            await page.click_and_wait(
                selectors[SelectorStep.CONTINUE_BUTTON], wait_until="domcontentloaded"
            )
        except NavigationTimeoutError as e:
            # The error summary and the challenge render without a navigation
            logger.debug(f"No navigation after submitting credentials: {e}")

        if await page.has_element(selectors[SelectorStep.ERROR_SUMMARY]):
            error_text = await page.inner_text(selectors[SelectorStep.ERROR_SUMMARY])
            raise InvalidCredentialsError(collapse_whitespace(error_text))

        if await page.has_element(selectors[SelectorStep.CAPTCHA_IFRAME]):
            self.events.log("CAPTCHA detected.")
            solved = await self.challenge_resolver.resolve(
                page, settings.captcha_api_key.get_secret_value(), selectors
            )
            if not solved:
                raise ChallengeUnresolvedError()

        await page.wait_for(selectors[SelectorStep.CHANGE_TEST_DATE_LINK], Timeouts.LOGIN_MARKER)
        self.events.log("Login successful.", "SUCCESS")
        await self.session_manager.save(page)

"""Solving the reCAPTCHA challenge shown on the login page."""

from typing import Callable, Optional

from loguru import logger

from ...constants import Timeouts
from ...core.events import EventBus
from ...selector.selector_map import SelectorMap, SelectorStep
from ..browser.surface import AutomationPage
from ..captcha_solver import CaptchaSolver

SolverFactory = Callable[[str], CaptchaSolver]

_INJECT_TOKEN_JS = """([selector, token]) => {
    const el = document.querySelector(selector);
    if (el) {
        el.value = token;
        el.textContent = token;
    }
}"""


class ChallengeResolver:
    """Gets a token from the solving service and submits it with the login form."""

    def __init__(
        self,
        events: Optional[EventBus] = None,
        solver_factory: SolverFactory = CaptchaSolver,
        timeout_seconds: int = Timeouts.CAPTCHA_SOLVE_SECONDS,
    ):
        """
        Initialize challenge resolver.

        Args:
            events: Event bus for user-facing log lines
            solver_factory: Builds a solver from an API key
            timeout_seconds: Upper bound for one solve
        """
        self.events = events or EventBus()
        self.solver_factory = solver_factory
        self.timeout_seconds = timeout_seconds

    async def resolve(self, page: AutomationPage, api_key: str, selectors: SelectorMap) -> bool:
        """
        Solve the challenge on the page and continue past it.

        Args:
            page: Page showing the challenge
            api_key: Solving service key, may be empty
            selectors: Selector map snapshot for this check

        Returns:
            True if the token was injected and the form submitted
        """
        if not api_key:
            self.events.log("CAPTCHA found, but no API key provided. Cannot solve.", "ERROR")
            return False

        try:
            site_key = await page.get_attribute(
                selectors[SelectorStep.CAPTCHA_CHALLENGE], "data-sitekey"
            )
            if not site_key:
                self.events.log("Could not find CAPTCHA sitekey on the page.", "ERROR")
                return False

            self.events.log("Solving CAPTCHA... (this may take a moment)")
            solver = self.solver_factory(api_key)
            token = await solver.solve_recaptcha(site_key, page.url, timeout=self.timeout_seconds)
            if not token:
                self.events.log("CAPTCHA solving failed: no token returned.", "ERROR")
                return False

            await page.evaluate(
                _INJECT_TOKEN_JS, [selectors[SelectorStep.CAPTCHA_RESPONSE_FIELD], token]
            )
            await page.click_and_wait(selectors[SelectorStep.CONTINUE_BUTTON])
        except Exception as e:
            self.events.log(f"CAPTCHA solving failed: {e}", "ERROR")
            logger.exception("Challenge resolution error")
            return False

        self.events.log("CAPTCHA solved and submitted.")
        return True

"""One check cycle: login, visit each centre, scan, dispatch."""

from typing import Callable, Optional

from loguru import logger

from ...core.config.config_models import MonitorSettings
from ...core.events import EventBus
from ...core.exceptions import (
    ChallengeUnresolvedError,
    CheckerError,
    InvalidCredentialsError,
)
from ...core.result import CheckOutcome
from ...selector.site_config import SiteConfig
from ..browser.surface import AutomationPage, AutomationSurface, open_page
from .centre_navigator import CentreNavigator
from .login_flow import LoginFlow
from .outcome_dispatcher import OutcomeDispatcher
from .slot_scanner import SlotScanner


class CheckOrchestrator:
    """
    Runs check cycles, at most one at a time.

    A cycle requested while another is running is dropped, not queued.
    """

    def __init__(
        self,
        surface: AutomationSurface,
        login_flow: LoginFlow,
        dispatcher: OutcomeDispatcher,
        is_monitoring: Callable[[], bool],
        stop_monitoring: Callable,
        navigator: Optional[CentreNavigator] = None,
        scanner: Optional[SlotScanner] = None,
        events: Optional[EventBus] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            surface: Automation surface pages are opened on
            login_flow: Restores or performs the login
            dispatcher: Acts on a found date
            is_monitoring: Whether the lifecycle controller is still monitoring
            stop_monitoring: Coroutine function that stops the lifecycle controller
            navigator: Centre search transitions
            scanner: Calendar scanner
            events: Event bus for user-facing log lines
        """
        self.surface = surface
        self.login_flow = login_flow
        self.dispatcher = dispatcher
        self.is_monitoring = is_monitoring
        self.stop_monitoring = stop_monitoring
        self.navigator = navigator or CentreNavigator()
        self.scanner = scanner or SlotScanner()
        self.events = events or EventBus()
        self._is_checking = False

    @property
    def is_checking(self) -> bool:
        return self._is_checking

    async def run(
        self, settings: MonitorSettings, site: Optional[SiteConfig], manual: bool = False
    ) -> CheckOutcome:
        """
        Run one check cycle.

        Args:
            settings: Monitoring request snapshot
            site: Site config snapshot; None means configuration never loaded
            manual: Manual checks keep visiting centres after monitoring stops

        Returns:
            The cycle's outcome (skipped if another cycle was running)
        """
        if self._is_checking:
            self.events.log("A check is already in progress. Skipping new check.")
            return CheckOutcome.skipped_check()

        self._is_checking = True
        try:
            if site is None:
                self.events.log("Configuration not loaded. Cannot run check.", "ERROR")
                return CheckOutcome.not_found("Configuration not loaded")
            return await self._run_cycle(settings, site, manual)
        finally:
            self._is_checking = False

    async def _run_cycle(
        self, settings: MonitorSettings, site: SiteConfig, manual: bool
    ) -> CheckOutcome:
        self.events.log("Starting a new check...")
        stop_after_cycle = False
        try:
            async with open_page(self.surface) as page:
                return await self._check_centres(page, settings, site, manual)
        except InvalidCredentialsError as e:
            self.events.log(
                f'Login Failed: "{e.site_message}". Please check your credentials.', "ERROR"
            )
            stop_after_cycle = True
            return CheckOutcome.not_found(e.message)
        except ChallengeUnresolvedError as e:
            self.events.log(f"An error occurred during check: {e.message}", "ERROR")
            return CheckOutcome.not_found(e.message)
        except CheckerError as e:
            self.events.log(f"An error occurred during check: {e.message}", "ERROR")
            logger.debug(f"Check error details: {e.to_dict()}")
            return CheckOutcome.not_found(e.message)
        except Exception as e:
            self.events.log(f"An error occurred during check: {e}", "ERROR")
            logger.exception("Unexpected error during check")
            return CheckOutcome.not_found(str(e))
        finally:
            if stop_after_cycle:
                await self.stop_monitoring()
            self.events.check_complete()

    async def _check_centres(
        self,
        page: AutomationPage,
        settings: MonitorSettings,
        site: SiteConfig,
        manual: bool,
    ) -> CheckOutcome:
        selectors = site.selectors
        await self.login_flow.ensure_logged_in(page, settings, site)
        await self.navigator.open_centre_search(page, selectors)

        centres = settings.selected_centres
        total = len(centres)
        for index, centre in enumerate(centres, start=1):
            if not manual and not self.is_monitoring():
                self.events.log("Monitoring stopped. Ending check early.")
                break

            self.events.check_progress(index, total, centre.name)
            self.events.log(f"Checking centre: {centre.name}")
            await self.navigator.select_centre(page, selectors, centre)

            found = await self.scanner.find_earlier_date(
                page, selectors, settings.alert_before_date
            )
            if found is not None:
                outcome = CheckOutcome.found_at(centre.name, found)
                self.events.log(outcome.message or "", "SUCCESS")
                await self.dispatcher.dispatch(page, outcome, settings, site)
                return outcome

            await self.navigator.back_to_search(page)

        self.events.log("Check complete. No suitable dates found this time.")
        return CheckOutcome.not_found()

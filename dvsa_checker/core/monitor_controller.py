"""
Lifecycle controller for slot monitoring.

Owns the Idle/Monitoring state, the repeating timer and the check tasks it
spawns. All checks, timer-driven or manual, go through ``run_check``.
"""

import asyncio
from typing import Callable, Optional, Set

from loguru import logger

from ..constants import Timeouts
from ..selector.provider import SiteConfigProvider
from ..selector.site_config import SiteConfig
from ..services.bot.booking_flow import BookingFlow
from ..services.bot.challenge_resolver import ChallengeResolver, SolverFactory
from ..services.bot.check_orchestrator import CheckOrchestrator
from ..services.bot.login_flow import LoginFlow
from ..services.bot.outcome_dispatcher import OutcomeDispatcher
from ..services.bot.slot_scanner import SlotScanner
from ..services.browser.surface import AutomationSurface
from ..services.captcha_solver import CaptchaSolver
from ..services.notification.notification_service import NotificationService
from ..services.scheduling.repeating_timer import RepeatingTimer
from ..services.session.cookie_store import FileCookieStore
from ..services.session.session_manager import SessionManager
from .config.config_models import AppConfig, MonitorSettings
from .enums import MonitorState, NotificationUrgency
from .events import EventBus
from .exceptions import SettingsValidationError
from .result import CheckOutcome


class MonitorController:
    """Starts, stops and triggers slot checks for one user."""

    def __init__(
        self,
        surface: AutomationSurface,
        notifier: NotificationService,
        events: Optional[EventBus] = None,
        session_manager: Optional[SessionManager] = None,
        solver_factory: SolverFactory = CaptchaSolver,
        site_provider: Optional[SiteConfigProvider] = None,
        scanner: Optional[SlotScanner] = None,
        captcha_timeout_seconds: int = Timeouts.CAPTCHA_SOLVE_SECONDS,
        timer_factory: Callable[..., RepeatingTimer] = RepeatingTimer,
    ):
        """
        Wire the check pipeline.

        Args:
            surface: Automation surface (browser)
            notifier: Notification boundary
            events: Event bus for logs and progress
            session_manager: Saved-session handling (default: cookie file in data/)
            solver_factory: Builds a challenge solver from an API key
            site_provider: Source of the current site config when none is passed in
            scanner: Calendar scanner
            captcha_timeout_seconds: Upper bound for one challenge solve
            timer_factory: Builds the repeating timer (tests)
        """
        self.surface = surface
        self.notifier = notifier
        self.events = events or EventBus()
        self.session_manager = session_manager or SessionManager(FileCookieStore(), self.events)
        self.site_provider = site_provider
        self._timer_factory = timer_factory

        resolver = ChallengeResolver(self.events, solver_factory, captcha_timeout_seconds)
        login_flow = LoginFlow(self.session_manager, resolver, self.events)
        dispatcher = OutcomeDispatcher(
            notifier, BookingFlow(notifier, self.events), self.stop, self.events
        )
        self.orchestrator = CheckOrchestrator(
            surface,
            login_flow,
            dispatcher,
            is_monitoring=lambda: self.is_monitoring,
            stop_monitoring=self.stop,
            scanner=scanner,
            events=self.events,
        )

        self._state = MonitorState.IDLE
        self._timer: Optional[RepeatingTimer] = None
        self._settings: Optional[MonitorSettings] = None
        self._config: Optional[SiteConfig] = None
        self._tasks: Set[asyncio.Task] = set()

    @classmethod
    def from_config(
        cls, config: AppConfig, events: Optional[EventBus] = None
    ) -> "MonitorController":
        """Build a controller with the Playwright surface and configured services."""
        from ..services.browser.playwright_surface import PlaywrightSurface

        events = events or EventBus()
        store = FileCookieStore(
            config.session.cookie_file, config.session.encryption_key.get_secret_value()
        )
        return cls(
            surface=PlaywrightSurface(config.browser),
            notifier=NotificationService(config.notifications),
            events=events,
            session_manager=SessionManager(store, events),
            site_provider=SiteConfigProvider(config.site),
            captcha_timeout_seconds=config.captcha.timeout_seconds,
        )

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def is_monitoring(self) -> bool:
        return self._state == MonitorState.MONITORING

    @property
    def is_checking(self) -> bool:
        return self.orchestrator.is_checking

    def _resolve_config(self, config: Optional[SiteConfig]) -> Optional[SiteConfig]:
        if config is not None:
            return config
        if self._config is not None:
            return self._config
        if self.site_provider is not None:
            return self.site_provider.current
        return None

    async def start(self, settings: MonitorSettings, config: Optional[SiteConfig] = None) -> bool:
        """
        Start monitoring: check now, then every ``check_interval`` minutes.

        Args:
            settings: Monitoring request
            config: Site config to pin for this run (default: provider's current)

        Returns:
            False if already monitoring or the settings are insufficient
        """
        if self.is_monitoring:
            self.events.log("Monitoring is already running.", "WARNING")
            return False

        try:
            settings.validate_for_start()
        except SettingsValidationError as e:
            self.events.log(f"Error: {e.message}", "ERROR")
            return False

        self._settings = settings
        self._config = config
        self._state = MonitorState.MONITORING
        self.events.monitoring_state_changed(True)
        self.events.log("Monitoring started.")

        self._spawn_check()
        self._timer = self._timer_factory(
            settings.check_interval * 60, self._spawn_check, name="dvsa_monitor_timer"
        )
        self._timer.start()
        return True

    async def stop(self) -> bool:
        """
        Stop monitoring and close the browser.

        In-flight checks are not cancelled; they end at their next browser call.

        Returns:
            False if not monitoring
        """
        if not self.is_monitoring:
            return False

        self._state = MonitorState.IDLE
        self.events.monitoring_state_changed(False)
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        if self.surface.is_connected():
            try:
                await self.surface.close()
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")

        self.events.log("Monitoring stopped.")
        return True

    def _spawn_check(self) -> None:
        task = asyncio.create_task(self.run_check(), name="dvsa_check_cycle")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def run_check(
        self,
        settings: Optional[MonitorSettings] = None,
        config: Optional[SiteConfig] = None,
        manual: bool = False,
    ) -> CheckOutcome:
        """
        Run one check cycle with the given or stored settings and config.

        Returns:
            The cycle's outcome
        """
        settings = settings or self._settings
        if settings is None:
            self.events.log("No settings available. Cannot run check.", "ERROR")
            return CheckOutcome.not_found("No settings available")
        return await self.orchestrator.run(settings, self._resolve_config(config), manual=manual)

    async def check_now(
        self, settings: Optional[MonitorSettings] = None, config: Optional[SiteConfig] = None
    ) -> CheckOutcome:
        """Manual trigger; notifies when a slot is found."""
        outcome = await self.run_check(settings, config, manual=True)
        if outcome.found:
            await self.notifier.show(
                "Manual Check Found a Test!", outcome.message or "", NotificationUrgency.NORMAL
            )
        return outcome

    async def shutdown(self, timeout: float = Timeouts.SHUTDOWN_SECONDS) -> None:
        """Stop monitoring and wait for spawned checks to finish."""
        await self.stop()

        if self._tasks:
            logger.info(f"Waiting for {len(self._tasks)} check(s) to finish...")
            _, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
            for task in pending:
                task.cancel()
            if pending:
                logger.warning(f"Cancelled {len(pending)} check(s) after {timeout}s")

        if self.surface.is_connected():
            await self.surface.close()

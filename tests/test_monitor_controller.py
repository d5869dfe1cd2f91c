"""Lifecycle controller tests."""

import asyncio

import pytest

from dvsa_checker.core.enums import MonitorState
from dvsa_checker.core.monitor_controller import MonitorController
from dvsa_checker.services.session.session_manager import SessionManager


class FakeTimer:
    """Records arming instead of sleeping."""

    instances = []

    def __init__(self, interval_seconds, callback, name="timer"):
        self.interval_seconds = interval_seconds
        self.callback = callback
        self.name = name
        self.started = False
        self.cancelled = False
        FakeTimer.instances.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.callback()


@pytest.fixture(autouse=True)
def reset_timers():
    FakeTimer.instances = []


@pytest.fixture
def controller(surface, notifier, events, cookie_store):
    return MonitorController(
        surface,
        notifier,
        events=events,
        session_manager=SessionManager(cookie_store, events),
        timer_factory=FakeTimer,
    )


async def drain(controller):
    while controller._tasks:
        await asyncio.gather(*controller._tasks)


class TestStart:
    """Starting monitoring."""

    @pytest.mark.asyncio
    async def test_missing_credentials_rejected(
        self, controller, make_settings, site_config, recorder, surface
    ):
        started = await controller.start(make_settings(booking_reference=""), site_config)

        assert started is False
        assert controller.state is MonitorState.IDLE
        assert "Error: Licence Number and Booking Reference are required." in recorder.logs
        assert recorder.states == []
        assert FakeTimer.instances == []
        assert surface.connect_calls == 0

    @pytest.mark.asyncio
    async def test_no_centres_rejected(self, controller, make_settings, site_config, recorder):
        started = await controller.start(make_settings(selected_centres=[]), site_config)

        assert started is False
        assert "Error: Please select at least one test centre to monitor." in recorder.logs

    @pytest.mark.asyncio
    async def test_starts_checks_immediately_and_arms_timer(
        self, controller, make_settings, site_config, recorder, surface
    ):
        started = await controller.start(make_settings(check_interval=10), site_config)

        assert started is True
        assert controller.is_monitoring
        assert recorder.states == [True]
        assert "Monitoring started." in recorder.logs
        (timer,) = FakeTimer.instances
        assert timer.started
        assert timer.interval_seconds == 600

        await drain(controller)
        assert surface.pages_opened == 1
        assert recorder.completed == 1

    @pytest.mark.asyncio
    async def test_already_running(self, controller, settings, site_config, recorder):
        await controller.start(settings, site_config)

        assert await controller.start(settings, site_config) is False
        assert "Monitoring is already running." in recorder.logs
        assert len(FakeTimer.instances) == 1
        await controller.shutdown()

    @pytest.mark.asyncio
    async def test_timer_firing_spawns_check(self, controller, settings, site_config, surface):
        await controller.start(settings, site_config)
        await drain(controller)

        FakeTimer.instances[0].fire()
        await drain(controller)

        assert surface.pages_opened == 2


class TestStop:
    """Stopping monitoring."""

    @pytest.mark.asyncio
    async def test_stop_when_idle(self, controller, recorder):
        assert await controller.stop() is False
        assert recorder.states == []

    @pytest.mark.asyncio
    async def test_stop_cancels_timer_and_closes_browser(
        self, controller, settings, site_config, surface, recorder
    ):
        await controller.start(settings, site_config)
        await drain(controller)
        surface.connected = True

        assert await controller.stop() is True

        assert controller.state is MonitorState.IDLE
        assert FakeTimer.instances[0].cancelled
        assert surface.close_calls == 1
        assert recorder.states == [True, False]
        assert recorder.logs[-1] == "Monitoring stopped."

    @pytest.mark.asyncio
    async def test_auto_book_ends_monitoring(
        self, controller, make_settings, site_config, page, selectors, centres, recorder
    ):
        page.calendars[selectors.centre_radio(centres[0].id)] = [["2026-11-03"]]

        await controller.start(make_settings(booking_mode="auto_book"), site_config)
        await drain(controller)

        assert controller.state is MonitorState.IDLE
        assert recorder.states == [True, False]
        assert FakeTimer.instances[0].cancelled


class TestManualCheck:
    """check_now and run_check."""

    @pytest.mark.asyncio
    async def test_check_now_notifies_when_found(
        self, controller, settings, site_config, page, selectors, centres, notifier
    ):
        page.calendars[selectors.centre_radio(centres[1].id)] = [["2026-11-03"]]

        outcome = await controller.check_now(settings, site_config)

        assert outcome.found is True
        assert not controller.is_monitoring
        assert notifier.show.await_args_list[-1].args[0] == "Manual Check Found a Test!"

    @pytest.mark.asyncio
    async def test_check_now_nothing_found(self, controller, settings, site_config, notifier):
        outcome = await controller.check_now(settings, site_config)

        assert outcome.found is False
        notifier.show.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_run_check_without_settings(self, controller, recorder, surface):
        outcome = await controller.run_check()

        assert outcome.found is False
        assert "No settings available. Cannot run check." in recorder.logs
        assert surface.pages_opened == 0

    @pytest.mark.asyncio
    async def test_run_check_without_config(self, controller, settings, recorder):
        outcome = await controller.run_check(settings)

        assert outcome.found is False
        assert "Configuration not loaded. Cannot run check." in recorder.logs


class TestShutdown:
    @pytest.mark.asyncio
    async def test_shutdown_waits_for_checks(self, controller, settings, site_config, surface):
        await controller.start(settings, site_config)

        await controller.shutdown(timeout=5)

        assert controller._tasks == set()
        assert controller.state is MonitorState.IDLE
        assert not surface.connected

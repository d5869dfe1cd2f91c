#!/usr/bin/env python3
"""
DVSA Checker - automated monitoring for earlier driving test slots.

Main entry point for the application.
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import Optional

from dvsa_checker.constants import Timeouts
from dvsa_checker.core.config.config_loader import load_config, load_settings
from dvsa_checker.core.config.config_models import AppConfig, MonitorSettings
from dvsa_checker.core.events import EventBus, EventListener
from dvsa_checker.core.exceptions import ConfigurationError
from dvsa_checker.core.logger import setup_logging
from dvsa_checker.core.monitor_controller import MonitorController


class _MonitoringStoppedListener(EventListener):
    """Sets an asyncio event when monitoring ends for any reason."""

    def __init__(self, stopped: asyncio.Event):
        self.stopped = stopped

    def on_monitoring_state_changed(self, active: bool) -> None:
        if not active:
            self.stopped.set()


def setup_signal_handlers(shutdown_event: asyncio.Event) -> None:
    """Set the shutdown event on SIGINT/SIGTERM; a second signal exits immediately."""
    logger = logging.getLogger(__name__)
    loop = asyncio.get_running_loop()

    def handle_signal(signum: int) -> None:
        if not shutdown_event.is_set():
            logger.info(f"Received signal {signum}, initiating graceful shutdown...")
            shutdown_event.set()
        else:
            logger.warning("Second signal received, forcing exit")
            sys.exit(1)

    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, handle_signal, signum)
        except NotImplementedError:
            # Windows event loops have no add_signal_handler
            signal.signal(signum, lambda s, _frame: loop.call_soon_threadsafe(handle_signal, s))


async def run_once(controller: MonitorController, settings: MonitorSettings) -> int:
    """Run a single manual check and report the outcome."""
    logger = logging.getLogger(__name__)
    try:
        outcome = await controller.check_now(settings)
    finally:
        await controller.shutdown()

    if outcome.found:
        logger.info(outcome.message)
    else:
        logger.info("No earlier test found")
    return 0


async def run_monitor(
    controller: MonitorController, settings: MonitorSettings, shutdown_event: asyncio.Event
) -> int:
    """Monitor until a signal arrives or monitoring stops itself."""
    logger = logging.getLogger(__name__)
    stopped = asyncio.Event()
    controller.events.subscribe(_MonitoringStoppedListener(stopped))

    if not await controller.start(settings):
        return 1

    waiters = [
        asyncio.create_task(shutdown_event.wait(), name="shutdown_wait"),
        asyncio.create_task(stopped.wait(), name="monitoring_stopped_wait"),
    ]
    try:
        await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for waiter in waiters:
            waiter.cancel()
        logger.info("Shutting down...")
        await controller.shutdown(timeout=Timeouts.SHUTDOWN_SECONDS)
    return 0


async def run(config: AppConfig, settings: MonitorSettings, once: bool = False) -> int:
    """
    Build the controller, refresh the selector map and run.

    Args:
        config: Application configuration
        settings: Monitoring request
        once: Run a single check instead of monitoring

    Returns:
        Process exit code
    """
    shutdown_event = asyncio.Event()
    setup_signal_handlers(shutdown_event)

    controller = MonitorController.from_config(config, events=EventBus())
    if controller.site_provider is not None:
        await controller.site_provider.refresh()

    if once:
        return await run_once(controller, settings)
    return await run_monitor(controller, settings, shutdown_event)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="DVSA Checker - earlier driving test finder")
    parser.add_argument("--config", default="config/config.yaml", help="Path to configuration file")
    parser.add_argument(
        "--settings", default="config/settings.yaml", help="Path to monitoring settings file"
    )
    parser.add_argument(
        "--once", action="store_true", help="Run a single check instead of monitoring"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (overrides config.yaml)",
    )

    args = parser.parse_args()
    logger = logging.getLogger(__name__)

    try:
        config = load_config(args.config)
        setup_logging(
            args.log_level or config.logging.level,
            json_format=config.logging.json_format,
            logs_dir=config.logging.logs_dir,
        )
        settings = load_settings(args.settings)
    except ConfigurationError as e:
        setup_logging(args.log_level or "INFO")
        logger.error(f"Configuration error: {e.message}")
        logger.info(
            "Please copy config/settings.example.yaml to config/settings.yaml and configure it"
        )
        sys.exit(1)

    exit_code: Optional[int] = None
    try:
        exit_code = asyncio.run(run(config, settings, once=args.once))
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    sys.exit(exit_code or 0)


if __name__ == "__main__":
    main()

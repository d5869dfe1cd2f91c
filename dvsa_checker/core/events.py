"""Progress and log events emitted by the checker core.

The core never renders anything itself. Every event is written to loguru and
then forwarded to the subscribed listeners (a UI, a websocket relay, tests).
"""

from typing import List, Optional

from loguru import logger


class EventListener:
    """Consumer of checker events. Override the hooks you need."""

    def on_log(self, message: str, level: str) -> None:
        pass

    def on_monitoring_state_changed(self, active: bool) -> None:
        pass

    def on_check_progress(self, current: int, total: int, name: str) -> None:
        pass

    def on_check_complete(self) -> None:
        pass


class EventBus:
    """Fan out checker events to listeners; a failing listener never breaks a check."""

    def __init__(self, listeners: Optional[List[EventListener]] = None):
        self._listeners: List[EventListener] = list(listeners or [])

    def subscribe(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _dispatch(self, hook: str, *args) -> None:
        for listener in list(self._listeners):
            try:
                getattr(listener, hook)(*args)
            except Exception as e:
                logger.warning(f"Event listener {listener!r} failed in {hook}: {e}")

    def log(self, message: str, level: str = "INFO") -> None:
        """Write a user-facing log line."""
        logger.opt(depth=1).log(level, message)
        self._dispatch("on_log", message, level)

    def monitoring_state_changed(self, active: bool) -> None:
        logger.debug(f"Monitoring state changed: active={active}")
        self._dispatch("on_monitoring_state_changed", active)

    def check_progress(self, current: int, total: int, name: str) -> None:
        logger.debug(f"Check progress {current}/{total}: {name}")
        self._dispatch("on_check_progress", current, total, name)

    def check_complete(self) -> None:
        logger.debug("Check complete")
        self._dispatch("on_check_complete")


class RecordingListener(EventListener):
    """Keeps every event in memory; handy for a CLI summary and for tests."""

    def __init__(self):
        self.logs: List[str] = []
        self.states: List[bool] = []
        self.progress: List[tuple] = []
        self.completed = 0

    def on_log(self, message: str, level: str) -> None:
        self.logs.append(message)

    def on_monitoring_state_changed(self, active: bool) -> None:
        self.states.append(active)

    def on_check_progress(self, current: int, total: int, name: str) -> None:
        self.progress.append((current, total, name))

    def on_check_complete(self) -> None:
        self.completed += 1

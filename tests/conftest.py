"""Pytest configuration and common fixtures."""

import sys
import warnings
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple
from unittest.mock import AsyncMock, MagicMock

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from dvsa_checker.core.config.config_models import Centre, MonitorSettings
from dvsa_checker.core.config.settings import reset_env_settings
from dvsa_checker.core.events import EventBus, RecordingListener
from dvsa_checker.core.exceptions import NavigationTimeoutError
from dvsa_checker.selector.defaults import fallback_site_config
from dvsa_checker.selector.selector_map import SelectorStep
from dvsa_checker.selector.site_config import SiteConfig
from dvsa_checker.services.notification.notification_service import NotificationService
from dvsa_checker.services.session.cookie_store import CookieStore


def pytest_configure(config):
    """Configure pytest environment before tests run."""
    warnings.filterwarnings("ignore", message="coroutine.*was never awaited")


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Keep DVSA_* variables from the developer's shell out of tests."""
    for name in (
        "DVSA_ENV",
        "DVSA_LOG_LEVEL",
        "DVSA_CAPTCHA_API_KEY",
        "DVSA_COOKIE_ENCRYPTION_KEY",
        "DVSA_TELEGRAM_BOT_TOKEN",
        "DVSA_TELEGRAM_CHAT_ID",
        "DVSA_REMOTE_CONFIG_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DVSA_ENV", "testing")
    reset_env_settings()
    yield
    reset_env_settings()


# Scripted automation surface


class FakeElement:
    """Calendar date anchor."""

    def __init__(self, page: "FakePage", attributes: Dict[str, Optional[str]]):
        self._page = page
        self._attributes = attributes

    async def get_attribute(self, name: str) -> Optional[str]:
        return self._attributes.get(name)

    async def click(self) -> None:
        self._page.actions.append(("click_date", self._attributes.get("data-date")))


class FakePage:
    """
    In-memory page that records every call.

    Behaviour is scripted through attributes:
      present: selectors for which has_element() is True
      texts: selector -> inner text
      attributes: (selector, name) -> attribute value
      calendars: radio selector -> list of calendar pages (each a list of data-date values);
          clicking the radio makes that calendar current
      errors: selector -> exception raised by wait_for/click/click_and_wait on it
    """

    def __init__(self, selectors=None):
        self.selectors = selectors or fallback_site_config().selectors
        self.url = "about:blank"
        self.actions: List[Tuple[Any, ...]] = []
        self.present: Set[str] = set()
        self.texts: Dict[str, str] = {}
        self.attributes: Dict[Tuple[str, str], str] = {}
        self.calendars: Dict[str, List[List[Optional[str]]]] = {}
        self.errors: Dict[str, Exception] = {}
        self.cookies: List[Dict[str, Any]] = []
        self.closed = False
        self._wait_timeouts: Dict[str, int] = {}
        self._navigation_timeouts: Set[str] = set()
        self._calendar: List[List[Optional[str]]] = []
        self._calendar_page = 0

    # Scripting helpers

    def fail_wait(self, selector: str, times: int = 1) -> None:
        """Make the next ``times`` waits on selector time out."""
        self._wait_timeouts[selector] = times

    def no_navigation_after(self, selector: str) -> None:
        """click_and_wait on selector clicks, then times out waiting for navigation."""
        self._navigation_timeouts.add(selector)

    def actions_named(self, name: str) -> List[Tuple[Any, ...]]:
        return [action for action in self.actions if action[0] == name]

    def _raise_scripted(self, selector: str) -> None:
        if selector in self.errors:
            raise self.errors[selector]

    # AutomationPage

    def is_closed(self) -> bool:
        return self.closed

    async def navigate(self, url: str, wait_until: str = "networkidle") -> None:
        self.actions.append(("navigate", url))
        self.url = url

    async def wait_for(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        self.actions.append(("wait_for", selector, timeout_ms))
        self._raise_scripted(selector)
        remaining = self._wait_timeouts.get(selector, 0)
        if remaining:
            self._wait_timeouts[selector] = remaining - 1
            raise NavigationTimeoutError("Timed out", selector=selector, timeout_ms=timeout_ms)

    async def click(self, selector: str) -> None:
        self.actions.append(("click", selector))
        self._raise_scripted(selector)
        if selector in self.calendars:
            self._calendar = self.calendars[selector]
            self._calendar_page = 0
        if selector == self.selectors[SelectorStep.CALENDAR_NEXT_MONTH_BUTTON]:
            self._calendar_page += 1

    async def click_and_wait(
        self, selector: str, wait_until: str = "networkidle", timeout_ms: Optional[int] = None
    ) -> None:
        self.actions.append(("click_and_wait", selector))
        self._raise_scripted(selector)
        if selector in self._navigation_timeouts:
            raise NavigationTimeoutError("No navigation", selector=selector)

    async def type(self, selector: str, text: str) -> None:
        self.actions.append(("type", selector, text))

    async def has_element(self, selector: str) -> bool:
        return selector in self.present

    async def inner_text(self, selector: str) -> str:
        return self.texts.get(selector, "")

    async def text_content(self, selector: str) -> Optional[str]:
        if selector == self.selectors[SelectorStep.CALENDAR_MONTH_YEAR_HEADER]:
            return f"  Month {self._calendar_page}  "
        return self.texts.get(selector)

    async def get_attribute(self, selector: str, name: str) -> Optional[str]:
        return self.attributes.get((selector, name))

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        self.actions.append(("evaluate", arg))
        return None

    async def query_all(self, selector: str) -> List[FakeElement]:
        self.actions.append(("query_all", selector))
        if self._calendar_page >= len(self._calendar):
            return []
        return [
            FakeElement(self, {"data-date": value}) for value in self._calendar[self._calendar_page]
        ]

    async def wait_for_text_change(
        self, selector: str, previous: str, timeout_ms: Optional[int] = None
    ) -> None:
        self.actions.append(("wait_for_text_change", selector, previous, timeout_ms))

    async def go_back(self) -> None:
        self.actions.append(("go_back",))

    async def get_cookies(self) -> List[Dict[str, Any]]:
        return list(self.cookies)

    async def set_cookies(self, cookies: List[Dict[str, Any]]) -> None:
        self.actions.append(("set_cookies", len(cookies)))
        self.cookies = list(cookies)

    async def close(self) -> None:
        self.actions.append(("close",))
        self.closed = True


class FakeSurface:
    """AutomationSurface handing out a single scripted page."""

    def __init__(self, page: Optional[FakePage] = None):
        self.page = page or FakePage()
        self.connected = False
        self.connect_calls = 0
        self.close_calls = 0
        self.pages_opened = 0

    async def connect(self) -> None:
        self.connect_calls += 1
        self.connected = True

    def is_connected(self) -> bool:
        return self.connected

    async def new_page(self) -> FakePage:
        self.pages_opened += 1
        self.page.closed = False
        return self.page

    async def close(self) -> None:
        self.close_calls += 1
        self.connected = False


class MemoryCookieStore(CookieStore):
    """CookieStore kept in memory."""

    def __init__(self, cookies: Optional[List[Dict[str, Any]]] = None):
        self.cookies = cookies
        self.cleared = 0

    def load(self) -> Optional[List[Dict[str, Any]]]:
        return self.cookies or None

    def save(self, cookies: List[Dict[str, Any]]) -> bool:
        self.cookies = list(cookies)
        return True

    def clear(self) -> None:
        self.cookies = None
        self.cleared += 1


# Fixtures


@pytest.fixture
def site_config() -> SiteConfig:
    """Bundled site config."""
    return fallback_site_config()


@pytest.fixture
def selectors(site_config):
    return site_config.selectors


@pytest.fixture
def page(selectors) -> FakePage:
    return FakePage(selectors)


@pytest.fixture
def surface(page) -> FakeSurface:
    return FakeSurface(page)


@pytest.fixture
def recorder() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def events(recorder) -> EventBus:
    return EventBus([recorder])


@pytest.fixture
def notifier() -> MagicMock:
    """Notification service double; show() always succeeds."""
    mock = MagicMock(spec=NotificationService)
    mock.show = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def cookie_store() -> MemoryCookieStore:
    return MemoryCookieStore()


@pytest.fixture
def centres() -> List[Centre]:
    return [
        Centre(id="524629", name="London (Hendon)"),
        Centre(id="523820", name="London (Morden)"),
        Centre(id="528522", name="London (Barking)"),
    ]


@pytest.fixture
def make_settings(centres):
    """Factory for MonitorSettings with valid defaults."""

    def _make(**overrides: Any) -> MonitorSettings:
        values: Dict[str, Any] = {
            "licence_number": "MORGA657054SM9IJ",
            "booking_reference": "12345678",
            "captcha_api_key": "test-captcha-key",
            "selected_centres": centres,
            "check_interval": 5,
            "alert_before_date": date(2026, 12, 1),
            "booking_mode": "passive",
        }
        values.update(overrides)
        return MonitorSettings(**values)

    return _make


@pytest.fixture
def settings(make_settings) -> MonitorSettings:
    return make_settings()


@pytest.fixture
def make_cookie_store():
    """Factory for in-memory cookie stores, optionally pre-seeded."""
    return MemoryCookieStore

"""Playwright implementation of the automation surface."""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from loguru import logger
from playwright.async_api import Browser, BrowserContext, ElementHandle, Page, Playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from ...constants import Timeouts
from ...core.config.config_models import BrowserConfig
from ...core.exceptions import BrowserError, NavigationTimeoutError

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/135.0.0.0 Safari/537.36"
)


@contextmanager
def _translate_timeout(
    action: str, selector: Optional[str] = None, timeout_ms: Optional[int] = None
) -> Iterator[None]:
    try:
        yield
    except PlaywrightTimeoutError as e:
        raise NavigationTimeoutError(
            f"Timed out during {action}: {e}", selector=selector, timeout_ms=timeout_ms
        ) from e


class PlaywrightElement:
    """ElementRef backed by a Playwright element handle."""

    def __init__(self, handle: ElementHandle):
        self._handle = handle

    async def get_attribute(self, name: str) -> Optional[str]:
        return await self._handle.get_attribute(name)

    async def click(self) -> None:
        with _translate_timeout("element click"):
            await self._handle.click()


class PlaywrightPage:
    """AutomationPage backed by a Playwright page living in its own context."""

    def __init__(self, page: Page, context: BrowserContext, default_timeout_ms: int):
        self._page = page
        self._context = context
        self._default_timeout_ms = default_timeout_ms

    @property
    def url(self) -> str:
        return self._page.url

    def is_closed(self) -> bool:
        return self._page.is_closed()

    async def navigate(self, url: str, wait_until: str = "networkidle") -> None:
        with _translate_timeout(f"navigation to {url}", timeout_ms=self._default_timeout_ms):
            await self._page.goto(url, wait_until=wait_until)  # type: ignore[arg-type]

    async def wait_for(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        timeout = timeout_ms or Timeouts.SELECTOR_WAIT
        with _translate_timeout("wait for element", selector, timeout):
            await self._page.wait_for_selector(selector, timeout=timeout)

    async def click(self, selector: str) -> None:
        with _translate_timeout("click", selector):
            await self._page.click(selector)

    async def click_and_wait(
        self, selector: str, wait_until: str = "networkidle", timeout_ms: Optional[int] = None
    ) -> None:
        timeout = timeout_ms or self._default_timeout_ms
        with _translate_timeout("click and navigation", selector, timeout):
            async with self._page.expect_navigation(
                wait_until=wait_until, timeout=timeout  # type: ignore[arg-type]
            ):
                await self._page.click(selector)

    async def type(self, selector: str, text: str) -> None:
        with _translate_timeout("typing", selector):
            await self._page.fill(selector, text)

    async def has_element(self, selector: str) -> bool:
        return await self._page.query_selector(selector) is not None

    async def inner_text(self, selector: str) -> str:
        with _translate_timeout("reading text", selector):
            return await self._page.inner_text(selector)

    async def text_content(self, selector: str) -> Optional[str]:
        with _translate_timeout("reading text", selector):
            return await self._page.text_content(selector)

    async def get_attribute(self, selector: str, name: str) -> Optional[str]:
        with _translate_timeout("reading attribute", selector):
            return await self._page.get_attribute(selector, name)

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        return await self._page.evaluate(expression, arg)

    async def query_all(self, selector: str) -> List[PlaywrightElement]:
        handles = await self._page.query_selector_all(selector)
        return [PlaywrightElement(handle) for handle in handles]

    async def wait_for_text_change(
        self, selector: str, previous: str, timeout_ms: Optional[int] = None
    ) -> None:
        timeout = timeout_ms or Timeouts.SELECTOR_WAIT
        with _translate_timeout("wait for text change", selector, timeout):
            await self._page.wait_for_function(
                """([selector, previous]) => {
                    const el = document.querySelector(selector);
                    return el !== null && el.textContent.trim() !== previous;
                }""",
                arg=[selector, previous],
                timeout=timeout,
            )

    async def go_back(self) -> None:
        with _translate_timeout("history back"):
            await self._page.go_back(wait_until="networkidle")

    async def get_cookies(self) -> List[Dict[str, Any]]:
        return [dict(cookie) for cookie in await self._context.cookies()]

    async def set_cookies(self, cookies: List[Dict[str, Any]]) -> None:
        await self._context.add_cookies(cookies)  # type: ignore[arg-type]

    async def close(self) -> None:
        """Close the page and its context."""
        await self._context.close()


class PlaywrightSurface:
    """Lazily launched Chromium, reused across check cycles."""

    def __init__(self, config: Optional[BrowserConfig] = None):
        """
        Initialize the surface without launching anything.

        Args:
            config: Browser launch options
        """
        self.config = config or BrowserConfig()
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None

    def is_connected(self) -> bool:
        return self.browser is not None and self.browser.is_connected()

    async def connect(self) -> None:
        """Launch the browser with anti-automation flags."""
        if self.is_connected():
            logger.warning("Browser already started")
            return

        try:
            self.playwright = await async_playwright().start()
            launch_options: Dict[str, Any] = {
                "headless": self.config.headless,
                "args": ["--disable-blink-features=AutomationControlled"],
                "slow_mo": self.config.slow_mo_ms,
            }
            if self.config.channel:
                launch_options["channel"] = self.config.channel
            if self.config.executable_path:
                launch_options["executable_path"] = self.config.executable_path

            self.browser = await self.playwright.chromium.launch(**launch_options)
            logger.info("Browser started successfully")
        except Exception as e:
            # Clean up partial resources on error
            await self.close()
            raise BrowserError(f"Failed to launch browser: {e}") from e

    async def new_page(self) -> PlaywrightPage:
        """
        Open a page in a fresh context.

        Raises:
            BrowserError: If the browser is not running
        """
        if self.browser is None:
            raise BrowserError("Browser is not started. Call connect() first.")

        context = await self.browser.new_context(
            viewport={"width": 1920, "height": 1080},
            user_agent=self.config.user_agent or DEFAULT_USER_AGENT,
        )
        await context.add_init_script(
            """
            Object.defineProperty(navigator, 'webdriver', {
                get: () => undefined
            });
            """
        )
        page = await context.new_page()
        page.set_default_timeout(self.config.navigation_timeout_ms)
        return PlaywrightPage(page, context, self.config.navigation_timeout_ms)

    async def close(self) -> None:
        """Clean up browser resources."""
        if self.browser:
            await self.browser.close()
            self.browser = None
            logger.debug("Browser closed")

        if self.playwright:
            await self.playwright.stop()
            self.playwright = None

        logger.info("Browser resources cleaned up")

    async def __aenter__(self) -> "PlaywrightSurface":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

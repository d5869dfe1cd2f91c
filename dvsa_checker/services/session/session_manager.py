"""Reuse of a saved login session across check cycles."""

from typing import Optional

from loguru import logger

from ...constants import Timeouts
from ...core.events import EventBus
from ...core.exceptions import NavigationTimeoutError
from ..browser.surface import AutomationPage
from .cookie_store import CookieStore


class SessionManager:
    """Decides whether a saved session is still usable and owns its lifecycle."""

    def __init__(self, store: CookieStore, events: Optional[EventBus] = None):
        """
        Initialize session manager.

        Args:
            store: Where cookies are persisted
            events: Event bus for user-facing log lines
        """
        self.store = store
        self.events = events or EventBus()

    async def try_restore(
        self,
        page: AutomationPage,
        logged_in_url: str,
        marker: str,
        timeout_ms: int = Timeouts.SESSION_RESTORE_MARKER,
    ) -> bool:
        """
        Load saved cookies and confirm the authenticated page shows the marker.

        A saved session that the browser rejects, or that does not reach the
        marker in time, is discarded.

        Args:
            page: Page to restore into
            logged_in_url: Authenticated landing page
            marker: Locator present only when logged in
            timeout_ms: How long to wait for the marker

        Returns:
            True if the session was restored
        """
        cookies = self.store.load()
        if not cookies:
            return False

        self.events.log("Found saved session. Attempting to restore...")
        try:
            await page.set_cookies(cookies)
        except Exception as e:
            logger.warning(f"Saved session cookies were rejected: {e}")
            self.events.log("Session expired or invalid. Performing a full login.", "WARNING")
            self.clear()
            return False

        try:
            await page.navigate(logged_in_url)
            await page.wait_for(marker, timeout_ms)
        except NavigationTimeoutError as e:
            logger.debug(f"Session restore timed out: {e}")
            self.events.log("Session expired or invalid. Performing a full login.", "WARNING")
            self.clear()
            return False

        self.events.log("Session restored successfully.")
        return True

    async def save(self, page: AutomationPage) -> bool:
        """Persist the page's cookies. Failures are logged, never raised."""
        try:
            cookies = await page.get_cookies()
        except Exception as e:
            logger.warning(f"Could not read session cookies: {e}")
            return False

        if self.store.save(cookies):
            self.events.log("Session saved for future use.")
            return True
        return False

    def clear(self) -> None:
        self.store.clear()

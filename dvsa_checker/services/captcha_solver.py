"""2Captcha client used to answer the booking site's login reCAPTCHA."""

import asyncio
import atexit
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional

from loguru import logger

from ..constants import Timeouts


class CaptchaSolver:
    """Solves reCAPTCHA v2 widgets through 2Captcha on a worker thread."""

    _executor: Optional[ThreadPoolExecutor] = ThreadPoolExecutor(max_workers=2)

    def __init__(self, api_key: str, timeout_seconds: int = Timeouts.CAPTCHA_SOLVE_SECONDS):
        """
        Initialize 2Captcha solver.

        Args:
            api_key: 2Captcha API key (required)
            timeout_seconds: Default upper bound for one solve

        Raises:
            ValueError: If api_key is empty or missing
        """
        if not api_key:
            raise ValueError("2Captcha API key is required.")

        self._api_key = api_key
        self.timeout_seconds = timeout_seconds
        logger.info("CaptchaSolver initialized with 2Captcha")

    def __repr__(self) -> str:
        """Return repr with masked API key."""
        return "CaptchaSolver(api_key='***')"

    def _get_executor(self) -> Optional[ThreadPoolExecutor]:
        """Shared pool, or None to fall back to the loop's default executor."""
        executor = self._executor
        if executor is None or getattr(executor, "_shutdown", False):
            return None
        return executor

    async def solve_recaptcha(
        self, site_key: str, url: str, timeout: Optional[int] = None
    ) -> Optional[str]:
        """
        Request a token for the widget on ``url``.

        Args:
            site_key: Widget site key read from the challenge iframe
            url: Page the widget is embedded in
            timeout: Seconds to wait for 2Captcha (defaults to timeout_seconds)

        Returns:
            The response token, or None if 2Captcha failed or timed out
        """
        timeout = timeout or self.timeout_seconds
        logger.info(f"Requesting reCAPTCHA token for {url}")

        try:
            from twocaptcha import TwoCaptcha

            solver = TwoCaptcha(self._api_key)

            loop = asyncio.get_running_loop()
            executor = self._get_executor()
            try:
                result: Any = await asyncio.wait_for(
                    loop.run_in_executor(
                        executor, lambda: solver.recaptcha(sitekey=site_key, url=url)
                    ),
                    timeout=timeout,
                )
            except asyncio.TimeoutError:
                logger.error(f"reCAPTCHA solving timeout after {timeout}s")
                return None

            if result and isinstance(result, dict) and "code" in result:
                logger.info("2Captcha solved successfully")
                return str(result["code"])

            logger.warning(f"2Captcha returned unexpected result: {result}")
            return None

        except Exception as e:
            logger.error(f"2Captcha error: {e}")
            return None

    @classmethod
    def shutdown(cls, wait: bool = True) -> None:
        """
        Shutdown the thread pool executor.

        Args:
            wait: If True, wait for pending tasks to complete before shutdown
        """
        if cls._executor is None:
            logger.debug("Executor already shut down or not initialized")
            return

        try:
            cls._executor.shutdown(wait=wait)
            logger.info(f"CaptchaSolver executor shutdown (wait={wait})")
        except RuntimeError:
            logger.debug("Executor shutdown already in progress")
        finally:
            cls._executor = None


# In-flight 2Captcha requests may be interrupted at exit; wait=False keeps exit from hanging.
atexit.register(CaptchaSolver.shutdown, wait=False)

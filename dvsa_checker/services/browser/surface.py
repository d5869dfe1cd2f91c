"""Driver-neutral automation surface used by the checker core.

The core only talks to these protocols. Implementations translate their own
timeout errors into ``NavigationTimeoutError``.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Protocol, runtime_checkable

from loguru import logger


@runtime_checkable
class ElementRef(Protocol):
    """A handle to one element on a page."""

    async def get_attribute(self, name: str) -> Optional[str]: ...

    async def click(self) -> None: ...


@runtime_checkable
class AutomationPage(Protocol):
    """One browser tab."""

    @property
    def url(self) -> str: ...

    def is_closed(self) -> bool: ...

    async def navigate(self, url: str, wait_until: str = "networkidle") -> None: ...

    async def wait_for(self, selector: str, timeout_ms: Optional[int] = None) -> None: ...

    async def click(self, selector: str) -> None: ...

    async def click_and_wait(
        self, selector: str, wait_until: str = "networkidle", timeout_ms: Optional[int] = None
    ) -> None: ...

    async def type(self, selector: str, text: str) -> None: ...

    async def has_element(self, selector: str) -> bool: ...

    async def inner_text(self, selector: str) -> str: ...

    async def text_content(self, selector: str) -> Optional[str]: ...

    async def get_attribute(self, selector: str, name: str) -> Optional[str]: ...

    async def evaluate(self, expression: str, arg: Any = None) -> Any: ...

    async def query_all(self, selector: str) -> List[ElementRef]: ...

    async def wait_for_text_change(
        self, selector: str, previous: str, timeout_ms: Optional[int] = None
    ) -> None: ...

    async def go_back(self) -> None: ...

    async def get_cookies(self) -> List[Dict[str, Any]]: ...

    async def set_cookies(self, cookies: List[Dict[str, Any]]) -> None: ...

    async def close(self) -> None: ...


@runtime_checkable
class AutomationSurface(Protocol):
    """A lazily launched browser that hands out pages."""

    async def connect(self) -> None: ...

    def is_connected(self) -> bool: ...

    async def new_page(self) -> AutomationPage: ...

    async def close(self) -> None: ...


@asynccontextmanager
async def open_page(surface: AutomationSurface) -> AsyncIterator[AutomationPage]:
    """
    Acquire a page for the duration of a block.

    Connects the surface if needed. The page is closed on every exit path;
    a page whose browser has already gone away is left alone.
    """
    if not surface.is_connected():
        await surface.connect()
    page = await surface.new_page()
    try:
        yield page
    finally:
        if not page.is_closed():
            try:
                await page.close()
            except Exception as e:
                logger.warning(f"Failed to close page: {e}")

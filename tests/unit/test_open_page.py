"""Tests for the open_page context manager."""

import pytest

from dvsa_checker.services.browser import open_page


class TestOpenPage:
    """Page lifetime on the automation surface."""

    @pytest.mark.asyncio
    async def test_connects_and_closes(self, surface, page):
        async with open_page(surface) as opened:
            assert opened is page
            assert surface.connect_calls == 1

        assert page.closed is True
        assert page.actions == [("close",)]

    @pytest.mark.asyncio
    async def test_reuses_connected_surface(self, surface):
        surface.connected = True

        async with open_page(surface):
            pass

        assert surface.connect_calls == 0

    @pytest.mark.asyncio
    async def test_closes_on_error(self, surface, page):
        with pytest.raises(RuntimeError):
            async with open_page(surface):
                raise RuntimeError("check failed")

        assert page.closed is True

    @pytest.mark.asyncio
    async def test_already_closed_page_left_alone(self, surface, page):
        async with open_page(surface):
            page.closed = True

        assert page.actions_named("close") == []

    @pytest.mark.asyncio
    async def test_close_failure_is_swallowed(self, surface, page):
        page.close = _raise_on_close

        async with open_page(surface):
            pass


async def _raise_on_close():
    raise RuntimeError("browser has been closed")

"""Tests for SessionManager restore/save/clear."""

from unittest.mock import AsyncMock

import pytest

from dvsa_checker.selector.selector_map import SelectorStep
from dvsa_checker.services.session.session_manager import SessionManager

LOGGED_IN_URL = "https://driverpracticaltest.dvsa.gov.uk/manage"
COOKIES = [{"name": "JSESSIONID", "value": "abc", "domain": "example.test", "path": "/"}]


@pytest.fixture
def marker(selectors):
    return selectors[SelectorStep.CHANGE_TEST_DATE_LINK]


class TestTryRestore:
    @pytest.mark.asyncio
    async def test_no_saved_session(self, page, events, marker, make_cookie_store):
        manager = SessionManager(make_cookie_store(), events)

        assert await manager.try_restore(page, LOGGED_IN_URL, marker) is False
        assert page.actions == []

    @pytest.mark.asyncio
    async def test_restored_when_marker_appears(
        self, page, events, recorder, marker, make_cookie_store
    ):
        manager = SessionManager(make_cookie_store(COOKIES), events)

        assert await manager.try_restore(page, LOGGED_IN_URL, marker) is True
        assert page.actions == [
            ("set_cookies", 1),
            ("navigate", LOGGED_IN_URL),
            ("wait_for", marker, 5_000),
        ]
        assert "Session restored successfully." in recorder.logs

    @pytest.mark.asyncio
    async def test_marker_timeout_discards_session(
        self, page, events, recorder, marker, make_cookie_store
    ):
        store = make_cookie_store(COOKIES)
        manager = SessionManager(store, events)
        page.fail_wait(marker)

        assert await manager.try_restore(page, LOGGED_IN_URL, marker) is False
        assert store.cookies is None
        assert store.cleared == 1
        assert any("Session expired or invalid" in line for line in recorder.logs)

    @pytest.mark.asyncio
    async def test_rejected_cookies_discard_session(
        self, page, events, recorder, marker, make_cookie_store
    ):
        store = make_cookie_store([{"name": "JSESSIONID", "value": "abc"}])
        manager = SessionManager(store, events)
        page.set_cookies = AsyncMock(
            side_effect=RuntimeError("Cookie should have a url or a domain/path pair")
        )

        assert await manager.try_restore(page, LOGGED_IN_URL, marker) is False
        assert store.cookies is None
        assert store.cleared == 1
        assert page.actions == []
        assert any("Session expired or invalid" in line for line in recorder.logs)


class TestSave:
    @pytest.mark.asyncio
    async def test_save_persists_page_cookies(self, page, events, make_cookie_store):
        store = make_cookie_store()
        page.cookies = COOKIES

        assert await SessionManager(store, events).save(page) is True
        assert store.cookies == COOKIES

    @pytest.mark.asyncio
    async def test_save_failure_is_not_raised(self, page, events, make_cookie_store):
        async def broken():
            raise RuntimeError("page gone")

        page.get_cookies = broken

        assert await SessionManager(make_cookie_store(), events).save(page) is False

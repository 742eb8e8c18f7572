"""
Tests for the Playwright driver and session, against mocked Playwright objects.
"""

import base64
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError

from demo_recorder.browsers import PlaywrightDriver, PlaywrightSession
from demo_recorder.engine.cursor_overlay import CURSOR_ID, CursorOverlay
from demo_recorder.exceptions import (
    ActionExecutionError,
    BrowserConnectionError,
    BrowserError,
    ElementNotFoundError,
    NavigationError,
    StructuralUIError,
)
from demo_recorder.interfaces.driver import Target


def make_element(count=1, evaluate_result=None):
    element = MagicMock()
    element.count = AsyncMock(return_value=count)
    element.evaluate = AsyncMock(return_value=evaluate_result)
    element.click = AsyncMock()
    element.press = AsyncMock()
    element.press_sequentially = AsyncMock()
    element.dispatch_event = AsyncMock()
    return element


def make_scope(element, count=None):
    scope = MagicMock()
    scope.first = element
    scope.nth = MagicMock(return_value=element)
    scope.count = AsyncMock(return_value=element.count.return_value if count is None else count)
    return scope


@pytest.fixture
def page():
    page = MagicMock()
    page.goto = AsyncMock()
    page.evaluate = AsyncMock(return_value=None)
    page.evaluate_handle = AsyncMock(return_value="data-transfer-handle")
    page.wait_for_timeout = AsyncMock()
    return page


class TestLocatorResolution:
    """Test Target -> Locator resolution."""

    @pytest.mark.asyncio
    async def test_first_match_by_default(self, page):
        """Test an unindexed target uses the first match."""
        element = make_element()
        page.locator.return_value = make_scope(element)
        driver = PlaywrightDriver(page)

        await driver.click(Target("#play"))

        page.locator.assert_called_once_with("#play")
        element.click.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_nth_then_child(self, page):
        """Test index and parent scoping."""
        child = make_element()
        cell = make_element()
        cell.locator.return_value = make_scope(child)
        cells = make_scope(cell)
        page.locator.return_value = cells
        driver = PlaywrightDriver(page)

        await driver.click(Target(".audio-cell").nth(4).child("i", has_text="delete_outline"))

        cells.nth.assert_called_once_with(4)
        cell.locator.assert_called_once_with("i", has_text="delete_outline")
        child.click.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_count_ignores_index(self, page):
        """Test count() reports all matches."""
        page.locator.return_value = make_scope(make_element(), count=9)
        driver = PlaywrightDriver(page)
        assert await driver.count(Target(".audio-cell").nth(0)) == 9


class TestQueries:
    """Test state queries."""

    @pytest.mark.asyncio
    async def test_is_enabled(self, page):
        """Test the disabled flag is read from the element."""
        element = make_element(evaluate_result=False)
        page.locator.return_value = make_scope(element)
        driver = PlaywrightDriver(page)

        assert await driver.is_enabled(Target("button")) is False
        element.evaluate.assert_awaited_once_with("el => !el.disabled")

    @pytest.mark.asyncio
    async def test_missing_element_raises(self, page):
        """Test absence is an error, not a false answer."""
        page.locator.return_value = make_scope(make_element(count=0))
        driver = PlaywrightDriver(page)

        with pytest.raises(ElementNotFoundError) as exc_info:
            await driver.is_enabled(Target("button"))
        assert exc_info.value.selector == "button"

    @pytest.mark.asyncio
    async def test_extent(self, page):
        """Test client width and height."""
        page.locator.return_value = make_scope(make_element(evaluate_result=[120, 8]))
        driver = PlaywrightDriver(page)
        assert await driver.extent(Target(".q-slider")) == (120.0, 8.0)

    @pytest.mark.asyncio
    async def test_query_error_wrapped(self, page):
        """Test a page that dies mid-query is structural, not a raw Playwright error."""
        element = make_element()
        element.evaluate.side_effect = PlaywrightError("Target page, context or browser has been closed")
        page.locator.return_value = make_scope(element)
        driver = PlaywrightDriver(page)

        with pytest.raises(StructuralUIError) as exc_info:
            await driver.is_enabled(Target("input"))
        assert exc_info.value.details["selector"] == "input"

    @pytest.mark.asyncio
    async def test_count_error_wrapped(self, page):
        """Test a failing count is structural."""
        scope = make_scope(make_element())
        scope.count.side_effect = PlaywrightError("Target closed")
        page.locator.return_value = scope
        driver = PlaywrightDriver(page)

        with pytest.raises(StructuralUIError):
            await driver.count(Target(".audio-cell"))


class TestActions:
    """Test action dispatch."""

    @pytest.mark.asyncio
    async def test_positional_forced_click(self, page):
        """Test position and force are passed through."""
        element = make_element()
        page.locator.return_value = make_scope(element)
        driver = PlaywrightDriver(page)

        await driver.click(Target(".q-slider"), position=(5, 62.1), force=True)

        element.click.assert_awaited_once_with(position={"x": 5, "y": 62.1}, force=True)

    @pytest.mark.asyncio
    async def test_type_text(self, page):
        """Test typing key by key with a delay."""
        element = make_element()
        page.locator.return_value = make_scope(element)
        driver = PlaywrightDriver(page)

        await driver.type_text(Target("input"), "hello", delay_ms=100)

        element.press_sequentially.assert_awaited_once_with("hello", delay=100)

    @pytest.mark.asyncio
    async def test_drop_file(self, page):
        """Test the file travels base64 encoded and is dispatched as a drop."""
        element = make_element()
        page.locator.return_value = make_scope(element)
        driver = PlaywrightDriver(page)

        await driver.drop_file(Target(".q-layout"), "demo.vvproj", b"\x00{}")

        args = page.evaluate_handle.await_args.args
        assert args[1] == {"name": "demo.vvproj", "payload": base64.b64encode(b"\x00{}").decode()}
        element.dispatch_event.assert_awaited_once_with("drop", {"dataTransfer": "data-transfer-handle"})

    @pytest.mark.asyncio
    async def test_action_error_wrapped(self, page):
        """Test Playwright failures become structural errors."""
        element = make_element()
        element.click.side_effect = PlaywrightError("element is detached")
        page.locator.return_value = make_scope(element)
        driver = PlaywrightDriver(page)

        with pytest.raises(ActionExecutionError) as exc_info:
            await driver.click(Target("#play"))
        assert isinstance(exc_info.value, StructuralUIError)
        assert exc_info.value.action_type == "click"

    @pytest.mark.asyncio
    async def test_navigation_error(self, page):
        """Test an unreachable application."""
        page.goto.side_effect = PlaywrightError("net::ERR_CONNECTION_REFUSED")
        driver = PlaywrightDriver(page)

        with pytest.raises(NavigationError) as exc_info:
            await driver.goto("http://localhost:5173")
        assert exc_info.value.url == "http://localhost:5173"

    @pytest.mark.asyncio
    async def test_evaluate_error(self, page):
        """Test a throwing page script is structural."""
        page.evaluate.side_effect = PlaywrightError("TypeError: x is null")
        driver = PlaywrightDriver(page)

        with pytest.raises(StructuralUIError):
            await driver.evaluate("() => x.scrollTop = 0")

    @pytest.mark.asyncio
    async def test_sleep_uses_page_timer(self, page):
        """Test sleeps go through the page."""
        await PlaywrightDriver(page).sleep(250)
        page.wait_for_timeout.assert_awaited_once_with(250)

    @pytest.mark.asyncio
    async def test_sleep_on_closed_page(self, page):
        """Test a closed page during a pause is a browser error."""
        page.wait_for_timeout.side_effect = PlaywrightError("Target closed")

        with pytest.raises(BrowserError):
            await PlaywrightDriver(page).sleep(250)


class TestCursorOverlay:
    """Test the cursor overlay."""

    @pytest.mark.asyncio
    async def test_inject_passes_markup(self, page):
        """Test the SVG is injected as text."""
        driver = PlaywrightDriver(page)
        await driver.inject_cursor(b"<svg></svg>")

        arg = page.evaluate.await_args.args[1]
        assert arg["svg"] == "<svg></svg>"
        assert arg["id"] == CURSOR_ID

    @pytest.mark.asyncio
    async def test_move_to_fraction(self, page):
        """Test the move targets the element with the fractional point."""
        element = make_element()
        page.locator.return_value = make_scope(element)
        driver = PlaywrightDriver(page, CursorOverlay())

        await driver.move_cursor(Target("#play"), 0.2, 1)

        assert element.evaluate.await_args.args[1] == {"id": CURSOR_ID, "fx": 0.2, "fy": 1}


class TestPlaywrightSession:
    """Test session lifecycle guards."""

    @pytest.mark.asyncio
    async def test_open_page_before_start(self, settings):
        """Test a page cannot be opened without a browser."""
        with pytest.raises(BrowserConnectionError):
            await PlaywrightSession(settings).open_page()

    @pytest.mark.asyncio
    async def test_close_without_start(self, settings):
        """Test close is safe on a session that never started."""
        session = PlaywrightSession(settings)
        await session.close()
        assert not session.is_connected

    @pytest.mark.asyncio
    async def test_open_page_records_video(self, settings):
        """Test the context records into the videos directory."""
        page = MagicMock()
        context = MagicMock()
        context.new_page = AsyncMock(return_value=page)
        context.close = AsyncMock()
        browser = MagicMock()
        browser.new_context = AsyncMock(return_value=context)
        browser.close = AsyncMock()

        session = PlaywrightSession(settings)
        session._browser = browser
        driver = await session.open_page()

        kwargs = browser.new_context.await_args.kwargs
        assert kwargs["record_video_dir"] == settings.recording.videos_dir
        assert kwargs["viewport"] == {"width": 1280, "height": 720}
        context.set_default_timeout.assert_called_once_with(settings.browser.timeout_ms)
        assert isinstance(driver, PlaywrightDriver)

        await session.close()
        context.close.assert_awaited_once()
        browser.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_open_page_failure_wrapped(self, settings):
        """Test a context that cannot be created is a browser error."""
        browser = MagicMock()
        browser.new_context = AsyncMock(side_effect=PlaywrightError("Browser has been closed"))

        session = PlaywrightSession(settings)
        session._browser = browser
        with pytest.raises(BrowserError):
            await session.open_page()

    @pytest.mark.asyncio
    async def test_close_continues_after_context_failure(self, settings):
        """Test the browser and Playwright are stopped even if the context will not close."""
        context = MagicMock()
        context.close = AsyncMock(side_effect=PlaywrightError("Target crashed"))
        browser = MagicMock()
        browser.close = AsyncMock()
        playwright = MagicMock()
        playwright.stop = AsyncMock()

        session = PlaywrightSession(settings)
        session._context, session._browser, session._playwright = context, browser, playwright

        with pytest.raises(BrowserError):
            await session.close()

        browser.close.assert_awaited_once()
        playwright.stop.assert_awaited_once()
        assert not session.is_connected
        await session.close()

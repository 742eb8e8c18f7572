"""
Playwright Browser - Implementation of the driver interfaces using Playwright.

This module provides the Playwright-backed page driver and the recording
session that owns the browser and the video output directory.
"""

import base64
import logging
from pathlib import Path
from typing import Any, Optional, Tuple

from playwright.async_api import Error as PlaywrightError

from demo_recorder.config.settings import Settings
from demo_recorder.engine.cursor_overlay import CursorConfig, CursorOverlay
from demo_recorder.exceptions.browser import (
    ActionExecutionError,
    BrowserConnectionError,
    BrowserError,
    BrowserLaunchError,
    ElementNotFoundError,
    NavigationError,
    StructuralUIError,
)
from demo_recorder.interfaces.driver import IDriver, IRecordingSession, Target

logger = logging.getLogger(__name__)


DROP_FILE_JS = """
({ name, payload }) => {
    const bytes = Uint8Array.from(atob(payload), c => c.charCodeAt(0));
    const dt = new DataTransfer();
    dt.items.add(new File([bytes], name, { type: 'application/octet-stream' }));
    return dt;
}
"""

IS_ENABLED_JS = "el => !el.disabled"

EXTENT_JS = "el => [el.clientWidth, el.clientHeight]"


class PlaywrightDriver(IDriver):
    """
    Playwright implementation of IDriver.

    Wraps a Playwright Page; every Target is re-resolved into a Locator on
    each call.
    """

    def __init__(self, page: Any, overlay: Optional[CursorOverlay] = None):
        """
        Initialize the driver.

        Args:
            page: Playwright Page object
            overlay: Cursor overlay manager
        """
        self._page = page
        self._overlay = overlay or CursorOverlay()

    def _scope(self, target: Target) -> Any:
        """Locator for all matches of ``target`` within its resolved parent."""
        root = self._page if target.parent is None else self._locate(target.parent)
        if target.has_text is not None:
            return root.locator(target.selector, has_text=target.has_text)
        return root.locator(target.selector)

    def _locate(self, target: Target) -> Any:
        """Locator for the single element ``target`` points at."""
        scope = self._scope(target)
        if target.index is None:
            return scope.first
        return scope.nth(target.index)

    async def _require(self, target: Target) -> Any:
        locator = self._locate(target)
        try:
            found = await locator.count()
        except PlaywrightError as e:
            raise StructuralUIError(f"Could not query {target}: {e}", {"selector": str(target)})
        if found == 0:
            raise ElementNotFoundError(f"Required element not found: {target}", selector=str(target))
        return locator

    async def _inspect(self, target: Target, script: str) -> Any:
        locator = await self._require(target)
        try:
            return await locator.evaluate(script)
        except PlaywrightError as e:
            raise StructuralUIError(f"Could not inspect {target}: {e}", {"selector": str(target)})

    async def goto(self, url: str) -> None:
        """Navigate to URL."""
        try:
            await self._page.goto(url)
        except PlaywrightError as e:
            raise NavigationError(f"Failed to navigate to {url}: {e}", url=url)

    async def count(self, target: Target) -> int:
        """Count matching elements."""
        try:
            return await self._scope(target).count()
        except PlaywrightError as e:
            raise StructuralUIError(f"Could not count {target}: {e}", {"selector": str(target)})

    async def is_enabled(self, target: Target) -> bool:
        """Read the control's disabled flag."""
        return bool(await self._inspect(target, IS_ENABLED_JS))

    async def extent(self, target: Target) -> Tuple[float, float]:
        """Get client width and height."""
        width, height = await self._inspect(target, EXTENT_JS)
        return float(width), float(height)

    async def click(
        self,
        target: Target,
        position: Optional[Tuple[float, float]] = None,
        force: bool = False,
    ) -> None:
        """Click element."""
        options: dict = {}
        if position is not None:
            options["position"] = {"x": position[0], "y": position[1]}
        if force:
            options["force"] = True
        try:
            await self._locate(target).click(**options)
        except PlaywrightError as e:
            raise ActionExecutionError(f"Could not click: {e}", action_type="click", selector=str(target))

    async def type_text(self, target: Target, text: str, delay_ms: int = 0) -> None:
        """Type text key by key."""
        try:
            await self._locate(target).press_sequentially(text, delay=delay_ms)
        except PlaywrightError as e:
            raise ActionExecutionError(f"Could not type: {e}", action_type="type", selector=str(target))

    async def press(self, target: Target, key: str) -> None:
        """Press key."""
        try:
            await self._locate(target).press(key)
        except PlaywrightError as e:
            raise ActionExecutionError(f"Could not press {key}: {e}", action_type="press", selector=str(target))

    async def drop_file(self, target: Target, filename: str, data: bytes) -> None:
        """Drop a file onto the element."""
        payload = base64.b64encode(data).decode("ascii")
        try:
            data_transfer = await self._page.evaluate_handle(
                DROP_FILE_JS, {"name": filename, "payload": payload}
            )
            await self._locate(target).dispatch_event("drop", {"dataTransfer": data_transfer})
        except PlaywrightError as e:
            raise ActionExecutionError(f"Could not drop {filename}: {e}", action_type="drop", selector=str(target))

    async def inject_cursor(self, svg: bytes) -> None:
        """Install the cursor overlay."""
        try:
            await self._overlay.inject(self._page, svg)
        except PlaywrightError as e:
            raise StructuralUIError(f"Could not inject cursor overlay: {e}")

    async def move_cursor(self, target: Target, fx: float, fy: float) -> None:
        """Glide the cursor overlay towards the target."""
        try:
            await self._overlay.move_to(self._locate(target), fx, fy)
        except PlaywrightError as e:
            raise ActionExecutionError(f"Could not move cursor: {e}", action_type="move", selector=str(target))

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        """Execute JavaScript."""
        try:
            return await self._page.evaluate(script, arg)
        except PlaywrightError as e:
            raise StructuralUIError(f"Page script failed: {e}")

    async def sleep(self, ms: int) -> None:
        """Wait for timeout."""
        try:
            await self._page.wait_for_timeout(ms)
        except PlaywrightError as e:
            raise BrowserError(f"Page closed while waiting {ms}ms: {e}")


class PlaywrightSession(IRecordingSession):
    """
    Playwright implementation of IRecordingSession.

    Launches one browser and records one page into the configured videos
    directory. The video file is only complete once close() has returned.

    Example:
        >>> session = PlaywrightSession(settings)
        >>> await session.start()
        >>> driver = await session.open_page()
        >>> await driver.goto("https://example.com")
        >>> await session.close()
    """

    def __init__(self, settings: Settings):
        """Initialize the session (not launched yet)."""
        self._settings = settings
        self._playwright: Any = None
        self._browser: Any = None
        self._context: Any = None

    @property
    def is_connected(self) -> bool:
        """Check if browser is connected."""
        return self._browser is not None and self._browser.is_connected()

    async def start(self) -> None:
        """Launch the browser."""
        browser_settings = self._settings.browser
        try:
            from playwright.async_api import async_playwright

            self._playwright = await async_playwright().start()
            launcher = getattr(self._playwright, browser_settings.browser_type)
            self._browser = await launcher.launch(
                headless=browser_settings.headless,
                timeout=browser_settings.timeout_ms,
                slow_mo=browser_settings.slow_mo,
            )
            logger.info(
                f"Launched {browser_settings.browser_type} browser "
                f"(headless={browser_settings.headless})"
            )
        except PlaywrightError as e:
            raise BrowserLaunchError(f"Failed to launch browser: {e}")

    async def open_page(self) -> IDriver:
        """Create the recorded page."""
        if not self._browser:
            raise BrowserConnectionError("Browser not launched. Call start() first.")

        browser_settings = self._settings.browser
        size = {
            "width": browser_settings.viewport_width,
            "height": browser_settings.viewport_height,
        }
        videos_dir = Path(self._settings.recording.videos_dir)
        videos_dir.mkdir(parents=True, exist_ok=True)

        try:
            self._context = await self._browser.new_context(
                viewport=size,
                record_video_dir=str(videos_dir),
                record_video_size=size,
            )
            self._context.set_default_timeout(browser_settings.timeout_ms)
            page = await self._context.new_page()
        except PlaywrightError as e:
            raise BrowserError(f"Failed to open the recorded page: {e}")
        overlay = CursorOverlay(CursorConfig(transition_ms=self._settings.delays.cursor_move_ms))
        return PlaywrightDriver(page, overlay)

    async def close(self) -> None:
        """
        Close the context (flushing the video), the browser and Playwright.

        Every stage runs even when an earlier one fails.

        Raises:
            BrowserError: If any stage failed
        """
        context, browser, playwright = self._context, self._browser, self._playwright
        self._context = self._browser = self._playwright = None
        try:
            if context:
                await context.close()
        except PlaywrightError as e:
            raise BrowserError(f"Failed to close browser context: {e}")
        finally:
            try:
                if browser:
                    await browser.close()
            except PlaywrightError as e:
                raise BrowserError(f"Failed to close browser: {e}")
            finally:
                if playwright:
                    await playwright.stop()
                logger.info("Browser closed")

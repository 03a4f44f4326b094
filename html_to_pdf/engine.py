"""
Process-wide headless Chromium managed through Playwright.

One ``BrowserEngine`` is started per process and shared by every request; each
request gets its own page from ``new_page()``, which is always closed on exit.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from .errors import RenderEngineUnavailable
from .logging_utils import get_logger

VIEWPORT = {"width": 1200, "height": 800}

CHROMIUM_ARGS: List[str] = [
    '--disable-dev-shm-usage',  # Use /tmp instead of /dev/shm (prevents OOM crashes)
    '--disable-gpu',             # No GPU in headless mode
    '--no-sandbox',              # Required in some environments
    '--disable-setuid-sandbox',
    '--no-first-run',
    '--disable-extensions',
    '--disable-background-networking',
    '--disable-background-timer-throttling',
    '--disable-renderer-backgrounding',
]

# Substrings of Playwright errors meaning the browser process is gone
CRASH_MARKERS = (
    "Connection closed",
    "Browser has been closed",
    "Target closed",
    "Target page, context or browser has been closed",
    "crashed",
)


def is_crash_error(error: BaseException) -> bool:
    message = str(error)
    return any(marker in message for marker in CRASH_MARKERS)


class BrowserEngine:
    """Shared Chromium instance with an explicit start/close lifecycle."""

    def __init__(self, executable_path: Optional[str] = None, headless: bool = True):
        self.executable_path = executable_path
        self.headless = headless
        self.logger = get_logger(__name__)
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        # Serialises launch and restart across concurrent requests
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def start(self) -> None:
        """Launch Chromium if it is not already running."""
        async with self._lock:
            await self._launch()

    async def _launch(self) -> None:
        if self.is_running:
            return
        self.logger.info("Launching headless Chromium...")
        try:
            if self._playwright is None:
                self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                executable_path=self.executable_path,
                args=CHROMIUM_ARGS,
            )
        except PlaywrightError as e:
            await self.close()
            raise RenderEngineUnavailable(
                f"Browser launch failed: {e}. Install Chromium with: python -m playwright install chromium"
            ) from e
        self.logger.debug(f"Chromium {self._browser.version} ready")

    async def restart(self) -> None:
        """Replace the browser if it has disconnected; a live browser is left alone."""
        async with self._lock:
            if self.is_running:
                self.logger.debug("Browser still connected, not restarting")
                return
            self.logger.warning("Browser connection lost, restarting...")
            await self._close_browser()
            await self._launch()

    @asynccontextmanager
    async def new_page(self) -> AsyncIterator[Page]:
        """Open an isolated page; it is closed when the block exits, success or failure."""
        if not self.is_running:
            raise RenderEngineUnavailable("PDF converter not available. Browser is not running.")
        try:
            page = await self._browser.new_page(viewport=VIEWPORT)
        except PlaywrightError as e:
            if not is_crash_error(e) or self.is_running:
                raise RenderEngineUnavailable(f"Could not open a browser page: {e}") from e
            # Browser went away between the check and the call
            await self.restart()
            page = await self._browser.new_page(viewport=VIEWPORT)
        try:
            yield page
        finally:
            try:
                if not page.is_closed():
                    await page.close()
            except PlaywrightError as e:
                self.logger.warning(f"Could not close browser page: {e}")

    async def _close_browser(self) -> None:
        browser = self._browser
        self._browser = None
        try:
            if browser and browser.is_connected():
                await browser.close()
        except PlaywrightError as e:
            self.logger.debug(f"Ignoring error while closing browser: {e}")

    async def close(self) -> None:
        """Close the browser and stop Playwright. Safe to call more than once."""
        await self._close_browser()
        pw = self._playwright
        self._playwright = None
        if pw is not None:
            try:
                await pw.stop()
            except PlaywrightError as e:
                self.logger.debug(f"Ignoring error while stopping Playwright: {e}")
        self.logger.debug("Browser instance closed and cleaned up")

    async def __aenter__(self) -> "BrowserEngine":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


__all__ = ["BrowserEngine", "CHROMIUM_ARGS", "is_crash_error"]

"""
Headless Chromium render host.

One browser process is shared by every request in the server process. It is
owned by a BrowserManager created in the application lifespan; requests
check out a page for the duration of a render and only ever close that page.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright

from app.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

PDF_OPTIONS = {
    "format": "A4",
    "print_background": True,
    "prefer_css_page_size": True,
    "scale": 0.9,
    "margin": {"top": "0", "right": "0", "bottom": "0", "left": "0"},
}


class BrowserManager:
    """Lazily launched, reconnecting owner of the shared browser."""

    def __init__(
        self,
        launch_args: Optional[List[str]] = None,
        capture_screenshots: Optional[bool] = None,
        screenshot_path: Optional[str] = None,
    ):
        self._launch_args = list(settings.BROWSER_LAUNCH_ARGS if launch_args is None else launch_args)
        self._capture_screenshots = (
            not settings.is_production if capture_screenshots is None else capture_screenshots
        )
        self._screenshot_path = screenshot_path or settings.INVOICE_DEBUG_SCREENSHOT_PATH
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def get_browser(self) -> Browser:
        """Return the connected browser, launching one if needed."""
        if self.is_running:
            return self._browser

        async with self._lock:
            # Another request may have launched it while we waited
            if self.is_running:
                return self._browser

            if self._playwright is None:
                self._playwright = await async_playwright().start()

            browser = await self._playwright.chromium.launch(
                headless=True,
                args=self._launch_args,
            )
            browser.on("disconnected", self._on_disconnected)
            self._browser = browser
            logger.info("Headless browser launched", extra={"launch_args": self._launch_args})
            return browser

    def _on_disconnected(self, browser: Browser) -> None:
        if self._browser is browser:
            self._browser = None
            logger.warning("Headless browser disconnected; it will be relaunched on next use")

    @asynccontextmanager
    async def page(self) -> AsyncIterator[Page]:
        """Check out one page on the shared browser; the page is always closed."""
        browser = await self.get_browser()
        page = await browser.new_page()
        try:
            yield page
        finally:
            try:
                await page.close()
            except Exception as exc:
                logger.warning("Failed to close render page: %s", exc)

    async def _save_debug_screenshot(self, page: Page) -> None:
        try:
            await page.screenshot(path=self._screenshot_path, full_page=True)
            logger.debug("Invoice debug screenshot written to %s", self._screenshot_path)
        except Exception as exc:
            logger.warning("Could not write invoice debug screenshot: %s", exc)

    async def render_pdf(self, html: str) -> bytes:
        """Print an HTML document to A4 PDF bytes."""
        async with self.page() as page:
            await page.set_content(html, wait_until="networkidle")
            if self._capture_screenshots:
                await self._save_debug_screenshot(page)
            return await page.pdf(**PDF_OPTIONS)

    async def close(self) -> None:
        """Shut down the browser and the Playwright driver (application shutdown)."""
        browser, self._browser = self._browser, None
        if browser is not None:
            try:
                await browser.close()
            except Exception as exc:
                logger.warning("Error while closing headless browser: %s", exc)
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

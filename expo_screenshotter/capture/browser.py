"""Playwright browser lifecycle for the capture run."""

from typing import Any

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from expo_screenshotter.constants import DEFAULT_VIEWPORT_HEIGHT, DEFAULT_VIEWPORT_WIDTH
from expo_screenshotter.exceptions import BrowserError

CHROMIUM_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


class BrowserManager:
    def __init__(self, headless: bool = True):
        self._headless = headless
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    async def launch(self) -> None:
        """Start Playwright and launch headless Chromium."""
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self._headless, args=CHROMIUM_ARGS
        )

    async def new_context(
        self,
        viewport_width: int = DEFAULT_VIEWPORT_WIDTH,
        viewport_height: int = DEFAULT_VIEWPORT_HEIGHT,
    ) -> BrowserContext:
        """Create a browser context; screenshots are taken at device scale 1."""
        if not self._browser:
            raise BrowserError("Browser not launched. Call launch() first.")

        kwargs: dict[str, Any] = {
            "viewport": {"width": viewport_width, "height": viewport_height},
            "device_scale_factor": 1,
        }
        return await self._browser.new_context(**kwargs)

    async def new_page(self, context: BrowserContext) -> Page:
        """Create a new page in the given context."""
        return await context.new_page()

    async def close(self) -> None:
        """Close browser and playwright. Safe to call when launch() failed part-way."""
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        try:
            if browser:
                await browser.close()
        finally:
            if playwright:
                await playwright.stop()

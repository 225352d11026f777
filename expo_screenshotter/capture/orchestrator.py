"""Capture orchestrator: wires browser, interaction replay, and frame compositing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog
from playwright.async_api import Error as PlaywrightError

from expo_screenshotter.capture.browser import BrowserManager
from expo_screenshotter.capture.interactions import InteractionRunner, wait_for_selector
from expo_screenshotter.capture.planner import CaptureJob, ViewPlan, plan_captures
from expo_screenshotter.config.settings import get_settings
from expo_screenshotter.constants import (
    SCROLL_SETTLE_MS,
    VIEWPORT_SETTLE_MS,
    WAIT_FOR_SELECTOR_TIMEOUT_MS,
)
from expo_screenshotter.exceptions import NavigationError, OutputError, SelectorTimeoutError
from expo_screenshotter.frames.assets import FrameAssetResolver
from expo_screenshotter.frames.compositor import DeviceFrameCompositor

if TYPE_CHECKING:
    from pathlib import Path

    from playwright.async_api import Page

    from expo_screenshotter.models.config import ScreenshotConfig, View

logger = structlog.get_logger(__name__)

SCROLL_TO_JS = "([x, y]) => window.scrollTo(x, y)"


@dataclass
class CaptureRecord:
    view: str
    size: str
    path: Path
    framed: bool = False


@dataclass
class CaptureResult:
    """Files written by a run, in the order they were captured."""

    records: list[CaptureRecord] = field(default_factory=list)

    @property
    def paths(self) -> list[Path]:
        return [record.path for record in self.records]


class Screenshotter:
    """Captures every configured view at every configured size.

    A single page is reused for the whole run; viewport and scroll state
    carry over from one capture to the next.
    """

    def __init__(
        self,
        config: ScreenshotConfig,
        browser: BrowserManager | None = None,
        compositor: DeviceFrameCompositor | None = None,
        interactions: InteractionRunner | None = None,
        headless: bool = True,
        navigation_timeout_ms: int | None = None,
    ) -> None:
        self._config = config
        self._browser = browser or BrowserManager(headless=headless)
        self._compositor = compositor or DeviceFrameCompositor()
        self._interactions = interactions or InteractionRunner()
        self._navigation_timeout = navigation_timeout_ms or get_settings().navigation_timeout_ms

    async def run(self) -> CaptureResult:
        """Launch the browser, capture everything, and always close the browser."""
        plans = plan_captures(self._config)

        logger.info("launching_browser")
        try:
            await self._browser.launch()
            context = await self._browser.new_context()
            page = await self._browser.new_page(context)
            result = await self.capture(page, plans)
        finally:
            await self._browser.close()

        logger.info("capture_complete", screenshots=len(result.records))
        return result

    async def capture(self, page: Page, plans: list[ViewPlan] | None = None) -> CaptureResult:
        """Run the capture loop on an already-open page."""
        if plans is None:
            plans = plan_captures(self._config)

        result = CaptureResult()
        for plan in plans:
            await self._prepare_view(page, plan)
            for job in plan.captures:
                result.records.append(await self._capture_size(page, job))
        return result

    def view_url(self, view: View) -> str:
        base = self._config.expo_url
        if base.endswith("/") and view.path.startswith("/"):
            base = base[:-1]
        return f"{base}{view.path}"

    async def _prepare_view(self, page: Page, plan: ViewPlan) -> None:
        """Navigate to the view and bring it into the state to be captured."""
        view = plan.view
        logger.info("processing_view", view=view.name)

        try:
            plan.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"Cannot create output directory {plan.directory}: {e}"
            raise OutputError(msg) from e

        url = self.view_url(view)
        logger.info("navigating", url=url)
        try:
            await page.goto(url, wait_until="networkidle", timeout=self._navigation_timeout)
        except PlaywrightError as e:
            msg = f"Failed to load {url} for view {view.name!r}: {e}"
            raise NavigationError(msg) from e

        if self._config.wait_for_selector:
            try:
                await wait_for_selector(
                    page, self._config.wait_for_selector, WAIT_FOR_SELECTOR_TIMEOUT_MS
                )
            except SelectorTimeoutError as e:
                logger.warning(
                    "selector_not_found",
                    selector=self._config.wait_for_selector,
                    view=view.name,
                    reason=str(e),
                )

        await page.wait_for_timeout(self._config.wait_time)

        if view.interactions:
            logger.info("replaying_interactions", view=view.name, steps=len(view.interactions))
            await self._interactions.run(page, view.interactions)
            if view.wait_after_interactions:
                await page.wait_for_timeout(view.wait_after_interactions)

    async def _capture_size(self, page: Page, job: CaptureJob) -> CaptureRecord:
        options = job.options
        logger.info(
            "capturing_size",
            view=job.view.name,
            size=options.name,
            width=options.width,
            height=options.height,
            scroll_x=options.scroll_x,
            scroll_y=options.scroll_y,
            full_page=options.full_page,
        )

        await page.set_viewport_size({"width": options.width, "height": options.height})
        await page.wait_for_timeout(VIEWPORT_SETTLE_MS)

        if options.is_scrolled:
            await page.evaluate(SCROLL_TO_JS, [options.scroll_x, options.scroll_y])
            await page.wait_for_timeout(SCROLL_SETTLE_MS)

        await page.screenshot(path=str(job.output_path), full_page=options.full_page, type="png")
        logger.info("screenshot_saved", path=str(job.output_path))

        framed = False
        if options.use_device_frame:
            frame = self._compositor.apply(
                job.output_path, options.device_type, options.frame_options
            )
            framed = frame.framed

        return CaptureRecord(
            view=job.view.name, size=options.name, path=job.output_path, framed=framed
        )


async def take_screenshots(
    config: ScreenshotConfig,
    headless: bool | None = None,
    assets_dir: str | None = None,
) -> CaptureResult:
    """Programmatic entry point: capture ``config`` with settings-backed defaults."""
    settings = get_settings()
    compositor = DeviceFrameCompositor(
        resolver=FrameAssetResolver(assets_dir=assets_dir or settings.assets_dir)
    )
    screenshotter = Screenshotter(
        config,
        compositor=compositor,
        headless=settings.headless if headless is None else headless,
        navigation_timeout_ms=settings.navigation_timeout_ms,
    )
    return await screenshotter.run()

"""Capture pipeline integration tests: real planner, compositor and files, fake page."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from PIL import Image

from expo_screenshotter.capture.orchestrator import Screenshotter
from expo_screenshotter.frames.assets import FrameAssetResolver
from expo_screenshotter.frames.compositor import DeviceFrameCompositor
from expo_screenshotter.models.config import ScreenshotConfig

FULL_PAGE_HEIGHT = 2000


class FakePage:
    """Stands in for a Playwright page; screenshots are solid PNGs at viewport size."""

    def __init__(self) -> None:
        self.viewport = (1280, 800)
        self.scroll = (0, 0)
        self.visited: list[str] = []
        self.typed: list[str] = []
        self.waits: list[int] = []
        self.keyboard = AsyncMock()
        self.keyboard.type.side_effect = self._type

    async def _type(self, text: str) -> None:
        self.typed.append(text)

    async def goto(self, url: str, **kwargs: object) -> None:
        self.visited.append(url)

    async def wait_for_selector(self, selector: str, **kwargs: object) -> None:
        return None

    async def wait_for_timeout(self, ms: int) -> None:
        self.waits.append(ms)

    async def click(self, selector: str, **kwargs: object) -> None:
        return None

    async def set_viewport_size(self, size: dict[str, int]) -> None:
        self.viewport = (size["width"], size["height"])

    async def evaluate(self, script: str, arg: list[int]) -> None:
        self.scroll = (arg[0], arg[1])

    async def screenshot(self, path: str, full_page: bool = False, **kwargs: object) -> bytes:
        width, height = self.viewport
        if full_page:
            height = max(height, FULL_PAGE_HEIGHT)
        Image.new("RGB", (width, height), (40, 120, 200)).save(path, format="PNG")
        return Path(path).read_bytes()


def _config(tmp_path: Path, sizes: list[dict], **extra: object) -> ScreenshotConfig:
    return ScreenshotConfig.model_validate(
        {
            "expoUrl": "http://localhost:8081",
            "outputDir": str(tmp_path / "screenshots"),
            "waitTime": 10,
            "views": [
                {"name": "Home", "path": "/"},
                {
                    "name": "Form",
                    "path": "/form",
                    "interactions": [
                        {"type": "type", "selector": "#first", "text": "Jace"},
                        {"type": "wait", "waitTime": 20},
                    ],
                },
            ],
            "sizes": sizes,
            **extra,
        }
    )


def _screenshotter(config: ScreenshotConfig, page: FakePage, assets: Path) -> Screenshotter:
    browser = AsyncMock()
    browser.new_page.return_value = page
    compositor = DeviceFrameCompositor(resolver=FrameAssetResolver(roots=[assets]))
    return Screenshotter(
        config, browser=browser, compositor=compositor, navigation_timeout_ms=1000
    )


@pytest.mark.integration
class TestCapturePipeline:
    @pytest.mark.asyncio
    async def test_every_view_and_size_written(self, tmp_path: Path, assets_root: Path) -> None:
        config = _config(
            tmp_path,
            [
                {"width": 375, "height": 812, "name": "iPhone X"},
                {"width": 1280, "height": 800, "name": "Tablet", "fullPage": True},
                {"width": 375, "height": 812, "name": "Scrolled", "scrollY": 500},
            ],
        )
        page = FakePage()

        result = await _screenshotter(config, page, assets_root).run()

        shots = tmp_path / "screenshots"
        assert result.paths == [
            shots / "home" / "home_iphone_x.png",
            shots / "home" / "home_tablet.png",
            shots / "home" / "home_scrolled_scroll_x0_y500.png",
            shots / "form" / "form_iphone_x.png",
            shots / "form" / "form_tablet.png",
            shots / "form" / "form_scrolled_scroll_x0_y500.png",
        ]
        assert all(path.stat().st_size > 0 for path in result.paths)
        assert page.visited == ["http://localhost:8081/", "http://localhost:8081/form"]
        assert page.typed == ["Jace"]

        with Image.open(shots / "home" / "home_iphone_x.png") as image:
            assert image.size == (375, 812)
        with Image.open(shots / "home" / "home_tablet.png") as image:
            assert image.size == (1280, FULL_PAGE_HEIGHT)

    @pytest.mark.asyncio
    async def test_framed_iphone_keeps_screenshot_size(
        self, tmp_path: Path, assets_root: Path
    ) -> None:
        config = _config(
            tmp_path,
            [
                {
                    "width": 375,
                    "height": 812,
                    "name": "Framed",
                    "useDeviceFrame": True,
                    "deviceType": "iphone",
                    "iphoneOptions": {"pill": False, "color": "Midnight"},
                }
            ],
        )

        result = await _screenshotter(config, FakePage(), assets_root).run()

        framed = tmp_path / "screenshots" / "home" / "home_framed_iphone_notch_midnight.png"
        assert result.records[0].path == framed
        assert result.records[0].framed is True
        with Image.open(framed) as image:
            assert image.size == (375, 812)
            assert image.mode == "RGBA"

    @pytest.mark.asyncio
    async def test_missing_color_substitutes_with_warning(
        self, tmp_path: Path, assets_root: Path
    ) -> None:
        config = _config(
            tmp_path,
            [{"width": 375, "height": 812, "name": "Gold", "iphoneOptions": {"color": "Gold"}}],
            useDeviceFrame=True,
        )

        with patch("expo_screenshotter.frames.assets.logger") as mock_logger:
            result = await _screenshotter(config, FakePage(), assets_root).run()

        assert all(record.framed for record in result.records)
        assert mock_logger.warning.call_args.args[0] == "frame_asset_substituted"
        assert result.paths[0].name == "home_gold_iphone_pill_gold.png"

    @pytest.mark.asyncio
    async def test_android_medium_resized_to_target(
        self, tmp_path: Path, assets_root: Path
    ) -> None:
        config = _config(
            tmp_path,
            [
                {
                    "width": 360,
                    "height": 740,
                    "name": "Pixel",
                    "useDeviceFrame": True,
                    "deviceType": "android",
                    "androidOptions": {"size": "medium", "color": "black"},
                }
            ],
            androidOptions={"width": 300, "height": 600},
        )

        result = await _screenshotter(config, FakePage(), assets_root).run()

        # Size-level androidOptions replace the global object, so no resize here
        with Image.open(result.paths[0]) as image:
            assert image.size == (360, 740)

        resized = _config(
            tmp_path / "resized",
            [
                {
                    "width": 360,
                    "height": 740,
                    "name": "Pixel",
                    "useDeviceFrame": True,
                    "deviceType": "android",
                    "androidOptions": {"width": 300, "height": 600},
                }
            ],
        )
        result = await _screenshotter(resized, FakePage(), assets_root).run()

        path = result.paths[0]
        assert path.name == "home_pixel_android_medium_black.png"
        with Image.open(path) as image:
            assert image.size == (300, 600)

    @pytest.mark.asyncio
    async def test_missing_assets_leave_raw_capture(self, tmp_path: Path) -> None:
        config = _config(
            tmp_path,
            [{"width": 375, "height": 812, "name": "Framed", "useDeviceFrame": True}],
        )

        result = await _screenshotter(config, FakePage(), tmp_path / "no-assets").run()

        assert [record.framed for record in result.records] == [False, False]
        with Image.open(result.paths[0]) as image:
            assert image.size == (375, 812)
            assert image.mode == "RGB"

from pathlib import Path

import pytest

from expo_screenshotter.capture.planner import build_filename, frame_suffix, plan_captures
from expo_screenshotter.exceptions import ConfigError
from expo_screenshotter.models.config import ScreenshotConfig, resolve_size_options


def _config(
    sizes: list[dict], views: list[dict] | None = None, **extra: object
) -> ScreenshotConfig:
    return ScreenshotConfig.model_validate(
        {
            "expoUrl": "http://localhost:8081",
            "outputDir": "/out",
            "views": views or [{"name": "Home", "path": "/"}],
            "sizes": sizes,
            **extra,
        }
    )


def _options(size: dict, **extra: object):
    config = _config([size], **extra)
    return resolve_size_options(config, config.sizes[0])


@pytest.mark.unit
class TestBuildFilename:
    def test_basic_pair(self) -> None:
        options = _options({"width": 375, "height": 812, "name": "iPhone X"})
        assert build_filename("Home", options) == "home_iphone_x.png"

    def test_scroll_suffix_uses_both_offsets(self) -> None:
        options = _options({"width": 375, "height": 812, "name": "iPhone X", "scrollY": 500})
        assert build_filename("Home", options) == "home_iphone_x_scroll_x0_y500.png"

    def test_iphone_pill_suffix(self) -> None:
        options = _options(
            {
                "width": 375,
                "height": 812,
                "name": "Framed",
                "useDeviceFrame": True,
                "deviceType": "iphone",
            }
        )
        assert frame_suffix(options) == "_iphone_pill_space_black"
        assert build_filename("Home", options) == "home_framed_iphone_pill_space_black.png"

    def test_iphone_notch_suffix(self) -> None:
        options = _options(
            {
                "width": 375,
                "height": 812,
                "name": "Framed",
                "useDeviceFrame": True,
                "iphoneOptions": {"pill": False, "color": "Midnight"},
            }
        )
        assert frame_suffix(options) == "_iphone_notch_midnight"

    def test_android_suffix(self) -> None:
        options = _options(
            {
                "width": 360,
                "height": 740,
                "name": "Pixel",
                "useDeviceFrame": True,
                "deviceType": "android",
                "androidOptions": {"size": "compact", "color": "silver"},
            }
        )
        assert frame_suffix(options) == "_android_compact_silver"

    def test_no_suffix_without_framing(self) -> None:
        options = _options(
            {"width": 1, "height": 1, "name": "a", "iphoneOptions": {"color": "Gold"}}
        )
        assert frame_suffix(options) == ""

    def test_scroll_then_frame_order(self) -> None:
        options = _options(
            {
                "width": 375,
                "height": 812,
                "name": "X",
                "scrollX": 10,
                "scrollY": 20,
                "useDeviceFrame": True,
                "deviceType": "android",
            }
        )
        assert build_filename("Home", options) == "home_x_scroll_x10_y20_android_medium_black.png"


@pytest.mark.unit
class TestPlanCaptures:
    def test_scenario_home_iphone_x(self) -> None:
        plans = plan_captures(_config([{"width": 375, "height": 812, "name": "iPhone X"}]))
        assert len(plans) == 1
        assert plans[0].directory == Path("/out/home")
        assert plans[0].captures[0].output_path == Path("/out/home/home_iphone_x.png")

    def test_order_follows_config(self) -> None:
        config = _config(
            [
                {"width": 375, "height": 812, "name": "Phone"},
                {"width": 1280, "height": 800, "name": "Tablet"},
            ],
            views=[{"name": "Home", "path": "/"}, {"name": "About Us", "path": "/about"}],
        )
        plans = plan_captures(config)
        names = [job.output_path.name for plan in plans for job in plan.captures]
        assert names == [
            "home_phone.png",
            "home_tablet.png",
            "about_us_phone.png",
            "about_us_tablet.png",
        ]

    def test_paths_unique_across_scroll_and_frame_variants(self) -> None:
        base = {"width": 375, "height": 812, "name": "Phone"}
        config = _config(
            [
                base,
                {**base, "scrollY": 100},
                {**base, "scrollX": 100},
                {**base, "useDeviceFrame": True},
                {**base, "useDeviceFrame": True, "iphoneOptions": {"pill": False}},
                {**base, "useDeviceFrame": True, "deviceType": "android"},
            ]
        )
        paths = [job.output_path for plan in plan_captures(config) for job in plan.captures]
        assert len(paths) == len(set(paths)) == 6

    def test_colliding_sanitized_names_rejected(self) -> None:
        config = _config(
            [
                {"width": 375, "height": 812, "name": "iPhone X"},
                {"width": 390, "height": 844, "name": "iphone-x"},
            ]
        )
        with pytest.raises(ConfigError, match="would overwrite"):
            plan_captures(config)

    def test_colliding_view_names_rejected(self) -> None:
        config = _config(
            [{"width": 1, "height": 1, "name": "a"}],
            views=[{"name": "My Page", "path": "/a"}, {"name": "my_page", "path": "/b"}],
        )
        with pytest.raises(ConfigError):
            plan_captures(config)

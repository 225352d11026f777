"""Expands a config into the ordered list of captures and their output paths."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from expo_screenshotter.exceptions import ConfigError
from expo_screenshotter.models.config import EffectiveSizeOptions, resolve_size_options
from expo_screenshotter.types import DeviceType
from expo_screenshotter.utils.sanitize import sanitize_filename

if TYPE_CHECKING:
    from expo_screenshotter.models.config import ScreenshotConfig, View


@dataclass(frozen=True)
class CaptureJob:
    """One (view, size) pair with its resolved options and target file."""

    view: View
    options: EffectiveSizeOptions
    output_path: Path


@dataclass
class ViewPlan:
    view: View
    directory: Path
    captures: list[CaptureJob] = field(default_factory=list)


def frame_suffix(options: EffectiveSizeOptions) -> str:
    """Variant suffix for framed captures, empty when framing is off."""
    if not options.use_device_frame:
        return ""
    if options.device_type == DeviceType.ANDROID:
        android = options.android_options
        return f"_android_{android.size}_{sanitize_filename(android.color)}"
    iphone = options.iphone_options
    style = "pill" if iphone.pill else "notch"
    return f"_iphone_{style}_{sanitize_filename(iphone.color)}"


def build_filename(view_name: str, options: EffectiveSizeOptions) -> str:
    """``<view>_<size>[_scroll_x{X}_y{Y}][_<device>_<variant>].png``"""
    filename = f"{sanitize_filename(view_name)}_{sanitize_filename(options.name)}"
    if options.is_scrolled:
        filename += f"_scroll_x{options.scroll_x}_y{options.scroll_y}"
    return filename + frame_suffix(options) + ".png"


def plan_captures(config: ScreenshotConfig) -> list[ViewPlan]:
    """Resolve every size once and assign each pair a unique output path.

    Raises ConfigError when two pairs would write the same file, which can
    happen when distinct names sanitize to the same string.
    """
    output_dir = Path(config.output_dir)
    resolved = [resolve_size_options(config, size) for size in config.sizes]
    seen: dict[Path, tuple[str, str]] = {}
    plans: list[ViewPlan] = []

    for view in config.views:
        directory = output_dir / sanitize_filename(view.name)
        plan = ViewPlan(view=view, directory=directory)
        for options in resolved:
            path = directory / build_filename(view.name, options)
            if path in seen:
                other_view, other_size = seen[path]
                msg = (
                    f"View {view.name!r} / size {options.name!r} would overwrite "
                    f"{path} from view {other_view!r} / size {other_size!r}"
                )
                raise ConfigError(msg)
            seen[path] = (view.name, options.name)
            plan.captures.append(CaptureJob(view=view, options=options, output_path=path))
        plans.append(plan)

    return plans

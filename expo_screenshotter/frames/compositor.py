"""Device frame compositor: bezel overlay, rounded clipping, cover-fit resize."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog
from PIL import Image

from expo_screenshotter.constants import (
    ANDROID_MEDIUM_RADIUS_FRACTION,
    DEFAULT_RADIUS_FRACTION,
    IPHONE_NOTCH_RADIUS_FRACTION,
    IPHONE_PILL_RADIUS_FRACTION,
)
from expo_screenshotter.exceptions import AssetMissingError, OutputError
from expo_screenshotter.frames.assets import FrameAsset, FrameAssetResolver
from expo_screenshotter.frames.imaging import ImageCompositor, PillowCompositor
from expo_screenshotter.models.config import AndroidOptions, IPhoneOptions
from expo_screenshotter.types import AndroidSize, DeviceType

if TYPE_CHECKING:
    from pathlib import Path

logger = structlog.get_logger(__name__)


@dataclass
class FrameResult:
    """Outcome of framing one screenshot."""

    path: Path
    framed: bool
    asset_path: Path | None = None
    substituted: bool = False
    resized: bool = False


def corner_radius_fraction(
    device_type: DeviceType,
    options: IPhoneOptions | AndroidOptions,
    substituted: bool = False,
) -> float:
    """Screen corner radius as a fraction of the shorter screenshot side."""
    if device_type == DeviceType.ANDROID:
        # A substituted Android bezel is treated as the compact shape
        if (
            not substituted
            and isinstance(options, AndroidOptions)
            and options.size == AndroidSize.MEDIUM
        ):
            return ANDROID_MEDIUM_RADIUS_FRACTION
        return DEFAULT_RADIUS_FRACTION
    if isinstance(options, IPhoneOptions) and not options.pill:
        return IPHONE_NOTCH_RADIUS_FRACTION
    return IPHONE_PILL_RADIUS_FRACTION


class DeviceFrameCompositor:
    """Wraps a raw capture in a device bezel.

    Never aborts a run for a missing or unreadable bezel: the screenshot is
    passed through unchanged instead. Only failing to write output is fatal.
    """

    def __init__(
        self,
        resolver: FrameAssetResolver | None = None,
        imaging: ImageCompositor | None = None,
    ) -> None:
        self._resolver = resolver or FrameAssetResolver()
        self._imaging = imaging or PillowCompositor()

    def apply(
        self,
        screenshot_path: Path,
        device_type: DeviceType,
        options: IPhoneOptions | AndroidOptions,
        output_path: Path | None = None,
    ) -> FrameResult:
        """Frame ``screenshot_path`` and write to ``output_path`` (in place by default)."""
        output_path = output_path or screenshot_path
        try:
            asset = self._resolver.resolve(device_type, options)
        except AssetMissingError as e:
            logger.warning("frame_skipped", screenshot=str(screenshot_path), reason=str(e))
            return self._pass_through(screenshot_path, output_path)

        try:
            framed = self._composite(screenshot_path, asset, device_type, options)
        except (OSError, Image.DecompressionBombError) as e:
            logger.error(
                "frame_composite_failed",
                screenshot=str(screenshot_path),
                asset=str(asset.path),
                error=str(e),
            )
            return self._pass_through(screenshot_path, output_path)

        resized = False
        target = options.target_size
        if target:
            logger.debug("frame_resize", width=target[0], height=target[1])
            framed = self._imaging.resize_cover_fit(framed, *target)
            resized = True

        self._save(framed, output_path)
        logger.info(
            "frame_applied",
            path=str(output_path),
            asset=asset.path.name,
            size=f"{framed.width}x{framed.height}",
        )
        return FrameResult(
            path=output_path,
            framed=True,
            asset_path=asset.path,
            substituted=asset.substituted,
            resized=resized,
        )

    def _composite(
        self,
        screenshot_path: Path,
        asset: FrameAsset,
        device_type: DeviceType,
        options: IPhoneOptions | AndroidOptions,
    ) -> Image.Image:
        with Image.open(screenshot_path) as shot, Image.open(asset.path) as bezel:
            shot.load()
            bezel.load()
            fraction = corner_radius_fraction(device_type, options, asset.substituted)
            radius = min(shot.size) * fraction
            return self._imaging.composite(shot, bezel, radius)

    def _pass_through(self, screenshot_path: Path, output_path: Path) -> FrameResult:
        if output_path != screenshot_path:
            try:
                shutil.copyfile(screenshot_path, output_path)
            except OSError as e:
                msg = f"Failed to copy {screenshot_path} to {output_path}: {e}"
                raise OutputError(msg) from e
        return FrameResult(path=output_path, framed=False)

    def _save(self, image: Image.Image, output_path: Path) -> None:
        try:
            image.save(output_path, format="PNG")
        except OSError as e:
            msg = f"Failed to write framed screenshot {output_path}: {e}"
            raise OutputError(msg) from e


def apply_device_frame(
    screenshot_path: Path,
    device_type: DeviceType,
    options: IPhoneOptions | AndroidOptions,
    assets_dir: str | Path | None = None,
) -> Path:
    """Frame a screenshot in place and return its path.

    The file is left untouched when no bezel is available.
    """
    compositor = DeviceFrameCompositor(resolver=FrameAssetResolver(assets_dir=assets_dir))
    return compositor.apply(screenshot_path, device_type, options).path

"""Locates device bezel images on disk."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import structlog

from expo_screenshotter.constants import ANDROID_ASSET_DIR, IPHONE_ASSET_DIR
from expo_screenshotter.exceptions import AssetMissingError
from expo_screenshotter.models.config import AndroidOptions, IPhoneOptions
from expo_screenshotter.types import DeviceType

logger = structlog.get_logger(__name__)

PACKAGE_ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"

_DEVICE_DIRS = {
    DeviceType.IPHONE: IPHONE_ASSET_DIR,
    DeviceType.ANDROID: ANDROID_ASSET_DIR,
}


def _title(word: str) -> str:
    return word[:1].upper() + word[1:]


def iphone_asset_name(options: IPhoneOptions) -> str:
    """e.g. ``Pill=true, Color=Space Black.png`` (note the capital ``False``)."""
    pill = "true" if options.pill else "False"
    return f"Pill={pill}, Color={options.color}.png"


def android_asset_name(options: AndroidOptions) -> str:
    """e.g. ``Android Medium Black.png``."""
    return f"Android {_title(options.size)} {_title(options.color)}.png"


def candidate_roots(assets_dir: str | Path | None = None) -> list[Path]:
    """Asset roots to search, most specific first."""
    roots: list[Path] = []
    if assets_dir:
        roots.append(Path(assets_dir).expanduser())
    cwd = Path.cwd()
    roots.extend([PACKAGE_ASSETS_DIR, cwd / "assets", cwd / "src" / "assets"])
    return roots


@dataclass(frozen=True)
class FrameAsset:
    path: Path
    substituted: bool = False


class FrameAssetResolver:
    """Maps a device type and its options to a bezel file."""

    def __init__(
        self, assets_dir: str | Path | None = None, roots: list[Path] | None = None
    ) -> None:
        self._roots = roots if roots is not None else candidate_roots(assets_dir)

    @property
    def root(self) -> Path:
        """First root holding an ``iphones`` or ``android`` folder, else the first candidate."""
        for root in self._roots:
            if (root / IPHONE_ASSET_DIR).is_dir() or (root / ANDROID_ASSET_DIR).is_dir():
                return root
        return self._roots[0]

    def asset_dir(self, device_type: DeviceType) -> Path:
        return self.root / _DEVICE_DIRS[device_type]

    def expected_name(
        self, device_type: DeviceType, options: IPhoneOptions | AndroidOptions
    ) -> str:
        if device_type == DeviceType.ANDROID:
            if not isinstance(options, AndroidOptions):
                options = AndroidOptions()
            return android_asset_name(options)
        if not isinstance(options, IPhoneOptions):
            options = IPhoneOptions()
        return iphone_asset_name(options)

    def resolve(
        self, device_type: DeviceType, options: IPhoneOptions | AndroidOptions
    ) -> FrameAsset:
        """Return the requested bezel, or the first PNG in the device folder.

        Raises AssetMissingError when the folder is missing or holds no PNGs.
        """
        directory = self.asset_dir(device_type)
        expected = directory / self.expected_name(device_type, options)
        logger.debug("frame_asset_lookup", path=str(expected))
        if expected.is_file():
            return FrameAsset(path=expected)

        available = []
        if directory.is_dir():
            available = sorted(
                p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == ".png"
            )
        if not available:
            msg = f"No {device_type} frames found in {directory}"
            raise AssetMissingError(msg)

        substitute = available[0]
        logger.warning(
            "frame_asset_substituted",
            device=str(device_type),
            requested=expected.name,
            substitute=substitute.name,
        )
        return FrameAsset(path=substitute, substituted=True)

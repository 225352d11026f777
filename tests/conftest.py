"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

from expo_screenshotter.config.settings import get_settings

PngFactory = Callable[..., Path]


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def write_png(
    path: Path,
    size: tuple[int, int] = (100, 200),
    color: tuple[int, ...] = (200, 30, 30, 255),
) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", size, color).save(path, format="PNG")
    return path


def write_bezel(path: Path, size: tuple[int, int] = (120, 240), border: int = 10) -> Path:
    """A bezel: opaque black border around a fully transparent screen area."""
    path.parent.mkdir(parents=True, exist_ok=True)
    bezel = Image.new("RGBA", size, (0, 0, 0, 255))
    width, height = size
    bezel.paste((0, 0, 0, 0), (border, border, width - border, height - border))
    bezel.save(path, format="PNG")
    return path


@pytest.fixture()
def png_factory(tmp_path: Path) -> PngFactory:
    """Write solid-color PNGs under tmp_path."""

    def _make(name: str = "shot.png", **kwargs: object) -> Path:
        return write_png(tmp_path / name, **kwargs)  # type: ignore[arg-type]

    return _make


@pytest.fixture()
def assets_root(tmp_path: Path) -> Path:
    """Asset root with a couple of iPhone and Android bezels."""
    root = tmp_path / "assets"
    write_bezel(root / "iphones" / "Pill=true, Color=Space Black.png")
    write_bezel(root / "iphones" / "Pill=False, Color=Midnight.png")
    write_bezel(root / "android" / "Android Medium Black.png")
    write_bezel(root / "android" / "Android Compact Silver.png")
    return root

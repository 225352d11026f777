"""Screenshot configuration schema with Pydantic validation.

The JSON file uses camelCase keys (``expoUrl``, ``scrollY``, ``iphoneOptions``);
the models expose snake_case attributes and accept either spelling.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from expo_screenshotter.constants import (
    DEFAULT_ANDROID_COLOR,
    DEFAULT_ANDROID_SIZE,
    DEFAULT_IPHONE_COLOR,
    DEFAULT_IPHONE_PILL,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_WAIT_TIME_MS,
)
from expo_screenshotter.exceptions import ConfigError
from expo_screenshotter.types import AndroidColor, AndroidSize, DeviceType


class _ConfigModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Interaction(_ConfigModel):
    # Unknown types and missing fields are skipped at replay time, not rejected here
    type: str
    selector: str | None = None
    text: str | None = None
    wait_time: int | None = None


class View(_ConfigModel):
    name: str
    path: str
    interactions: list[Interaction] = Field(default_factory=list)
    wait_after_interactions: int | None = None


class IPhoneOptions(_ConfigModel):
    pill: bool = DEFAULT_IPHONE_PILL
    color: str = DEFAULT_IPHONE_COLOR
    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)

    @property
    def target_size(self) -> tuple[int, int] | None:
        if self.width and self.height:
            return self.width, self.height
        return None


class AndroidOptions(_ConfigModel):
    size: AndroidSize = AndroidSize(DEFAULT_ANDROID_SIZE)
    color: AndroidColor = AndroidColor(DEFAULT_ANDROID_COLOR)
    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)

    @property
    def target_size(self) -> tuple[int, int] | None:
        if self.width and self.height:
            return self.width, self.height
        return None


class ScreenSize(_ConfigModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    name: str
    scroll_x: int = 0
    scroll_y: int = 0
    full_page: bool | None = None
    use_device_frame: bool | None = None
    device_type: DeviceType | None = None
    iphone_options: IPhoneOptions | None = None
    android_options: AndroidOptions | None = None


class ScreenshotConfig(_ConfigModel):
    views: list[View] = Field(default_factory=list)
    sizes: list[ScreenSize] = Field(default_factory=list)
    output_dir: str = DEFAULT_OUTPUT_DIR
    expo_url: str
    wait_for_selector: str | None = None
    wait_time: int = DEFAULT_WAIT_TIME_MS
    full_page: bool = False
    use_device_frame: bool = False
    device_type: DeviceType | None = None
    iphone_options: IPhoneOptions | None = None
    android_options: AndroidOptions | None = None
    generate_report: bool = False

    @classmethod
    def from_json(cls, json_str: str) -> ScreenshotConfig:
        """Parse a JSON document into a ScreenshotConfig."""
        try:
            raw = json.loads(json_str)
        except json.JSONDecodeError as e:
            msg = f"Configuration is not valid JSON: {e}"
            raise ConfigError(msg) from e
        if not isinstance(raw, dict):
            msg = "Configuration must be a JSON object"
            raise ConfigError(msg)
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            msg = f"Invalid configuration: {e}"
            raise ConfigError(msg) from e

    def to_json(self) -> str:
        """Serialize config back to camelCase JSON."""
        return self.model_dump_json(by_alias=True, exclude_unset=True, indent=2)


class EffectiveSizeOptions(BaseModel):
    """One screen size with every global default folded in."""

    model_config = ConfigDict(frozen=True)

    name: str
    width: int
    height: int
    scroll_x: int = 0
    scroll_y: int = 0
    full_page: bool = False
    use_device_frame: bool = False
    device_type: DeviceType = DeviceType.IPHONE
    iphone_options: IPhoneOptions = Field(default_factory=IPhoneOptions)
    android_options: AndroidOptions = Field(default_factory=AndroidOptions)

    @property
    def is_scrolled(self) -> bool:
        return self.scroll_x > 0 or self.scroll_y > 0

    @property
    def frame_options(self) -> IPhoneOptions | AndroidOptions:
        if self.device_type == DeviceType.ANDROID:
            return self.android_options
        return self.iphone_options


def _pick(size: ScreenSize, field: str, default: Any) -> Any:
    """Return the size's own value when the key was given, else the default."""
    if field in size.model_fields_set:
        return getattr(size, field)
    return default


def resolve_size_options(config: ScreenshotConfig, size: ScreenSize) -> EffectiveSizeOptions:
    """Merge size-level overrides onto the config-level defaults.

    A key explicitly present on the size wins even when its value is falsy,
    so ``fullPage: false`` on a size beats a global ``fullPage: true``.
    """
    device_type = _pick(size, "device_type", config.device_type)
    iphone_options = _pick(size, "iphone_options", config.iphone_options)
    android_options = _pick(size, "android_options", config.android_options)
    return EffectiveSizeOptions(
        name=size.name,
        width=size.width,
        height=size.height,
        scroll_x=size.scroll_x,
        scroll_y=size.scroll_y,
        full_page=bool(_pick(size, "full_page", config.full_page)),
        use_device_frame=bool(_pick(size, "use_device_frame", config.use_device_frame)),
        device_type=device_type or DeviceType.IPHONE,
        iphone_options=iphone_options or IPhoneOptions(),
        android_options=android_options or AndroidOptions(),
    )


def load_config(path: Path) -> ScreenshotConfig:
    """Read and validate a configuration file."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        msg = f"Configuration file not found: {path}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Could not read configuration file {path}: {e}"
        raise ConfigError(msg) from e
    return ScreenshotConfig.from_json(text)


def save_config(config: ScreenshotConfig, path: Path) -> None:
    """Write a configuration file as indented camelCase JSON."""
    path.write_text(config.to_json() + "\n", encoding="utf-8")


def default_config() -> ScreenshotConfig:
    """Starter configuration written by ``expo-screenshotter init``."""
    return ScreenshotConfig.model_validate(
        {
            "views": [
                {"name": "Home", "path": "/"},
                {
                    "name": "Form with Input",
                    "path": "/form",
                    "interactions": [
                        {
                            "type": "type",
                            "selector": 'input[placeholder="First Name"]',
                            "text": "Jace",
                        },
                        {"type": "wait", "waitTime": 500},
                        {
                            "type": "type",
                            "selector": 'input[placeholder="Last Name"]',
                            "text": "Sleeman",
                        },
                        {"type": "wait", "waitTime": 1000},
                    ],
                    "waitAfterInteractions": 1000,
                },
                {
                    "name": "Button Click",
                    "path": "/buttons",
                    "interactions": [
                        {"type": "click", "selector": 'div.css-view-175oi2r[tabindex="0"]'},
                        {"type": "wait", "waitTime": 2000},
                    ],
                    "waitAfterInteractions": 1000,
                },
            ],
            "sizes": [
                {"width": 375, "height": 812, "name": "iPhone X"},
                {"width": 1280, "height": 800, "name": "Tablet"},
                {"width": 2560, "height": 1440, "name": "Desktop"},
                {"width": 375, "height": 812, "name": "iPhone X Scrolled", "scrollY": 500},
                {"width": 1280, "height": 800, "name": "Tablet Full Page", "fullPage": True},
                {
                    "width": 375,
                    "height": 812,
                    "name": "iPhone X with Frame",
                    "useDeviceFrame": True,
                    "deviceType": "iphone",
                    "iphoneOptions": {"pill": True, "color": "Space Black"},
                },
                {
                    "width": 375,
                    "height": 812,
                    "name": "iPhone X with Notch Frame",
                    "useDeviceFrame": True,
                    "deviceType": "iphone",
                    "iphoneOptions": {"pill": False, "color": "Midnight"},
                },
                {
                    "width": 360,
                    "height": 740,
                    "name": "Android with Frame",
                    "useDeviceFrame": True,
                    "deviceType": "android",
                },
            ],
            "outputDir": DEFAULT_OUTPUT_DIR,
            "expoUrl": "http://localhost:8081",
            "waitTime": 2000,
            "useDeviceFrame": False,
        }
    )

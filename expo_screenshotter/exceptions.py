"""Exception hierarchy for expo-screenshotter."""


class ScreenshotterError(Exception):
    """Base exception for all expo-screenshotter errors."""


class ConfigError(ScreenshotterError):
    """Raised when configuration is missing or invalid."""


class BrowserError(ScreenshotterError):
    """Raised when the browser is used before it is launched."""


class NavigationError(ScreenshotterError):
    """Raised when a view cannot be loaded. Aborts the run."""


class SelectorTimeoutError(ScreenshotterError):
    """Raised when a selector does not appear in time. Never aborts the run."""


class InteractionError(ScreenshotterError):
    """Raised when an interaction step is missing a required field."""


class AssetMissingError(ScreenshotterError):
    """Raised when no usable frame asset exists for a device."""


class OutputError(ScreenshotterError):
    """Raised when an output directory or file cannot be written."""

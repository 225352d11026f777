"""Timing, naming and calibration constants for the capture pipeline."""

# Page-level waits (milliseconds)
DEFAULT_WAIT_TIME_MS = 1000
DEFAULT_NAVIGATION_TIMEOUT_MS = 30_000
WAIT_FOR_SELECTOR_TIMEOUT_MS = 30_000
VIEWPORT_SETTLE_MS = 500
SCROLL_SETTLE_MS = 300

# Interaction replay
INTERACTION_SELECTOR_TIMEOUT_MS = 5000
INTERACTION_SETTLE_MS = 300
DEFAULT_INTERACTION_WAIT_MS = 1000

# Initial viewport before the first size is applied
DEFAULT_VIEWPORT_WIDTH = 1280
DEFAULT_VIEWPORT_HEIGHT = 800

DEFAULT_OUTPUT_DIR = "./screenshots"
DEFAULT_CONFIG_FILENAME = "expo-screenshotter.json"

# Frame assets
IPHONE_ASSET_DIR = "iphones"
ANDROID_ASSET_DIR = "android"
DEFAULT_IPHONE_COLOR = "Space Black"
DEFAULT_IPHONE_PILL = True
DEFAULT_ANDROID_SIZE = "medium"
DEFAULT_ANDROID_COLOR = "black"

# Corner radius as a fraction of min(width, height). Calibrated for the
# standard bezel artwork; other asset sets need new values.
IPHONE_PILL_RADIUS_FRACTION = 0.32
IPHONE_NOTCH_RADIUS_FRACTION = 0.30
ANDROID_MEDIUM_RADIUS_FRACTION = 0.06
DEFAULT_RADIUS_FRACTION = 0.30

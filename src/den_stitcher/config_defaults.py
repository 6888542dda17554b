"""Shared default values for user-facing configuration settings."""
from den_stitcher.type_defs import FitMode, LayoutMode

# Site
DEFAULT_ORIGIN = "https://www.bearish.af"
DEFAULT_DEN_PATH = "/den"
DEFAULT_TAB_PARAM = "tab"
DEFAULT_ALT_TAB = "hibernate"
DEFAULT_ALT_PREFIX = "BEARISH #"

# Layout
DEFAULT_LAYOUT_MODE: LayoutMode = "tight"
DEFAULT_PADDING = 16
DEFAULT_BACKGROUND = "#ffffff"
DEFAULT_FIT_MODE: FitMode = "contain"

# Harvest
DEFAULT_SETTLE_DELAY_MS = 700
DEFAULT_SINGLE_PAGE_MAX_IMAGES = 800
DEFAULT_MAX_DUAL_IMAGES = 800
DEFAULT_NAVIGATION_TIMEOUT_S = 30.0
DEFAULT_LOAD_CONCURRENCY = 6

# Output
DEFAULT_OUTPUT_DIR = "out"
DEFAULT_PREFERENCES_FILE = "preferences.toml"

# Browser
DEFAULT_HEADLESS = True

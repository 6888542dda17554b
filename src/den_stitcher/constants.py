"""
Constants used internally by the stitcher.

These are implementation-level values that should not be overridden
via config files or CLI arguments.
"""

# Internal color constants
COLOR_MODE_RGB = "RGB"
COLOR_WHITE = (255, 255, 255)

# Export
PNG_FORMAT = "PNG"
PNG_MIME_TYPE = "image/png"

# Artifact naming
SCOPE_LABELS = {"single": "single", "dual": "dual"}
LAYOUT_LABELS = {"tight": "tight-grid", "square": "perfect-square"}

# Preference keys
PREF_LAYOUT_MODE = "layout_mode"

# Browser
READY_EVENT = "load"

"""
host_settings.py
----------------
Centralized constants for the addon host.
"""


# ===========================================================
# Display
# ===========================================================

class Display:
    """Virtual screen used as the root layout rect."""
    WIDTH: int = 1024
    HEIGHT: int = 768


# ===========================================================
# Frame Ordering
# ===========================================================

class Strata:
    """Frame strata names in draw order (lowest first)."""
    ORDER = (
        "WORLD",
        "BACKGROUND",
        "LOW",
        "MEDIUM",
        "HIGH",
        "DIALOG",
        "FULLSCREEN",
        "FULLSCREEN_DIALOG",
        "TOOLTIP",
    )
    DEFAULT: str = "MEDIUM"
    ROOT_FRAME_NAME: str = "UIParent"


# ===========================================================
# Timing
# ===========================================================

class Timing:
    """Timer and update loop configuration."""
    UPDATE_RATE: int = 60
    FIXED_DT: float = 1 / UPDATE_RATE


# ===========================================================
# Paths
# ===========================================================

class Paths:
    """Default locations of host config files."""
    CONFIG_DIR: str = "config"
    HOST_CONFIG: str = "host.yaml"
    TEMPLATES: str = "templates.yaml"


DEFAULT_CONFIG = {
    "display": {
        "width": Display.WIDTH,
        "height": Display.HEIGHT,
    },
    "create_ui_parent": True,
    "templates": Paths.TEMPLATES,
    "logging": {},
}

"""
Centralized constants for widgetdeck.

Values that the layout engine, the Textual shell and the CLI share live here
so the three stay in agreement about keys, paths and sizes.
"""

import os
from pathlib import Path

# =============================================================================
# PATHS
# =============================================================================

WIDGETDECK_CONFIG_DIR = Path(
    os.environ.get("WIDGETDECK_CONFIG_DIR", str(Path.home() / ".config" / "widgetdeck"))
)
LAYOUT_STORE_FILENAME = "layouts.json"
LOG_FILENAME = "widgetdeck.log"

# =============================================================================
# LAYOUT SCOPES
# =============================================================================

# Persistence key prefix; a scope "main" is stored under "layout:main"
LAYOUT_KEY_PREFIX = "layout:"

SCOPE_MAIN = "main"
SCOPE_RIGHT_RAIL = "right-rail"
SCOPE_LEFT_RAIL = "left-rail"

# =============================================================================
# SIZING
# =============================================================================

# Height snaps are expressed in pixels; the terminal renderer converts to rows
PIXELS_PER_ROW = 25

# Rows scrolled per wheel notch when routing input to a dashboard region
DEFAULT_WHEEL_STEP = 3

# =============================================================================
# ENVIRONMENT VARIABLES
# =============================================================================

ENV_VAR_DEFINITIONS: dict[str, dict] = {
    "WIDGETDECK_CONFIG_DIR": {
        "description": "Directory holding layouts.json and log files",
        "default": None,
        "valid_values": None,
    },
    "WIDGETDECK_WHEEL_STEP": {
        "description": "Rows scrolled per mouse-wheel notch in dashboard regions",
        "default": str(DEFAULT_WHEEL_STEP),
        "valid_values": None,
    },
    "WIDGETDECK_LOG_LEVEL": {
        "description": "Log level for widgetdeck loggers",
        "default": "INFO",
        "valid_values": ["DEBUG", "INFO", "WARNING", "ERROR"],
    },
}

"""
Centralized configuration constants for the dashboard widget engine.

Hard-coded values used across the layout, storage and quote layers live
here so they can be changed in one place.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class LayoutDefaults:
    """Default geometry for dashboard widgets."""

    MENU_WIDGET_ID: str = "menu"
    MENU_X: int = 0
    MENU_Y: int = 0
    MENU_WIDTH: int = 2
    MENU_HEIGHT: int = 1

    # New ticker cards
    TICKER_WIDTH: int = 3
    TICKER_HEIGHT: int = 2
    TICKER_X: int = 0

    # Grid geometry handed to the renderer
    GRID_COLUMNS: int = 12
    GRID_ROW_HEIGHT: int = 100


@dataclass(frozen=True)
class StorageKeys:
    """Keys used on the key-value persistence boundary."""

    LAYOUT: str = "dashboard-layout"
    TICKERS: str = "dashboard-tickers"
    MENU_POSITION: str = "dashboard-menu-position"


@dataclass(frozen=True)
class QuoteDefaults:
    """Sentinels and labels for quote records."""

    UNKNOWN: str = "unknown"
    NOT_AVAILABLE: str = "not-available"
    UNKNOWN_NAME: str = "Unknown"


MENU_POSITIONS: Tuple[str, ...] = ("top", "bottom", "left", "right")

# Global configuration instances
LAYOUT_DEFAULTS = LayoutDefaults()
STORAGE_KEYS = StorageKeys()
QUOTE_DEFAULTS = QuoteDefaults()


def get_config_summary() -> Dict[str, Any]:
    """Get a summary of all configuration values for debugging."""
    return {
        "layout_defaults": LAYOUT_DEFAULTS.__dict__,
        "storage_keys": STORAGE_KEYS.__dict__,
        "quote_defaults": QUOTE_DEFAULTS.__dict__,
        "menu_positions": list(MENU_POSITIONS),
    }

from pydantic import BaseModel, Field
from typing import Literal

from .constants import LAYOUT_DEFAULTS


class StorageConfig(BaseModel):
    """Where the dashboard snapshot is kept."""
    backend: Literal["file", "memory"] = "file"
    directory: str = ".tickerdash"  # One file per key lives here


class ProviderConfig(BaseModel):
    """Quote provider selection."""
    name: Literal["yahoo", "mock"] = "yahoo"


class LayoutConfig(BaseModel):
    """Placement of new widgets and grid geometry."""
    placement: Literal["sentinel", "explicit"] = "sentinel"  # explicit = compute bottom row
    ticker_width: int = Field(default=LAYOUT_DEFAULTS.TICKER_WIDTH, ge=1)
    ticker_height: int = Field(default=LAYOUT_DEFAULTS.TICKER_HEIGHT, ge=1)
    columns: int = Field(default=LAYOUT_DEFAULTS.GRID_COLUMNS, ge=1)
    row_height: int = Field(default=LAYOUT_DEFAULTS.GRID_ROW_HEIGHT, ge=1)  # pixels


class CompareConfig(BaseModel):
    """Compare overlay behaviour."""
    auto_open: bool = False  # Open the compare overlay after add_compare_ticker


class LoggingConfig(BaseModel):
    """Logging options passed to setup_logging."""
    level: str = "INFO"
    log_to_file: bool = False
    log_file_path: str = "logs/tickerdash.log"


class DashboardSettings(BaseModel):
    """Complete dashboard configuration."""
    name: str = "default_dashboard"
    description: str | None = None

    storage: StorageConfig = StorageConfig()
    provider: ProviderConfig = ProviderConfig()
    layout: LayoutConfig = LayoutConfig()
    compare: CompareConfig = CompareConfig()
    logging: LoggingConfig = LoggingConfig()

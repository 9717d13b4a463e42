import yaml
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from .schema import DashboardSettings
from ..exceptions import ConfigurationError


def load_settings(config_path: str | Path) -> DashboardSettings:
    """Load dashboard settings from a YAML file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        try:
            config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if config_data is None:
        config_data = {}
    if not isinstance(config_data, dict):
        raise ConfigurationError(f"Top level of {config_path} must be a mapping")

    try:
        return DashboardSettings(**config_data)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e


def load_settings_or_default(config_path: Optional[str | Path] = None) -> DashboardSettings:
    """Load settings from a file, or return defaults when no path is given."""
    if config_path is None:
        return DashboardSettings()
    return load_settings(config_path)


def get_default_config_path() -> Path:
    """Get path to default configuration file."""
    # Look for configs directory relative to this file
    current_dir = Path(__file__).parent
    project_root = current_dir.parent.parent.parent  # Go up to project root
    configs_dir = project_root / "configs"

    return configs_dir / "default_dashboard.yaml"


def create_example_config(output_path: str | Path) -> None:
    """Create an example configuration file."""
    example_config = {
        'name': 'example_dashboard',
        'description': 'Example configuration showing all available options',
        'storage': {
            'backend': 'file',
            'directory': '.tickerdash',
        },
        'provider': {
            'name': 'yahoo',
        },
        'layout': {
            'placement': 'sentinel',
            'ticker_width': 3,
            'ticker_height': 2,
            'columns': 12,
            'row_height': 100,
        },
        'compare': {
            'auto_open': False,
        },
        'logging': {
            'level': 'INFO',
            'log_to_file': False,
            'log_file_path': 'logs/tickerdash.log',
        },
    }

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        yaml.dump(example_config, f, default_flow_style=False, indent=2)

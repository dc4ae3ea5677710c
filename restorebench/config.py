"""Loading of the YAML run configuration."""
import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from restorebench.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"

DEFAULTS: Dict[str, Any] = {
    'input_path': 'data/6000Msg.csv',
    'output_dir': 'data',
    'strict_numeric': False,
    'charts': {
        'x_label': '#replicas=4',
        'width_in': 3,
        'height_in': 3,
        'bar_width_cm': 0.5,
        'error_bars': False,
        'restore_duration': {'filename': 'Restore_Duration.png', 'y_label': 'Restore Duration(sec)'},
        'memory_footprint': {'filename': 'Memory_Footprint.png', 'y_label': 'Memory Footprint(KiB)'},
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _require(condition: bool, config_path: Path, message: str) -> None:
    if not condition:
        raise ConfigError(f"Invalid configuration in {config_path}: {message}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: Dict[str, Any], config_path: Path) -> Dict[str, Any]:
    """Checks the merged configuration so bad values fail as ConfigError."""
    for key in ('input_path', 'output_dir'):
        _require(isinstance(config.get(key), str) and config[key] != '', config_path, f"'{key}' must be a non-empty string")
    _require(isinstance(config.get('strict_numeric'), bool), config_path, "'strict_numeric' must be true or false")

    charts = config.get('charts')
    _require(isinstance(charts, dict), config_path, "'charts' must be a mapping")
    _require(isinstance(charts.get('x_label'), str), config_path, "'charts.x_label' must be a string")
    _require(isinstance(charts.get('error_bars'), bool), config_path, "'charts.error_bars' must be true or false")
    for key in ('width_in', 'height_in', 'bar_width_cm'):
        _require(_is_number(charts.get(key)) and charts[key] > 0, config_path, f"'charts.{key}' must be a positive number")
    for key in ('restore_duration', 'memory_footprint'):
        settings = charts.get(key)
        _require(isinstance(settings, dict), config_path, f"'charts.{key}' must be a mapping")
        for field in ('filename', 'y_label'):
            _require(isinstance(settings.get(field), str), config_path, f"'charts.{key}.{field}' must be a string")
    return config


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Returns the defaults overlaid with the YAML file at ``path``."""
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    logger.info(f"Loading configuration from {config_path}...")
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load configuration from {config_path}: {e}") from e

    if config_data is None:
        logger.warning(f"Configuration file {config_path} is empty, using defaults.")
        config_data = {}
    if not isinstance(config_data, dict):
        raise ConfigError(f"Configuration in {config_path} must be a mapping")
    return validate_config(_merge(DEFAULTS, config_data), config_path)

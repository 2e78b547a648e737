"""Configuration loading utilities."""

from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR = Path(__file__).parent


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML config file from the config/ directory.

    Absolute paths are read as-is so deployments can point at their own file.
    """
    config_path = Path(filename)
    if not config_path.is_absolute():
        config_path = CONFIG_DIR / filename
    with open(config_path) as f:
        return yaml.safe_load(f)

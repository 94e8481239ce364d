"""
YAML configuration file loader for the grid planners.

This module provides utilities to load and validate YAML configuration files
for grid setup and algorithm parameters.
"""

import yaml
from typing import Dict, Any
from pathlib import Path

REQUIRED_ENVIRONMENT_KEYS = ('grid_size', 'start_point', 'goal_point')


def load_yaml_config(filepath: str) -> Dict[str, Any]:
    """
    Read one YAML file into a dictionary.

    An empty file reads as an empty dictionary, so a section can be left
    out entirely and the planner falls back to its defaults.

    Raises:
        FileNotFoundError: If the file is missing
        yaml.YAMLError: If PyYAML cannot parse it; the message names the file
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    with filepath.open('r') as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Error parsing YAML file {filepath}: {e}")
    return config or {}


def load_environment_config(config_dir: str = 'configs') -> Dict[str, Any]:
    """
    Load grid configuration from environment.yaml.

    Args:
        config_dir: Directory containing config files (default: 'configs')

    Returns:
        Dictionary with grid parameters:
        - grid_size: number of rows/columns
        - start_point: {x, y}
        - goal_point: {x, y}
        - random_obstacles: whether to generate a random grid
        - obstacle_seed: seed for the random grid (optional)
        - obstacles: list of [x, y] cells (used when random_obstacles is false)

    Raises:
        ValueError: If a required key is missing
    """
    config_path = Path(config_dir) / 'environment.yaml'
    config = load_yaml_config(str(config_path)).get('environment', {})

    for key in REQUIRED_ENVIRONMENT_KEYS:
        if key not in config:
            raise ValueError(f"Missing required environment key '{key}' in {config_path}")

    return config


def load_algorithm_config(algorithm_name: str, config_dir: str = 'configs') -> Dict[str, Any]:
    """
    Read the ``algorithm`` section of ``<config_dir>/<algorithm_name>.yaml``.

    For RRT this holds ``parameters`` (threshold, max_iter_factor,
    random_seed), ``visualization`` colors and ``output`` file names.
    """
    config = load_yaml_config(str(Path(config_dir) / f'{algorithm_name}.yaml'))
    return config.get('algorithm', {})


def merge_configs(*configs: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge multiple configuration dictionaries.

    Later dictionaries override earlier ones. Nested dictionaries are
    merged key by key instead of being replaced, and None values in later
    dictionaries are ignored so unset command-line flags keep file values.

    Args:
        *configs: Variable number of configuration dictionaries

    Returns:
        Merged configuration dictionary

    Example:
        >>> base_config = {'parameters': {'threshold': 2.0, 'max_iter_factor': 20}}
        >>> override_config = {'parameters': {'threshold': 3.0}}
        >>> merge_configs(base_config, override_config)
        {'parameters': {'threshold': 3.0, 'max_iter_factor': 20}}
    """
    merged: Dict[str, Any] = {}
    for config in configs:
        for key, value in config.items():
            if value is None:
                continue
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = merge_configs(merged[key], value)
            else:
                merged[key] = value
    return merged

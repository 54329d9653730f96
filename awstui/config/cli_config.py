"""CLI configuration management for aws-tui"""

import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional

from awstui.cache.policies import RESOURCE_TTLS_SECONDS
from awstui.cache.sweeper import DEFAULT_SWEEP_INTERVAL_SECONDS

DEFAULT_REGION = 'us-east-1'


class ConfigError(Exception):
    """Raised when the configuration file cannot be read or parsed."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to the config file

    Returns:
        Configuration dictionary

    Raises:
        ConfigError: If the file cannot be read or is not a YAML mapping
    """
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
    except (IOError, yaml.YAMLError) as e:
        raise ConfigError(str(e), config_path) from e

    if not isinstance(config, dict):
        raise ConfigError("top-level YAML value must be a mapping", config_path)

    # Store the config path for reference
    config['_config_path'] = config_path

    return config


def get_default_config_path() -> Optional[str]:
    """Get the default configuration file path"""
    paths = [
        Path.home() / '.aws-tui' / 'config.yaml',
        Path.home() / '.aws-tui' / 'config.yml',
        Path.cwd() / 'aws-tui.yaml',
        Path.cwd() / '.aws-tui.yaml',
    ]

    for path in paths:
        if path.exists():
            return str(path)

    return None


def get_cache_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Get cache settings merged with defaults.

    Returns:
        {'sweep_interval': float, 'ttls': {category: seconds}}
    """
    cache_config = config.get('cache') or {}
    ttls = cache_config.get('ttls') or {}
    return {
        'sweep_interval': float(cache_config.get('sweep_interval', DEFAULT_SWEEP_INTERVAL_SECONDS)),
        'ttls': {str(k): int(v) for k, v in ttls.items()} if isinstance(ttls, dict) else {},
    }


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages
    """
    issues = []

    cache_config = config.get('cache') or {}
    if not isinstance(cache_config, dict):
        issues.append("Error: 'cache' must be a mapping")
        return issues

    interval = cache_config.get('sweep_interval')
    if interval is not None:
        if not isinstance(interval, (int, float)) or isinstance(interval, bool) or interval <= 0:
            issues.append(f"Error: cache.sweep_interval must be a positive number, got {interval!r}")

    ttls = cache_config.get('ttls') or {}
    if not isinstance(ttls, dict):
        issues.append("Error: 'cache.ttls' must be a mapping")
        return issues

    for category, ttl in ttls.items():
        if category not in RESOURCE_TTLS_SECONDS:
            issues.append(f"Warning: Unknown cache TTL category '{category}'")
        if not isinstance(ttl, int) or isinstance(ttl, bool):
            issues.append(f"Error: TTL for '{category}' must be an integer number of seconds")

    return issues

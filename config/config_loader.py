"""
config_loader.py
-----------------
Singleton config loader. Reads config.yaml once and caches it.
All modules access configuration through this — never hardcoded values.
"""

import os
import yaml
from typing import Any, Dict


_CONFIG_CACHE: Dict[str, Any] = {}


def load_config(config_path: str | None = None) -> Dict[str, Any]:
    """
    Load and cache the YAML configuration file.

    Args:
        config_path: Path to config.yaml. Defaults to config/ relative to this file.

    Returns:
        Full config dictionary.
    """
    global _CONFIG_CACHE

    if _CONFIG_CACHE:
        return _CONFIG_CACHE

    if config_path is None:
        config_path = os.path.join(os.path.dirname(__file__), "config.yaml")

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r") as f:
        _CONFIG_CACHE = yaml.safe_load(f)

    return _CONFIG_CACHE


def _get_section(name: str) -> Dict[str, Any]:
    config = load_config()
    if name not in config:
        raise KeyError(
            f"No config section '{name}'. "
            f"Available: {list(config.keys())}"
        )
    return config[name]


def get_recurrence_detection_config() -> Dict[str, Any]:
    """Returns the recurrence_detection block."""
    return _get_section("recurrence_detection")


def get_frequency_ranges() -> Dict[str, Dict[str, Any]]:
    """Returns the cadence bands, keyed by frequency, in evaluation order."""
    return get_recurrence_detection_config()["frequency_ranges"]


def get_min_occurrences(frequency: str) -> int:
    """
    Returns the minimum sample size for a frequency.

    Raises:
        KeyError: If frequency is not configured.
    """
    minimums = get_recurrence_detection_config()["min_occurrences"]
    if frequency not in minimums:
        raise KeyError(
            f"No minimum occurrence count for '{frequency}'. "
            f"Available: {list(minimums.keys())}"
        )
    return minimums[frequency]


def get_migration_config() -> Dict[str, Any]:
    """Returns the migration block."""
    return _get_section("migration")


def get_scheduler_config() -> Dict[str, Any]:
    """Returns the scheduler block."""
    return _get_section("scheduler")


def get_storage_config() -> Dict[str, Any]:
    """Returns the storage block."""
    return _get_section("storage")


def get_query_config() -> Dict[str, Any]:
    """Returns the queries block."""
    return _get_section("queries")


def reset_config() -> None:
    """Clears cached config. Useful for testing."""
    global _CONFIG_CACHE
    _CONFIG_CACHE = {}

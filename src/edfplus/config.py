"""Configuration management for edfplus."""

import logging
import os
import tomllib

from pathlib import Path
from typing import Any

import tomli_w

from edfplus.constants import DEFAULT_CONFIG_DIR, DEFAULT_CONFIG_FILE

logger = logging.getLogger(__name__)


def get_config_path() -> Path:
    """
    Get the path to the configuration file.

    Returns:
        Path to ~/.edfplus/config.toml
    """
    return DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE


def load_config() -> dict[str, Any]:
    """
    Load configuration from TOML file.

    Returns:
        Configuration dictionary. Returns empty dict if file doesn't exist
        or is corrupted.
    """
    config_path = get_config_path()

    if not config_path.exists():
        return {}

    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        logger.warning("Treating config as empty. Fix or delete the file to resolve.")
        return {}


def save_config(config: dict[str, Any]) -> None:
    """
    Save configuration to TOML file using atomic write.

    Creates the parent directory if it doesn't exist.
    Uses temp file + rename for atomic operation.

    Args:
        config: Configuration dictionary to save

    Raises:
        PermissionError: If directory cannot be created or file cannot be written
    """
    config_path = get_config_path()

    config_dir = config_path.parent
    try:
        os.makedirs(config_dir, exist_ok=True)
    except PermissionError as e:
        raise PermissionError(
            f"Cannot create config directory {config_dir}: {e}"
        ) from e

    temp_path = config_path.with_suffix(".toml.tmp")

    try:
        with open(temp_path, "wb") as f:
            tomli_w.dump(config, f)

        os.replace(temp_path, config_path)

    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise


def get_default_tolerance() -> float | None:
    """
    Get the default bi-level tolerance from config.

    Returns:
        Tolerance, or None if not set or not a number
    """
    config = load_config()
    value = config.get("bilevel", {}).get("tolerance")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if value is not None:
        logger.warning(f"Ignoring non-numeric bilevel tolerance in config: {value!r}")
    return None


def set_default_tolerance(tolerance: float) -> None:
    """
    Set the default bi-level tolerance in config.

    Args:
        tolerance: Positive tolerance in physical units
    """
    if tolerance <= 0:
        raise ValueError(f"Tolerance must be positive, got {tolerance}")

    config = load_config()

    if "bilevel" not in config:
        config["bilevel"] = {}

    config["bilevel"]["tolerance"] = float(tolerance)
    save_config(config)


def unset_default_tolerance() -> None:
    """
    Remove the default tolerance setting from config.

    If this was the only setting in the bilevel section, removes the section.
    If config becomes empty, deletes the config file.
    """
    config = load_config()

    if "bilevel" in config and "tolerance" in config["bilevel"]:
        del config["bilevel"]["tolerance"]

        if not config["bilevel"]:
            del config["bilevel"]

        if not config:
            config_path = get_config_path()
            if config_path.exists():
                config_path.unlink()
        else:
            save_config(config)

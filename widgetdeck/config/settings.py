"""Configuration utilities for widgetdeck."""

import os
from pathlib import Path
from typing import List, Optional, Tuple

from widgetdeck.exceptions import ConfigurationError

from .constants import (
    DEFAULT_WHEEL_STEP,
    ENV_VAR_DEFINITIONS,
    LAYOUT_STORE_FILENAME,
    WIDGETDECK_CONFIG_DIR,
)


def get_config_dir() -> Path:
    """Get the config directory, respecting WIDGETDECK_CONFIG_DIR at call time.

    Tests point WIDGETDECK_CONFIG_DIR at a temp dir so they never touch the
    real layouts file.
    """
    override = os.environ.get("WIDGETDECK_CONFIG_DIR")
    config_dir = Path(override) if override else WIDGETDECK_CONFIG_DIR
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_layout_store_path() -> Path:
    """Path of the JSON document holding every persisted layout scope."""
    return get_config_dir() / LAYOUT_STORE_FILENAME


def validate_env_var(name: str, value: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Validate a single environment variable value.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if name not in ENV_VAR_DEFINITIONS or value is None:
        return True, None

    if name == "WIDGETDECK_WHEEL_STEP":
        if not value.strip().isdigit() or int(value) < 1:
            return False, f"Invalid value '{value}' for {name}. Expected a positive integer"
        return True, None

    valid_values = ENV_VAR_DEFINITIONS[name].get("valid_values")
    if valid_values is None:
        return True, None

    if value.lower() not in [v.lower() for v in valid_values]:
        return False, f"Invalid value '{value}' for {name}. Valid values: {valid_values}"

    return True, None


def validate_all_env_vars() -> List[str]:
    """Validate all widgetdeck environment variables.

    Returns:
        List of error messages (empty if all valid).
    """
    errors = []
    for name in ENV_VAR_DEFINITIONS:
        is_valid, error = validate_env_var(name, os.environ.get(name))
        if not is_valid and error:
            errors.append(error)
    return errors


def get_wheel_step() -> int:
    """Rows to scroll per wheel notch.

    Raises:
        ConfigurationError: If WIDGETDECK_WHEEL_STEP is set to a non-positive
            or non-numeric value.
    """
    value = os.environ.get("WIDGETDECK_WHEEL_STEP")
    if value is None:
        return DEFAULT_WHEEL_STEP

    is_valid, error = validate_env_var("WIDGETDECK_WHEEL_STEP", value)
    if not is_valid:
        raise ConfigurationError(error or "Invalid wheel step", setting="WIDGETDECK_WHEEL_STEP")
    return int(value)


def get_log_level() -> str:
    """Log level name for widgetdeck loggers (defaults to INFO)."""
    value = os.environ.get("WIDGETDECK_LOG_LEVEL", "INFO")
    is_valid, _ = validate_env_var("WIDGETDECK_LOG_LEVEL", value)
    return value.upper() if is_valid else "INFO"

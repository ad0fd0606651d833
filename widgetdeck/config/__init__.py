"""Configuration for widgetdeck."""

from .settings import (
    get_config_dir,
    get_layout_store_path,
    get_log_level,
    get_wheel_step,
    validate_all_env_vars,
)

__all__ = [
    "get_config_dir",
    "get_layout_store_path",
    "get_log_level",
    "get_wheel_step",
    "validate_all_env_vars",
]

"""Configuration package for coursework."""

from coursework.config.app_config import (
    AppConfig,
    ConfigError,
    clear_config_cache,
    get_exercise_settings,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "ConfigError",
    "clear_config_cache",
    "get_exercise_settings",
    "load_app_config",
]

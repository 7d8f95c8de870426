"""Application configuration loader.

Loads configuration from $COURSEWORK_CONFIG, falling back to
config/coursework.yaml and finally to built-in defaults.

Usage:
    from coursework.config.app_config import load_app_config, get_exercise_settings

    config = load_app_config()
    settings = get_exercise_settings("hw7")

Example file:
    data_dir: data
    seed: 540
    log_level: INFO
    inputs:
      hw:
        0: [hw/hw0/chr1.fna]
    settings:
      hw7:
        background_n: 0
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file paths (relative to project root)
CONFIG_ENV_VAR = "COURSEWORK_CONFIG"
CONFIG_FILE = Path("config/coursework.yaml")


class ConfigError(Exception):
    """Raised when the config file cannot be parsed."""

    pass


@dataclass
class AppConfig:
    """Application-wide configuration."""

    data_dir: str = "data"
    output_dir: str | None = None
    seed: int | None = None
    log_level: str = "WARNING"
    inputs: dict[str, dict[int, list[str]]] = field(default_factory=dict)
    settings: dict[str, dict[str, Any]] = field(default_factory=dict)

    def inputs_for(self, kind: str, index: int) -> list[str] | None:
        """Configured input paths for an exercise, if any."""
        return self.inputs.get(kind, {}).get(index)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "data_dir": "data",
        "output_dir": None,
        "seed": None,
        "log_level": "WARNING",
        "inputs": {},
        "settings": {},
    }


def _parse_inputs(raw: Any) -> dict[str, dict[int, list[str]]]:
    if not raw:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("'inputs' must be a mapping of kind -> index -> paths")

    inputs: dict[str, dict[int, list[str]]] = {}
    for kind, by_index in raw.items():
        if not isinstance(by_index, dict):
            raise ConfigError(f"'inputs.{kind}' must be a mapping of index -> paths")
        parsed: dict[int, list[str]] = {}
        for index, paths in by_index.items():
            if isinstance(paths, str):
                paths = [paths]
            try:
                parsed[int(index)] = [str(p) for p in paths]
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid entry 'inputs.{kind}.{index}': {e}") from e
        inputs[str(kind)] = parsed
    return inputs


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()
    merged = {**defaults, **(data or {})}

    seed = merged.get("seed")
    if seed is not None:
        try:
            seed = int(seed)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"'seed' must be an integer, got {seed!r}") from e

    settings = merged.get("settings") or {}
    if not isinstance(settings, dict):
        raise ConfigError("'settings' must be a mapping of exercise key -> values")

    output_dir = merged.get("output_dir")
    return AppConfig(
        data_dir=str(merged.get("data_dir") or defaults["data_dir"]),
        output_dir=str(output_dir) if output_dir else None,
        seed=seed,
        log_level=str(merged.get("log_level") or defaults["log_level"]),
        inputs=_parse_inputs(merged.get("inputs")),
        settings={str(k): dict(v or {}) for k, v in settings.items()},
    )


def _config_source() -> Path | None:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    if CONFIG_FILE.exists():
        return CONFIG_FILE
    return None


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.

    Raises:
        ConfigError: If the file exists but is not valid config.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    source = _config_source()
    if source is not None:
        if not source.exists():
            raise ConfigError(f"Config file not found: {source}")
        logger.debug("loading_app_config", source=str(source))
        try:
            data = yaml.safe_load(source.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {source}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping: {source}")
    else:
        logger.debug("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def get_exercise_settings(key: str) -> dict[str, Any]:
    """Get configured settings for one exercise (e.g., "hw7").

    Returns:
        Settings dict, empty if the exercise has none configured.
    """
    config = load_app_config()
    return dict(config.settings.get(key, {}))


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None

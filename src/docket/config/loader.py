"""Configuration loading from TOML files and environment variables."""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from docket.config.models import DocketConfig
from docket.config.paths import get_config_path

logger = logging.getLogger(__name__)


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("docket.toml"),  # Current directory
        get_config_path(),  # ~/.docket/config.toml (or DOCKET_HOME)
    ]


def _section(config: dict[str, Any], key: str) -> dict[str, Any]:
    """Get (creating if needed) a nested table of the raw config."""
    section = config.get(key)
    if not isinstance(section, dict):
        section = {}
        config[key] = section
    return section


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply DOCKET_* environment overrides on top of file values."""
    mappings = [
        ("storage", "path", "DOCKET_STATE_PATH"),
        ("storage", "backend", "DOCKET_STORAGE_BACKEND"),
        ("autosave", "interval", "DOCKET_AUTOSAVE_INTERVAL"),
    ]
    for parent_key, key, env_var in mappings:
        value = os.environ.get(env_var, "").strip()
        if value:
            _section(config, parent_key)[key] = value
    return config


def load_config(path: Path | None = None) -> DocketConfig:
    """Load configuration from TOML file.

    Args:
        path: Explicit path to config file. If None, searches default locations
            and falls back to defaults when none exists.

    Returns:
        Validated DocketConfig instance.

    Raises:
        FileNotFoundError: If an explicit config path does not exist.
        ValueError: If the config file is invalid.
    """
    config_path: Path | None = None

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in _get_default_config_paths():
            expanded = default_path.expanduser()
            if expanded.exists():
                config_path = expanded
                break

    raw_config: dict[str, Any] = {}
    if config_path is not None:
        with config_path.open("rb") as f:
            raw_config = tomllib.load(f)
        logger.debug("config_loaded", extra={"file.path": str(config_path)})

    raw_config = _apply_env_overrides(raw_config)

    return DocketConfig.model_validate(raw_config)


def get_default_config() -> DocketConfig:
    """Get a default configuration for development/testing."""
    return DocketConfig()

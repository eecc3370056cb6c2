"""Configuration module."""

from docket.config.loader import get_default_config, load_config
from docket.config.models import (
    AutosaveConfig,
    DocketConfig,
    EffectsConfig,
    StorageConfig,
)
from docket.config.paths import (
    get_config_path,
    get_docket_home,
    get_logs_path,
    get_state_path,
)

__all__ = [
    "AutosaveConfig",
    "DocketConfig",
    "EffectsConfig",
    "StorageConfig",
    "get_config_path",
    "get_default_config",
    "get_docket_home",
    "get_logs_path",
    "get_state_path",
    "load_config",
]

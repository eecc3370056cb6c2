"""Centralized path management for Docket.

All state (config, snapshots, logs) is stored under a single base directory.
The base directory can be overridden with the DOCKET_HOME environment variable.

Default locations:
- Linux/macOS: ~/.docket
- Windows: %USERPROFILE%\\.docket
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "DOCKET_HOME"


def get_system_timezone() -> str:
    """Detect system timezone, falling back to UTC.

    Resolution order:
    1. TZ environment variable (if set)
    2. /etc/timezone file (Debian/Ubuntu)
    3. /etc/localtime symlink target (most Linux distros)
    4. Fallback to UTC

    Returns:
        IANA timezone name (e.g., "America/Los_Angeles", "Europe/London", "UTC").
    """
    if tz := os.environ.get("TZ"):
        return tz

    try:
        tz = Path("/etc/timezone").read_text().strip()
        if tz:
            return tz
    except (FileNotFoundError, PermissionError):
        pass

    try:
        link = Path("/etc/localtime").resolve()
        parts = str(link).split("zoneinfo/")
        if len(parts) > 1:
            return parts[1]
    except (FileNotFoundError, PermissionError):
        pass

    return "UTC"


@lru_cache(maxsize=1)
def get_docket_home() -> Path:
    """Get the base directory for all Docket data.

    Resolution order:
    1. DOCKET_HOME environment variable (if set)
    2. Platform default (~/.docket)
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()

    return Path.home() / ".docket"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_docket_home() / "config.toml"


def get_state_path() -> Path:
    """Get the snapshot directory path (one JSON file per storage key)."""
    return get_docket_home() / "state"


def get_logs_path() -> Path:
    """Get the default logs directory path."""
    return get_docket_home() / "logs"


def get_all_paths() -> dict[str, Path]:
    """Get all standard paths for debugging/display."""
    return {
        "home": get_docket_home(),
        "config": get_config_path(),
        "state": get_state_path(),
        "logs": get_logs_path(),
    }

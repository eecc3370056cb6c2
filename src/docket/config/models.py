"""Configuration models using Pydantic."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from docket.config.paths import get_state_path, get_system_timezone
from docket.todos.types import Category


DEFAULT_STORAGE_KEY = "docket-state"


class StorageConfig(BaseModel):
    """Where the session snapshot lives.

    The "memory" backend keeps snapshots in-process only and is meant for
    tests and throwaway sessions.
    """

    backend: Literal["file", "memory"] = "file"
    path: Path = Field(default_factory=get_state_path)
    key: str = Field(default=DEFAULT_STORAGE_KEY, min_length=1)


class AutosaveConfig(BaseModel):
    """Configuration for the periodic snapshot writer."""

    enabled: bool = True
    interval: float = Field(default=30.0, gt=0)


class EffectsConfig(BaseModel):
    """Feedback fired when a todo transitions to complete."""

    chime: bool = True
    cue: bool = True


class DocketConfig(BaseModel):
    """Root configuration model."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    autosave: AutosaveConfig = Field(default_factory=AutosaveConfig)
    effects: EffectsConfig = Field(default_factory=EffectsConfig)
    default_category: Category = Category.PERSONAL
    timezone: str = Field(default_factory=get_system_timezone)

"""Process-wide configuration.

Settings persist in ``<home>/settings.yaml``; the home directory defaults to
``~/.guardnet`` and can be moved with ``GUARDNET_HOME``.  The API key is only
ever read from ``ANTHROPIC_API_KEY``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from guardnet.llm.client import DEFAULT_MODEL
from guardnet.moderation.models import Sensitivity

SETTINGS_FILE = "settings.yaml"


def default_home() -> Path:
    env = os.environ.get("GUARDNET_HOME")
    return Path(env) if env else Path.home() / ".guardnet"


@dataclass
class GuardnetConfig:
    """Everything the runtime needs to wire up a pipeline."""

    home: Path = field(default_factory=default_home)
    sensitivity: Sensitivity = Sensitivity.MODERATE
    model: str = DEFAULT_MODEL
    api_key: str = ""

    @property
    def settings_path(self) -> Path:
        return self.home / SETTINGS_FILE

    @property
    def sites_dir(self) -> Path:
        return self.home / "sites"

    @property
    def activity_dir(self) -> Path:
        return self.home / "activity"


def parse_sensitivity(value: object, default: Sensitivity = Sensitivity.MODERATE) -> Sensitivity:
    try:
        return Sensitivity(str(value).lower())
    except ValueError:
        return default


def load_config(home: Optional[str | Path] = None) -> GuardnetConfig:
    """Load settings from disk, falling back to defaults for anything missing."""
    config = GuardnetConfig(home=Path(home) if home else default_home())
    config.api_key = os.environ.get("ANTHROPIC_API_KEY", "")

    path = config.settings_path
    if not path.exists():
        return config
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError):
        return config
    if not isinstance(data, dict):
        return config

    config.sensitivity = parse_sensitivity(data.get("sensitivity"), config.sensitivity)
    model = data.get("model")
    if isinstance(model, str) and model:
        config.model = model
    return config


def save_config(config: GuardnetConfig) -> Path:
    """Persist the user-editable settings (never the API key)."""
    config.home.mkdir(parents=True, exist_ok=True)
    with open(config.settings_path, "w") as f:
        yaml.safe_dump(
            {"sensitivity": config.sensitivity.value, "model": config.model},
            f,
            sort_keys=False,
        )
    return config.settings_path

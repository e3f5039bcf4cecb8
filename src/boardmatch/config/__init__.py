"""Configuration management utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..schemas.config import AppConfig, load_config


class ConfigManager:
    """Simple YAML-backed configuration loader."""

    def __init__(self, base_path: str | Path):
        self._base_path = Path(base_path)

    def load(self, name: str) -> dict[str, Any]:
        """Load a YAML configuration by name; ``.yaml`` is added when no suffix is given."""
        path = self._base_path / name
        if not path.suffix:
            path = path.with_suffix(".yaml")
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file must be a YAML object: {path}")
        return loaded

    def load_app_config(self, name: str = "boardmatch") -> AppConfig:
        return load_config(self.load(name))

    @classmethod
    def from_file(cls, path: Path) -> AppConfig:
        """Load and validate a single YAML file."""
        return cls(path.parent).load_app_config(path.name)


__all__ = ["ConfigManager"]

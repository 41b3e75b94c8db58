"""Configuration loader for slotbackup.

Handles loading and merging configuration from multiple sources.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..utils.env import get_global_dir
from ..utils.fs import atomic_write, safe_json_load
from .types import SlotBackupConfig

logger = logging.getLogger(__name__)

CONFIG_NAME = "config.json"
PROJECT_DIR_NAME = ".slotbackup"


class ConfigLoader:
    """Loads and manages slotbackup configuration."""

    def __init__(self, project_root: Path | None = None):
        """Initialize config loader.

        Args:
            project_root: Project root directory (for project-local config)
        """
        self.project_root = project_root
        self._config: SlotBackupConfig | None = None

    @property
    def config(self) -> SlotBackupConfig:
        """Get loaded configuration, loading if necessary."""
        if self._config is None:
            self._config = self.load()
        return self._config

    @property
    def global_config_path(self) -> Path:
        return get_global_dir() / CONFIG_NAME

    @property
    def project_config_path(self) -> Path | None:
        if not self.project_root:
            return None
        return self.project_root / PROJECT_DIR_NAME / CONFIG_NAME

    def load(self) -> SlotBackupConfig:
        """Load configuration from all sources.

        Priority (highest to lowest):
        1. Project-local config (.slotbackup/config.json)
        2. Global config (~/.slotbackup/config.json)
        3. Default values

        Returns:
            Merged SlotBackupConfig
        """
        merged: dict[str, Any] = {}

        for path in (self.global_config_path, self.project_config_path):
            if path is None or not path.exists():
                continue
            data = safe_json_load(path, {})
            if not isinstance(data, dict):
                logger.warning("Ignoring malformed config file: %s", path)
                continue
            logger.debug("Loaded config from %s", path)
            merged = self._deep_merge(merged, data)

        return SlotBackupConfig.from_dict(merged)

    def reload(self) -> SlotBackupConfig:
        """Force reload configuration."""
        self._config = None
        return self.config

    def resolve_backup_dir(self, config: SlotBackupConfig | None = None) -> Path:
        """Absolute backup directory for a configuration.

        Relative directories are anchored at the project root (cwd if unset).
        """
        config = config or self.config
        path = Path(config.storage.backup_dir).expanduser()
        if path.is_absolute():
            return path
        return (self.project_root or Path.cwd()) / path

    def resolve_source(self, config: SlotBackupConfig | None = None) -> Path | None:
        """Absolute path of the configured source file, if one is set."""
        config = config or self.config
        if config.source is None:
            return None
        path = Path(config.source).expanduser()
        if path.is_absolute():
            return path
        return (self.project_root or Path.cwd()) / path

    def save_config(self, config: SlotBackupConfig, scope: str = "project") -> Path:
        """Save configuration to file.

        Args:
            config: Configuration to save
            scope: "project" or "global"

        Returns:
            Path where config was saved
        """
        if scope == "global":
            config_path = self.global_config_path
        else:
            config_path = self.project_config_path
            if config_path is None:
                raise ValueError("No project root set for project-scope config")

        atomic_write(config_path, json.dumps(config.to_dict(), indent=2))
        self._config = None
        return config_path

    @staticmethod
    def _deep_merge(base: dict, override: dict) -> dict:
        """Deep merge two dictionaries.

        Args:
            base: Base dictionary
            override: Dictionary to merge (takes precedence)

        Returns:
            Merged dictionary
        """
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = ConfigLoader._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

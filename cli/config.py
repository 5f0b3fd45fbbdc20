"""Configuration management for the data file CLI."""

import json
import shutil
from dataclasses import replace
from pathlib import Path

from common.logging_config import get_logger
from packager.config import PackagerConfig

logger = get_logger(__name__)


class Config:
    """Manages CLI configuration stored in JSON file.

    Values left as None fall back to the DATAFILE_* environment variables.
    """

    DEFAULT_CONFIG = {
        "agent_root": None,
        "device_id": None,
        "metadata_dir": None,
        "max_retries": None,
        "retry_wait_seconds": None,
        "upload_priority": None,
    }

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.datafile/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                config = self.DEFAULT_CONFIG.copy()
                config.update(data)
                return config
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Config file {self.config_path} is unreadable ({e}), using defaults")
                backup_path = self.config_path.with_suffix('.json.bak')
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError as copy_error:
                    logger.warning(f"Could not back up config file: {copy_error}")
                return self.DEFAULT_CONFIG.copy()
        else:
            config = self.DEFAULT_CONFIG.copy()
            self._write(config)
            return config

    def _write(self, data: dict) -> None:
        try:
            with open(self.config_path, 'w') as f:
                json.dump(data, f, indent=2)
        except IOError as e:
            logger.warning(f"Could not write config file {self.config_path}: {e}")

    def save(self) -> None:
        """Save current configuration to file."""
        self._write(self.data)

    def set(self, key: str, value) -> None:
        """
        Set a configuration value and save to file.

        Args:
            key: One of the DEFAULT_CONFIG keys
            value: New value (None restores the environment default)
        """
        if key not in self.DEFAULT_CONFIG:
            raise KeyError(f"Unknown configuration key: {key}")
        self.data[key] = value
        self.save()

    def get_packager_config(self) -> PackagerConfig:
        """
        Build the packager configuration.

        File values override the DATAFILE_* environment variables.

        Returns:
            PackagerConfig instance

        Raises:
            InvalidConfigurationError: If an environment value is malformed
        """
        agent_root = self.data.get('agent_root')
        base = PackagerConfig.from_env(Path(agent_root) if agent_root else None)

        overrides = {}
        if self.data.get('device_id'):
            overrides['device_id'] = self.data['device_id']
        if self.data.get('metadata_dir'):
            overrides['metadata_dir'] = Path(self.data['metadata_dir'])
        if self.data.get('max_retries') is not None:
            overrides['max_retries'] = int(self.data['max_retries'])
        if self.data.get('retry_wait_seconds') is not None:
            overrides['retry_wait_seconds'] = float(self.data['retry_wait_seconds'])
        if self.data.get('upload_priority'):
            overrides['upload_priority'] = self.data['upload_priority']

        return replace(base, **overrides)

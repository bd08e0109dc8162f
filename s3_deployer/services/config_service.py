"""Configuration loading service"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..api.exceptions import ConfigError
from ..constants import ENV_CONFIG_PATH, PROJECT_CONFIG_FILE
from ..models.config import DeployerConfig

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for loading the deployer configuration file"""

    def __init__(self, project_root: Optional[Path] = None, config_path: Optional[Path] = None):
        """Initialize config service

        Args:
            project_root: Directory holding the configuration file
            config_path: Explicit configuration file, takes precedence over
                ``S3_DEPLOYER_CONFIG`` and the project file
        """
        self.project_root = Path(project_root) if project_root else Path.cwd()

        if config_path is None and os.environ.get(ENV_CONFIG_PATH):
            config_path = os.environ[ENV_CONFIG_PATH]
        self.config_path = Path(config_path) if config_path else self.project_root / PROJECT_CONFIG_FILE

        self._config: Optional[DeployerConfig] = None

    @property
    def config(self) -> DeployerConfig:
        """Get current configuration (lazy load)"""
        if self._config is None:
            self.load_config()
        return self._config

    def load_raw(self) -> Dict[str, Any]:
        """Read the configuration file as a mapping

        Returns:
            Parsed YAML with environment variables expanded

        Raises:
            ConfigError: If the file is missing or not valid YAML
        """
        if not self.config_path.exists():
            raise ConfigError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            content = f.read()

        # Credentials are usually given as ${VAR} references
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}")

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration in {self.config_path} must be a mapping")

        return data

    def load_config(self, overrides: Optional[Dict[str, Any]] = None) -> DeployerConfig:
        """Load configuration from file

        Args:
            overrides: Values replacing the ones from the file, None values are ignored

        Returns:
            Loaded configuration
        """
        data = self.load_raw()
        for key, value in (overrides or {}).items():
            if value is not None:
                data[key] = value

        logger.debug(f"Loaded configuration from {self.config_path}")
        self._config = DeployerConfig.from_dict(data)
        return self._config

"""Configuration loading for Vagabond.

This module provides:
- Optional YAML configuration file loading
- ``.env`` loading through python-dotenv
- Environment variable overrides for connection settings
- Schema validation into a ``VagabondConfig``
"""

import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Mapping, Union
from copy import deepcopy

from dotenv import dotenv_values
from pydantic import ValidationError

from .config_schema import VagabondConfig
from .exceptions import ConfigurationError
from .security import setup_secure_logging

logger = setup_secure_logging(__name__)

DEFAULT_CONFIG_FILE = 'vagabond.yaml'
CONFIG_ENV_VAR = 'VAGABOND_CONFIG'


class ConfigManager:
    """Builds the validated configuration from file, ``.env`` and environment."""

    # Environment variable mappings, applied on top of the YAML file
    ENV_MAPPINGS = {
        'cassandra.host': 'CASSANDRA_HOST',
        'cassandra.port': 'CASSANDRA_PORT',
        'cassandra.username': 'CASSANDRA_USER',
        'cassandra.password': 'CASSANDRA_PASSWORD',
        'cassandra.keyspace': 'CASSANDRA_KEYSPACE',
        'logging.level': 'VAGABOND_LOG_LEVEL',
    }

    def __init__(self, config_path: Optional[Union[str, Path]] = None,
                 environ: Optional[Mapping[str, str]] = None,
                 dotenv_path: Optional[Union[str, Path]] = '.env'):
        """Initialize config manager.

        Args:
            config_path: Explicit YAML file. Must exist when given.
            environ: Environment mapping (defaults to ``os.environ``)
            dotenv_path: ``.env`` file to read; None disables it
        """
        self.environ = self._merge_environment(
            dict(os.environ if environ is None else environ), dotenv_path
        )
        self.config_path = self._resolve_config_path(config_path)
        self.raw_config = self._load_yaml_file(self.config_path) if self.config_path else {}
        self.merged_config = deepcopy(self.raw_config)
        self._apply_env_overrides()

    def _merge_environment(self, environ: Dict[str, str],
                           dotenv_path: Optional[Union[str, Path]]) -> Dict[str, str]:
        """Add ``.env`` values that the real environment does not already define."""
        if dotenv_path is None or not Path(dotenv_path).is_file():
            return environ

        merged = {k: v for k, v in dotenv_values(dotenv_path).items() if v is not None}
        merged.update(environ)
        logger.debug(f"Loaded environment file {dotenv_path}")
        return merged

    def _resolve_config_path(self, config_path: Optional[Union[str, Path]]) -> Optional[Path]:
        if config_path is None:
            config_path = self.environ.get(CONFIG_ENV_VAR)
            if config_path is None:
                default = Path(DEFAULT_CONFIG_FILE)
                return default if default.is_file() else None

        path = Path(config_path)
        if not path.is_file():
            raise ConfigurationError(f"Config file not found: {path}")
        return path

    def _load_yaml_file(self, path: Path) -> Dict[str, Any]:
        """Safely load YAML file."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML file {path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigurationError(
                f"Config file must contain a mapping, got {type(config).__name__}"
            )
        return config

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides to configuration."""
        for config_path, env_var in self.ENV_MAPPINGS.items():
            env_value = self.environ.get(env_var)
            if env_value:
                self._set_nested_value(self.merged_config, config_path, env_value)
                logger.debug(f"Applied environment override for {config_path}")

    def _set_nested_value(self, config: Dict[str, Any], path: str, value: Any) -> None:
        """Set a nested configuration value using dot notation."""
        keys = path.split('.')
        current = config

        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def build(self) -> VagabondConfig:
        """Validate the merged configuration.

        Raises:
            ConfigurationError: If any section violates the schema
        """
        try:
            return VagabondConfig.model_validate(self.merged_config)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(f"Invalid configuration: {problems}") from e


def load_config(config_path: Optional[Union[str, Path]] = None,
                environ: Optional[Mapping[str, str]] = None,
                dotenv_path: Optional[Union[str, Path]] = '.env') -> VagabondConfig:
    """Load and validate the Vagabond configuration.

    Args:
        config_path: Optional YAML file (defaults to ``$VAGABOND_CONFIG`` or
            ``./vagabond.yaml`` when present)
        environ: Environment mapping (defaults to ``os.environ``)
        dotenv_path: ``.env`` file to merge under the environment

    Returns:
        Validated configuration
    """
    return ConfigManager(config_path, environ, dotenv_path).build()


def require_host(config: VagabondConfig) -> str:
    """Return the configured contact point or fail before any database contact."""
    if not config.cassandra.host:
        raise ConfigurationError(
            "Required CASSANDRA_HOST environment variable not found"
        )
    return config.cassandra.host

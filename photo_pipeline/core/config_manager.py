#!/usr/bin/env python3
"""
Configuration Manager for the Photo Pipeline
Loads and validates YAML settings with fail-loud error handling
"""

import os
import re
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List

from .exceptions import ConfigurationError

CONFIG_DIR_ENV = "PHOTO_PIPELINE_CONFIG_DIR"

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
VALID_RESAMPLE_METHODS = ['lanczos', 'cubic', 'area', 'linear', 'nearest']


class ConfigManager:
    """Manages all configuration for the Photo Pipeline"""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize configuration manager

        Args:
            config_dir: Custom config directory whose settings.yaml overrides
                the packaged defaults
        """
        package_dir = Path(__file__).parent.parent
        self.default_dir = package_dir / "config"

        if not self.default_dir.exists():
            raise ConfigurationError(
                f"Packaged configuration directory not found: {self.default_dir}\n"
                f"The installation looks incomplete.\n"
                f"Current working directory: {os.getcwd()}"
            )

        if config_dir is None and os.environ.get(CONFIG_DIR_ENV):
            config_dir = Path(os.environ[CONFIG_DIR_ENV])

        self.config_dir = Path(config_dir) if config_dir is not None else None
        if self.config_dir is not None and not self.config_dir.exists():
            raise ConfigurationError(
                f"Configuration directory not found: {self.config_dir}",
                {"Suggestion": f"Create the directory or unset {CONFIG_DIR_ENV}"}
            )

        self.settings: Dict[str, Any] = {}

        # Track loaded files for debugging
        self.loaded_files: List[str] = []

    def load_all(self) -> None:
        """Load packaged defaults, overlay user settings, validate"""
        self.settings = self._load_yaml(self.default_dir / "settings.yaml", required=True)

        if self.config_dir is not None:
            overrides = self._load_yaml(self.config_dir / "settings.yaml", required=False)
            self.settings = self._merge(self.settings, overrides)

        self.settings = self._expand_env_vars(self.settings)

        self._validate_all()

    def _load_yaml(self, filepath: Path, required: bool = True) -> Dict[str, Any]:
        """Load a YAML configuration file

        Args:
            filepath: Path of the YAML file to load
            required: If True, fail if file doesn't exist

        Returns:
            Loaded configuration dictionary
        """
        if not filepath.exists():
            if required:
                raise ConfigurationError(
                    f"Required configuration file not found: {filepath}"
                )
            return {}

        try:
            with open(filepath, 'r') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to parse YAML file: {filepath}\n"
                f"Error: {e}\n"
                f"Please check the YAML syntax."
            )
        except OSError as e:
            raise ConfigurationError(
                f"Failed to load configuration file: {filepath}\n"
                f"Error: {type(e).__name__}: {e}"
            )

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping: {filepath}"
            )

        self.loaded_files.append(str(filepath))
        return config

    def _merge(self, base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively overlay overrides onto base"""
        merged = dict(base)
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = self._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _validate_all(self) -> None:
        """Validate all loaded configuration - fail loud on errors"""
        self._validate_logging()
        self._validate_engine()
        self._validate_watermark()

    def _validate_logging(self) -> None:
        level = str(self.get_setting('logging.level', 'INFO')).upper()
        if level not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid logging level: {level}\n"
                f"Valid levels: {', '.join(VALID_LOG_LEVELS)}"
            )

    def _validate_engine(self) -> None:
        method = self.get_setting('engine.resample', 'lanczos')
        if method not in VALID_RESAMPLE_METHODS:
            raise ConfigurationError(
                f"Unknown resample method: {method}\n"
                f"Valid methods: {', '.join(VALID_RESAMPLE_METHODS)}"
            )

        timeout = self.get_setting('engine.timeout_seconds')
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                raise ConfigurationError(
                    f"engine.timeout_seconds must be a positive number or null, got: {timeout!r}"
                )

        quality = self.get_setting('engine.jpeg_quality', 95)
        if isinstance(quality, bool) or not isinstance(quality, int) or not 1 <= quality <= 100:
            raise ConfigurationError(
                f"engine.jpeg_quality must be an integer between 1 and 100, got: {quality!r}"
            )

    def _validate_watermark(self) -> None:
        alias = self.get_setting('watermark.default_font')
        if not alias or not isinstance(alias, str):
            raise ConfigurationError(
                "watermark.default_font must be a non-empty string"
            )

    def get_setting(self, setting_path: str, default: Any = None) -> Any:
        """Get a setting value using dot notation

        Args:
            setting_path: Path to setting (e.g., 'engine.resample')
            default: Default value if not found

        Returns:
            Setting value
        """
        keys = setting_path.split('.')
        value = self.settings

        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
            else:
                return default

        return value if value is not None else default

    def _expand_env_vars(self, config: Any) -> Any:
        """Expand ${VAR} patterns in config values

        Args:
            config: Configuration to expand

        Returns:
            Config with expanded environment variables
        """
        if isinstance(config, str):
            pattern = r'\$\{([^}]+)\}'

            def replacer(match):
                return os.environ.get(match.group(1), '')

            return re.sub(pattern, replacer, config)
        elif isinstance(config, dict):
            return {k: self._expand_env_vars(v) for k, v in config.items()}
        elif isinstance(config, list):
            return [self._expand_env_vars(v) for v in config]
        return config


# Singleton instance
_config_manager: Optional[ConfigManager] = None


def get_config(config_dir: Optional[Path] = None) -> ConfigManager:
    """Get the global configuration manager instance

    Args:
        config_dir: Reload from this custom config directory
    """
    global _config_manager
    if _config_manager is None or config_dir is not None:
        _config_manager = ConfigManager(config_dir)
        _config_manager.load_all()
    return _config_manager


def reset_config() -> None:
    """Drop the cached configuration so the next access reloads it"""
    global _config_manager
    _config_manager = None

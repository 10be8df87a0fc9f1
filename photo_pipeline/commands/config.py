#!/usr/bin/env python3
"""
Config Command Implementation
Configuration inspection
"""

from typing import Optional

import yaml

from ..core import get_logger, get_config


class ConfigCommand:
    """Handles configuration inspection"""

    def __init__(self, config_dir: Optional[str] = None, verbose: bool = False):
        """Initialize config command

        Args:
            config_dir: Custom config directory
            verbose: Enable verbose output
        """
        self.config_dir = config_dir
        self.verbose = verbose
        self.logger = get_logger()
        self.config = get_config()

    def show_config(self) -> None:
        """Display current configuration"""
        self.logger.info("=== CURRENT CONFIGURATION ===")

        self.logger.info("Engine:")
        self.logger.info(f"  Resample: {self.config.get_setting('engine.resample')}")
        self.logger.info(f"  Timeout: {self.config.get_setting('engine.timeout_seconds', 'none')}")
        self.logger.info(f"  JPEG quality: {self.config.get_setting('engine.jpeg_quality')}")
        self.logger.info(f"  Rotate background: {self.config.get_setting('engine.rotate_background')}")

        self.logger.info("Watermark:")
        self.logger.info(f"  Default font alias: {self.config.get_setting('watermark.default_font')}")

        self.logger.info("Loaded files:")
        for filepath in self.config.loaded_files:
            self.logger.info(f"  {filepath}")

        if self.verbose:
            print(yaml.dump(self.config.settings, default_flow_style=False))

    def validate_config(self) -> None:
        """Validate the loaded configuration"""
        self.logger.info("Validating configuration...")

        try:
            self.config._validate_all()
            self.logger.info("✓ Configuration is valid")

        except Exception as e:
            self.logger.error(f"✗ Configuration validation failed: {e}")
            raise

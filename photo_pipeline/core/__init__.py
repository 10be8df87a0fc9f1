"""
Core components for the Photo Pipeline
"""

from .config_manager import ConfigManager, get_config, reset_config
from .logger import PipelineLogger, get_logger
from .exceptions import (
    PhotoPipelineError,
    ConfigurationError,
    EngineError,
    LoggingError,
    handle_error
)

__all__ = [
    # Config
    'ConfigManager',
    'get_config',
    'reset_config',

    # Logging
    'PipelineLogger',
    'get_logger',

    # Exceptions
    'PhotoPipelineError',
    'ConfigurationError',
    'EngineError',
    'LoggingError',
    'handle_error'
]

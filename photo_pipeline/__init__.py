"""
Photo Pipeline Package
Async resize, watermark and EXIF stripping on top of Pillow
"""

__version__ = '1.2.0'
__author__ = 'Photo Pipeline Team'

# Import main components for easier access
from .core import get_config, get_logger, ConfigurationError, EngineError
from .cli.main import cli
from .processing import (
    FontConfig,
    ProcessConfig,
    get_image_size,
    get_image_ori,
    resize_image,
    get_size_config,
    remark_image,
    strip_metadata,
    remove_exif_data,
    all_process
)

__all__ = [
    'get_config',
    'get_logger',
    'ConfigurationError',
    'EngineError',
    'FontConfig',
    'ProcessConfig',
    'get_image_size',
    'get_image_ori',
    'resize_image',
    'get_size_config',
    'remark_image',
    'strip_metadata',
    'remove_exif_data',
    'all_process',
    'cli',
    '__version__'
]

"""
Processing module for the Photo Pipeline
"""

from .layout import get_size_config, parse_size, validate_size_config
from .font_config import FontConfig, GRAVITIES
from .engine import ImageChain, ImageSize, read_size, read_orientation, gravity_position
from .pipeline import (
    ProcessConfig,
    get_image_size,
    get_image_ori,
    resize_image,
    strip_metadata,
    remove_exif_data,
    remark_image,
    all_process
)

__all__ = [
    'get_size_config',
    'parse_size',
    'validate_size_config',
    'FontConfig',
    'GRAVITIES',
    'ImageChain',
    'ImageSize',
    'read_size',
    'read_orientation',
    'gravity_position',
    'ProcessConfig',
    'get_image_size',
    'get_image_ori',
    'resize_image',
    'strip_metadata',
    'remove_exif_data',
    'remark_image',
    'all_process'
]

"""
Command implementations behind the photo-pipeline CLI
"""

from .image import ImageCommand
from .process import ProcessCommand
from .config import ConfigCommand

__all__ = [
    'ImageCommand',
    'ProcessCommand',
    'ConfigCommand'
]

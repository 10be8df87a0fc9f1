"""
Utility modules for the Photo Pipeline
"""

from .path_utils import PathLike, ensure_path, format_for_path
from .image_save import save_image

__all__ = [
    'PathLike',
    'ensure_path',
    'format_for_path',
    'save_image'
]

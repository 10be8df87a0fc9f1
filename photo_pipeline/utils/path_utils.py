#!/usr/bin/env python3
"""
Path Utilities for the Photo Pipeline
Provides consistent path handling across the codebase
"""

from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


def ensure_path(path: PathLike) -> Path:
    """
    Ensure input is a Path object.

    Args:
        path: String or Path object

    Returns:
        Path object
    """
    if isinstance(path, Path):
        return path
    return Path(path)


def format_for_path(path: PathLike) -> str:
    """
    Pillow format name implied by a file extension.

    Args:
        path: Output path

    Returns:
        Upper-case format name, e.g. 'JPEG' for '.jpg'
    """
    suffix = ensure_path(path).suffix.upper().lstrip('.')
    if suffix in ('JPG', 'JPE', 'JFIF'):
        return 'JPEG'
    if suffix == 'TIF':
        return 'TIFF'
    return suffix

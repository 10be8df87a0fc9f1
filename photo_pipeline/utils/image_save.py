#!/usr/bin/env python3
"""
Format-aware image saving
The single place where pipeline output touches disk
"""

from pathlib import Path
from typing import Optional, Dict, Any

from PIL import Image

from ..core import get_logger, get_config
from .path_utils import PathLike, ensure_path, format_for_path

LOSSY_FORMATS = ('JPEG', 'WEBP')
NO_ALPHA_FORMATS = ('JPEG', 'BMP')


def save_image(image: Image.Image,
               filepath: PathLike,
               metadata: Optional[Dict[str, Any]] = None,
               quality: Optional[int] = None,
               label: Optional[str] = None) -> Path:
    """
    Save image in the format implied by its extension.

    Args:
        image: PIL Image object
        filepath: Path to save to
        metadata: 'exif' / 'icc_profile' blobs to embed, None embeds nothing
        quality: Quality for lossy formats, defaults to engine.jpeg_quality
        label: Name shown in the log, defaults to the file name

    Returns:
        Path: Where file was saved

    Raises:
        ValueError: If the extension maps to no known format
        OSError: If the file cannot be written
    """
    logger = get_logger()
    filepath = ensure_path(filepath)
    format = format_for_path(filepath)

    Image.init()
    if format not in Image.SAVE:
        raise ValueError(f"Unsupported output format '{format}' for path: {filepath}")

    if quality is None:
        quality = get_config().get_setting('engine.jpeg_quality', 95)

    if format in NO_ALPHA_FORMATS and image.mode not in ('RGB', 'L'):
        image = image.convert('RGB')

    save_params: Dict[str, Any] = {'format': format}
    if format in LOSSY_FORMATS:
        save_params['quality'] = quality

    for key, value in (metadata or {}).items():
        if value:
            save_params[key] = value

    filepath.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(filepath), **save_params)

    file_size_kb = filepath.stat().st_size / 1024
    logger.info(
        f"Saved {format}: {label or filepath.name} | "
        f"Size: {file_size_kb:.1f}KB | "
        f"Resolution: {image.width}x{image.height} | "
        f"Metadata: {'kept' if metadata else 'stripped'}"
    )

    return filepath

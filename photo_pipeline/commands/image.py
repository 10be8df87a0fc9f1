#!/usr/bin/env python3
"""
Image Command Implementation
Single-operation commands: size, orientation, resize, watermark, strip
"""

import asyncio
from pathlib import Path
from typing import Optional, List, Dict, Any

from ..core import get_logger, get_config
from ..core.exceptions import ConfigurationError
from ..processing import (
    ImageSize,
    get_image_size,
    get_image_ori,
    get_size_config,
    parse_size,
    resize_image,
    remark_image,
    remove_exif_data
)


class ImageCommand:
    """Handles one-shot image operations"""

    def __init__(self, config_dir: Optional[str] = None, verbose: bool = False):
        """Initialize image command

        Args:
            config_dir: Custom config directory
            verbose: Enable verbose output
        """
        self.config_dir = config_dir
        self.verbose = verbose
        self.logger = get_logger()
        self.config = get_config()

    def size(self, path: str) -> ImageSize:
        return asyncio.run(get_image_size(path))

    def orientation(self, path: str) -> str:
        return asyncio.run(get_image_ori(path))

    def resolve_size(self,
                     input_path: str,
                     size: Optional[str] = None,
                     long_side: Optional[int] = None,
                     short_side: Optional[int] = None) -> Optional[List[int]]:
        """Turn --size or --long/--short options into a [width, height] pair

        --long/--short follow the source layout: landscape sources get the
        long side as width, portrait and square sources as height.
        """
        if size and (long_side or short_side):
            raise ConfigurationError("Use either --size or --long/--short, not both")

        if size:
            return list(parse_size(size))

        if long_side is None and short_side is None:
            return None

        if long_side is None or short_side is None:
            raise ConfigurationError("--long and --short must be given together")

        source = self.size(input_path)
        resolved = get_size_config(long_side, short_side, source.width, source.height)
        self.logger.info(
            f"Source {source.width}x{source.height} -> output {resolved[0]}x{resolved[1]}"
        )
        return resolved

    def resize(self,
               input_path: str,
               output_path: str,
               size: Optional[str] = None,
               long_side: Optional[int] = None,
               short_side: Optional[int] = None) -> Path:
        """Resize to an exact size"""
        size_config = self.resolve_size(input_path, size, long_side, short_side)
        if size_config is None:
            raise ConfigurationError("Specify --size or --long/--short")

        return asyncio.run(resize_image(input_path, output_path, size_config))

    def watermark(self, input_path: str, output_path: str, font_config: Dict[str, Any]) -> Path:
        """Draw watermark text"""
        return asyncio.run(remark_image(input_path, output_path, font_config))

    def strip(self, input_path: str, output_path: str) -> Path:
        """Strip EXIF and profiles, rotating LeftBottom images upright"""
        return asyncio.run(remove_exif_data(input_path, output_path))

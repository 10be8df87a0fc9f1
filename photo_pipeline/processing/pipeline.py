#!/usr/bin/env python3
"""
Async image pipeline
Each operation awaits exactly one engine call running in a worker thread
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple, Union

from ..core import get_logger, get_config
from ..core.exceptions import ConfigurationError, EngineError
from ..utils import PathLike, ensure_path
from .engine import ImageChain, ImageSize, WriteGuard, read_size, read_orientation
from .font_config import FontConfig, as_font_config
from .layout import validate_size_config

# Orientation that needs a compensating rotation when EXIF is dropped
ROTATED_ORIENTATION = 'LeftBottom'
COMPENSATING_ROTATION = 270

# camelCase and long-form keys accepted by ProcessConfig.from_mapping
PROCESS_KEY_ALIASES = {
    'sizeConfig': 'size',
    'size_config': 'size',
    'fontConfig': 'font',
    'font_config': 'font',
    'needExif': 'keep_exif',
    'keepExif': 'keep_exif'
}


@dataclass(frozen=True)
class ProcessConfig:
    """Which pipeline stages to run"""

    size: Optional[Tuple[int, int]] = None
    font: Optional[FontConfig] = None
    keep_exif: bool = False
    orientation: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'ProcessConfig':
        """Build and validate a ProcessConfig from a plain mapping"""
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                "Process config must be a mapping",
                {"Received": type(data).__name__}
            )

        values = {}
        for key, value in data.items():
            name = PROCESS_KEY_ALIASES.get(key, key)
            if name not in ('size', 'font', 'keep_exif', 'orientation'):
                raise ConfigurationError(f"Unknown process config key: {key}")
            values[name] = value

        return cls(
            size=values.get('size'),
            font=values.get('font'),
            keep_exif=values.get('keep_exif', False),
            orientation=values.get('orientation')
        ).validated()

    def validated(self) -> 'ProcessConfig':
        """Return a copy with every present section checked"""
        keep_exif = False if self.keep_exif is None else self.keep_exif
        if not isinstance(keep_exif, bool):
            raise ConfigurationError(
                f"keep_exif must be true or false, got: {keep_exif!r}"
            )

        return ProcessConfig(
            size=validate_size_config(self.size) if self.size is not None else None,
            font=as_font_config(self.font) if self.font is not None else None,
            keep_exif=keep_exif,
            orientation=self.orientation
        )


async def _run_engine(operation: str, path: PathLike, func: Callable, *args,
                      guard: Optional[WriteGuard] = None):
    """Run one blocking engine call off the event loop

    Honors engine.timeout_seconds; a timeout surfaces as EngineError. When a
    guard is given the timed-out worker is stopped before it can replace the
    output file.
    """
    timeout = get_config().get_setting('engine.timeout_seconds')
    call = asyncio.to_thread(func, *args)

    if timeout is None:
        return await call

    try:
        return await asyncio.wait_for(call, timeout)
    except asyncio.TimeoutError as e:
        if guard is not None and not guard.cancel():
            get_logger().warning(f"{operation} finished writing {path} at the {timeout}s deadline")
            return ensure_path(path)
        get_logger().warning(f"{operation} gave up on {path} after {timeout}s")
        raise EngineError(
            operation, path,
            TimeoutError(f"No result after {timeout} seconds")
        ) from e


async def _write_chain(operation: str, chain: ImageChain, output_path: PathLike) -> Path:
    guard = WriteGuard()
    return await _run_engine(operation, output_path, chain.write, output_path, guard,
                             guard=guard)


async def get_image_size(path: PathLike) -> ImageSize:
    """Read image dimensions

    Raises:
        EngineError: If the file cannot be read or decoded
    """
    return await _run_engine('size', path, read_size, path)


async def get_image_ori(path: PathLike) -> str:
    """Read the EXIF orientation name ('Undefined' when absent)

    Raises:
        EngineError: If the file cannot be read or decoded
    """
    return await _run_engine('orientation', path, read_orientation, path)


async def resize_image(input_path: PathLike,
                       output_path: PathLike,
                       size_config: Sequence[int]) -> Path:
    """Resize to exactly [width, height], ignoring aspect ratio"""
    width, height = validate_size_config(size_config)

    logger = get_logger()
    logger.log_stage("resize", f"{input_path} -> {width}x{height}")

    chain = ImageChain(input_path).resize(width, height)
    return await _write_chain('resize', chain, output_path)


def _strip_stage(chain: ImageChain, orientation: Optional[str]) -> ImageChain:
    """Rotate LeftBottom images upright, then drop all profiles

    Uses a fixed rotation, never EXIF-driven auto-orientation.
    """
    if orientation == ROTATED_ORIENTATION:
        background = get_config().get_setting('engine.rotate_background', 'transparent')
        chain = chain.rotate(background, COMPENSATING_ROTATION)
    return chain.no_profile()


def _watermark_stage(chain: ImageChain, font: FontConfig) -> ImageChain:
    return (chain
            .stroke(font.stroke_color, font.stroke_width)
            .fill(font.fill_color)
            .font(font.font, font.size)
            .draw_text(font.x, font.y, font.text, font.gravity))


async def strip_metadata(input_path: PathLike,
                         output_path: PathLike,
                         orientation: Optional[str]) -> Path:
    """Drop EXIF and colour profiles, compensating a LeftBottom orientation

    Args:
        input_path: Source image
        output_path: Destination image
        orientation: Orientation name previously read from the source
    """
    logger = get_logger()
    logger.log_stage("strip", f"{input_path} (orientation: {orientation})")

    chain = _strip_stage(ImageChain(input_path), orientation)
    return await _write_chain('strip', chain, output_path)


async def remove_exif_data(input_path: PathLike,
                           output_path: PathLike,
                           orientation: Optional[str] = None) -> Path:
    """Read the orientation (unless given) and strip metadata"""
    if orientation is None:
        orientation = await get_image_ori(input_path)
    return await strip_metadata(input_path, output_path, orientation)


async def remark_image(input_path: PathLike,
                       output_path: PathLike,
                       font_config: Union[FontConfig, Mapping[str, Any]]) -> Path:
    """Draw watermark text

    Raises:
        ConfigurationError: If any of the nine font fields is missing; the
            engine is not invoked and nothing is written
        EngineError: If the engine fails
    """
    logger = get_logger()
    try:
        font = as_font_config(font_config)
    except ConfigurationError as e:
        logger.error("Watermark rejected, font config invalid", e)
        raise

    logger.log_stage("watermark", f"'{font.text}' at {font.gravity} ({font.x}, {font.y})")

    chain = _watermark_stage(ImageChain(input_path), font)
    return await _write_chain('watermark', chain, output_path)


async def all_process(input_path: PathLike,
                      output_path: PathLike,
                      config: Union[ProcessConfig, Mapping[str, Any]]) -> Path:
    """Resize, strip metadata and watermark in one pass

    Stages run in a fixed order: resize, then rotation and metadata
    stripping, then watermark, so text is placed against the final
    geometry. Only one file is written.

    Args:
        input_path: Source image
        output_path: Destination image
        config: ProcessConfig or a mapping with sizeConfig, fontConfig,
            needExif and orientation

    Returns:
        Path of the written image

    Raises:
        ConfigurationError: If any section of the config is invalid
        EngineError: If the engine fails
    """
    logger = get_logger()
    try:
        if isinstance(config, ProcessConfig):
            config = config.validated()
        else:
            config = ProcessConfig.from_mapping(config)
    except ConfigurationError as e:
        logger.error("Pipeline rejected, process config invalid", e)
        raise

    chain = ImageChain(input_path)

    if config.size is not None:
        logger.log_stage("resize", f"{config.size[0]}x{config.size[1]}")
        chain = chain.resize(*config.size)

    if not config.keep_exif:
        logger.log_stage("strip", f"orientation: {config.orientation}")
        chain = _strip_stage(chain, config.orientation)

    if config.font is not None:
        logger.log_stage("watermark", f"'{config.font.text}' at {config.font.gravity}")
        chain = _watermark_stage(chain, config.font)

    result = await _write_chain('process', chain, output_path)
    logger.info(f"Pipeline complete: {result}")
    return result

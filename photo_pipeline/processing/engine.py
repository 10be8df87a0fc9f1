#!/usr/bin/env python3
"""
Pillow-backed image engine
Operations are recorded on a chain and applied in a single pass on write
"""

import os
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from ..core import get_logger, get_config
from ..core.exceptions import EngineError
from ..utils import PathLike, ensure_path, save_image

ORIENTATION_TAG = 0x0112

ORIENTATIONS = {
    1: 'TopLeft',
    2: 'TopRight',
    3: 'BottomRight',
    4: 'BottomLeft',
    5: 'LeftTop',
    6: 'RightTop',
    7: 'RightBottom',
    8: 'LeftBottom'
}
UNDEFINED_ORIENTATION = 'Undefined'

RESAMPLE_FILTERS = {
    "lanczos": Image.Resampling.LANCZOS,
    "cubic": Image.Resampling.BICUBIC,
    "area": Image.Resampling.BOX,
    "linear": Image.Resampling.BILINEAR,
    "nearest": Image.Resampling.NEAREST
}

# Clockwise right-angle rotations as lossless transposes
RIGHT_ANGLE_TRANSPOSES = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90
}

STRIPPED_INFO_KEYS = ('exif', 'icc_profile', 'xmp', 'XML:com.adobe.xmp', 'photoshop')


class ImageSize(NamedTuple):
    width: int
    height: int


def read_size(path: PathLike) -> ImageSize:
    """Read image dimensions without decoding pixel data"""
    try:
        with Image.open(ensure_path(path)) as image:
            return ImageSize(*image.size)
    except (OSError, ValueError) as e:
        raise EngineError('size', path, e)


def read_orientation(path: PathLike) -> str:
    """Read the EXIF orientation tag as a name, 'Undefined' when absent"""
    try:
        with Image.open(ensure_path(path)) as image:
            value = image.getexif().get(ORIENTATION_TAG)
    except (OSError, ValueError) as e:
        raise EngineError('orientation', path, e)

    return ORIENTATIONS.get(value, UNDEFINED_ORIENTATION)


def gravity_position(gravity: str,
                     canvas: Tuple[int, int],
                     box: Tuple[int, int],
                     offset: Tuple[float, float]) -> Tuple[float, float]:
    """
    Top-left corner for a box placed by gravity.

    The offset is measured inward from the anchor: from the left edge for
    *West, from the right edge for *East, from the top for North*, from the
    bottom for South*, and from the centre otherwise.

    Args:
        gravity: One of the nine gravity names
        canvas: (width, height) of the image
        box: (width, height) of the content
        offset: (x, y) offset from the anchor

    Returns:
        (left, top) of the content box
    """
    width, height = canvas
    box_w, box_h = box
    x, y = offset

    if gravity.endswith('West'):
        left = x
    elif gravity.endswith('East'):
        left = width - box_w - x
    else:
        left = (width - box_w) / 2 + x

    if gravity.startswith('North'):
        top = y
    elif gravity.startswith('South'):
        top = height - box_h - y
    else:
        top = (height - box_h) / 2 + y

    return left, top


class WriteGuard:
    """Decides whether a finished render may still replace the output file

    The awaiting side calls cancel() when it gives up; the worker only moves
    its rendered file into place through commit(). Both take the same lock,
    so exactly one of them wins.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.cancelled = False
        self.committed = False

    def cancel(self) -> bool:
        """Stop a pending commit

        Returns:
            False if the output was already committed
        """
        with self._lock:
            if not self.committed:
                self.cancelled = True
            return self.cancelled

    def commit(self, source: Path, destination: Path) -> bool:
        """Atomically move source onto destination unless cancelled"""
        with self._lock:
            if self.cancelled:
                return False
            os.replace(source, destination)
            self.committed = True
            return True


@dataclass
class _RenderState:
    """Working image plus draw settings while a chain is applied"""
    image: Image.Image
    metadata: Dict[str, Any]
    stroke_color: Optional[str] = None
    stroke_width: int = 0
    fill_color: str = 'black'
    font: Optional[str] = None
    font_size: float = 12


class ImageChain:
    """Lazy sequence of operations on one source image"""

    def __init__(self, input_path: PathLike):
        """Start a chain on a source image

        Args:
            input_path: Image to read when the chain is written
        """
        self.input_path = ensure_path(input_path)
        self.operations: List[Tuple[str, tuple]] = []
        self.logger = get_logger()
        self.config = get_config()

    def resize(self, width: int, height: int) -> 'ImageChain':
        """Force exact output dimensions, ignoring aspect ratio"""
        self.operations.append(('resize', (width, height)))
        return self

    def rotate(self, background: str, degrees: float) -> 'ImageChain':
        """Rotate clockwise, filling uncovered area with background"""
        self.operations.append(('rotate', (background, degrees)))
        return self

    def no_profile(self) -> 'ImageChain':
        """Drop EXIF, ICC and XMP data from the output"""
        self.operations.append(('no_profile', ()))
        return self

    def stroke(self, color: str, width: float = 1) -> 'ImageChain':
        self.operations.append(('stroke', (color, width)))
        return self

    def fill(self, color: str) -> 'ImageChain':
        self.operations.append(('fill', (color,)))
        return self

    def font(self, font: str, size: float) -> 'ImageChain':
        self.operations.append(('font', (font, size)))
        return self

    def draw_text(self, x: float, y: float, text: str, gravity: str = 'NorthWest') -> 'ImageChain':
        """Draw text with the current stroke, fill and font settings"""
        self.operations.append(('draw_text', (x, y, text, gravity)))
        return self

    def write(self, output_path: PathLike, guard: Optional[WriteGuard] = None) -> Path:
        """Apply every recorded operation and save the result once

        The image is rendered to a hidden file beside the destination and
        moved into place only at the end, so a failed or cancelled write
        leaves no output behind.

        Args:
            output_path: Destination, format taken from the extension
            guard: Lets the caller cancel the final move

        Returns:
            Path the image was written to

        Raises:
            EngineError: If the source cannot be read, the output written,
                or the write was cancelled through the guard
        """
        output_path = ensure_path(output_path)

        try:
            source = Image.open(self.input_path)
            source.load()
        except (OSError, ValueError) as e:
            raise EngineError('read', self.input_path, e)

        with source:
            state = _RenderState(image=source, metadata=self._capture_metadata(source))

            try:
                for name, args in self.operations:
                    self.logger.debug(f"Applying {name}{args} to {self.input_path.name}")
                    getattr(self, f'_apply_{name}')(state, *args)

                return self._save(state, output_path, guard)
            except (OSError, ValueError) as e:
                raise EngineError('write', output_path, e)

    def _save(self, state: _RenderState, output_path: Path, guard: Optional[WriteGuard]) -> Path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fd, name = tempfile.mkstemp(
            prefix=f'.{output_path.stem}.', suffix=output_path.suffix, dir=output_path.parent
        )
        os.close(fd)
        partial = Path(name)

        try:
            save_image(state.image, partial, state.metadata or None, label=output_path.name)
            if guard is None:
                os.replace(partial, output_path)
            elif not guard.commit(partial, output_path):
                self.logger.debug(f"Write to {output_path} cancelled, result discarded")
                raise EngineError('write', output_path, TimeoutError("Write cancelled"))
            return output_path
        finally:
            partial.unlink(missing_ok=True)

    def _capture_metadata(self, source: Image.Image) -> Dict[str, Any]:
        """EXIF and ICC blobs of the source, carried unless stripped"""
        metadata = {}

        exif = source.info.get('exif')
        if not exif:
            parsed = source.getexif()
            if len(parsed):
                exif = parsed.tobytes()
        if exif:
            metadata['exif'] = exif

        icc_profile = source.info.get('icc_profile')
        if icc_profile:
            metadata['icc_profile'] = icc_profile

        return metadata

    def _apply_resize(self, state: _RenderState, width: int, height: int) -> None:
        method = self.config.get_setting('engine.resample', 'lanczos')
        state.image = state.image.resize((width, height), resample=RESAMPLE_FILTERS[method])

    def _apply_rotate(self, state: _RenderState, background: str, degrees: float) -> None:
        degrees = degrees % 360
        if degrees == 0:
            return

        if degrees in RIGHT_ANGLE_TRANSPOSES:
            state.image = state.image.transpose(RIGHT_ANGLE_TRANSPOSES[degrees])
            return

        image = state.image
        if background == 'transparent':
            image = image.convert('RGBA')
            fillcolor = (0, 0, 0, 0)
        else:
            fillcolor = background
        state.image = image.rotate(-degrees, expand=True, fillcolor=fillcolor)

    def _apply_no_profile(self, state: _RenderState) -> None:
        state.metadata = {}
        for key in STRIPPED_INFO_KEYS:
            state.image.info.pop(key, None)

    def _apply_stroke(self, state: _RenderState, color: str, width: float) -> None:
        state.stroke_color = color
        state.stroke_width = int(round(width))

    def _apply_fill(self, state: _RenderState, color: str) -> None:
        state.fill_color = color

    def _apply_font(self, state: _RenderState, font: str, size: float) -> None:
        state.font = font
        state.font_size = size

    def _apply_draw_text(self, state: _RenderState, x: float, y: float, text: str, gravity: str) -> None:
        if state.image.mode not in ('RGB', 'RGBA', 'L', 'LA'):
            has_alpha = 'transparency' in state.image.info or 'A' in state.image.getbands()
            state.image = state.image.convert('RGBA' if has_alpha else 'RGB')

        font = self._load_font(state.font, state.font_size)
        draw = ImageDraw.Draw(state.image)

        # Pillow only allows vertical anchor 'a' for multi-line text
        if '\n' in text:
            measure, render, anchor = draw.multiline_textbbox, draw.multiline_text, 'la'
        else:
            measure, render, anchor = draw.textbbox, draw.text, 'lt'

        left, top, right, bottom = measure(
            (0, 0), text, font=font, anchor=anchor, stroke_width=state.stroke_width
        )
        pos_x, pos_y = gravity_position(
            gravity, state.image.size, (right - left, bottom - top), (x, y)
        )

        render(
            (pos_x - left, pos_y - top),
            text,
            fill=state.fill_color,
            font=font,
            anchor=anchor,
            stroke_width=state.stroke_width,
            stroke_fill=state.stroke_color
        )

    def _load_font(self, font: Optional[str], size: float):
        """Resolve a font path, or the configured alias for Pillow's own font"""
        default_alias = self.config.get_setting('watermark.default_font', 'default')
        try:
            if font is None or font == default_alias:
                return ImageFont.load_default(size=size)
            return ImageFont.truetype(font, size)
        except OSError as e:
            raise EngineError('load font', font, e)

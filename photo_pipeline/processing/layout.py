#!/usr/bin/env python3
"""
Output layout decisions
"""

from typing import List, Sequence, Tuple

from ..core.exceptions import ConfigurationError


def get_size_config(long_side: int, short_side: int, width: int, height: int) -> List[int]:
    """
    Pick output dimensions matching the source layout.

    Landscape sources (width > height) get [long, short]; portrait and
    square sources get [short, long].

    Args:
        long_side: Length of the long output edge
        short_side: Length of the short output edge
        width: Source width
        height: Source height

    Returns:
        [output_width, output_height]
    """
    if width > height:
        return [long_side, short_side]
    return [short_side, long_side]


def validate_size_config(size: Sequence[int]) -> Tuple[int, int]:
    """Check a [width, height] pair and return it as a tuple"""
    if isinstance(size, (str, bytes)) or not hasattr(size, '__len__') or len(size) != 2:
        raise ConfigurationError(
            "Size config must be a [width, height] pair",
            {"Received": repr(size)}
        )

    for value in size:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigurationError(
                "Size config dimensions must be positive integers",
                {"Received": repr(size)}
            )

    return int(size[0]), int(size[1])


def parse_size(value: str) -> Tuple[int, int]:
    """Parse a WIDTHxHEIGHT string such as '1200x800'"""
    try:
        width, height = value.lower().split('x')
        return validate_size_config((int(width), int(height)))
    except ValueError:
        raise ConfigurationError(
            f"Invalid size format: {value}",
            {"Expected": "WIDTHxHEIGHT, e.g. 1200x800"}
        )

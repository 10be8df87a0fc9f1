#!/usr/bin/env python3
"""
Watermark text configuration
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Union

from ..core.exceptions import ConfigurationError

GRAVITIES = (
    'NorthWest', 'North', 'NorthEast',
    'West', 'Center', 'East',
    'SouthWest', 'South', 'SouthEast'
)

# camelCase keys accepted alongside the field names
KEY_ALIASES = {
    'txt': 'text',
    'strokeWidth': 'stroke_width',
    'strokeColor': 'stroke_color',
    'fillColor': 'fill_color'
}


@dataclass(frozen=True)
class FontConfig:
    """Everything needed to draw one line of watermark text"""

    font: str
    text: str
    size: float
    x: float
    y: float
    gravity: str
    stroke_width: float
    stroke_color: str
    fill_color: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'FontConfig':
        """Build a FontConfig, failing if any of the nine fields is missing

        Args:
            data: Mapping using field names or the camelCase aliases

        Raises:
            ConfigurationError: Listing every missing or invalid field
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                "Font config must be a mapping",
                {"Received": type(data).__name__}
            )

        values: Dict[str, Any] = {}
        for key, value in data.items():
            values[KEY_ALIASES.get(key, key)] = value

        names = [f.name for f in fields(cls)]
        missing = [name for name in names if values.get(name) is None]
        if missing:
            raise ConfigurationError(
                "Font config is incomplete, all nine fields are required",
                {
                    "Missing fields": ', '.join(missing),
                    "Required fields": ', '.join(names)
                }
            )

        values['text'] = _coerce_text(values['text'])
        config = cls(**{name: values[name] for name in names})
        config.validate()
        return config

    def validate(self) -> None:
        """Check field values beyond presence"""
        for name in ('font', 'text', 'stroke_color', 'fill_color'):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ConfigurationError(
                    f"Font config field '{name}' must be a string, got: {value!r}"
                )

        if self.gravity not in GRAVITIES:
            raise ConfigurationError(
                f"Unknown gravity: {self.gravity}",
                {"Valid gravities": ', '.join(GRAVITIES)}
            )

        for name in ('size', 'x', 'y', 'stroke_width'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(
                    f"Font config field '{name}' must be a number, got: {value!r}"
                )

        if self.size <= 0:
            raise ConfigurationError(f"Font size must be positive, got: {self.size}")
        if self.stroke_width < 0:
            raise ConfigurationError(
                f"Stroke width must not be negative, got: {self.stroke_width}"
            )


def _coerce_text(value: Any) -> Any:
    """Numbers (e.g. a YAML year) become their string form"""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def as_font_config(value: Union[FontConfig, Mapping[str, Any]]) -> FontConfig:
    """Accept either a FontConfig or a mapping describing one"""
    if isinstance(value, FontConfig):
        value = replace(value, text=_coerce_text(value.text))
        value.validate()
        return value
    return FontConfig.from_mapping(value)

import pytest

from photo_pipeline.core.exceptions import ConfigurationError
from photo_pipeline.processing.font_config import FontConfig, GRAVITIES, as_font_config


def test_from_mapping_with_field_names(font_config):
    config = FontConfig.from_mapping(font_config)

    assert config.text == "W"
    assert config.gravity == "SouthEast"


def test_from_mapping_accepts_camel_case_keys():
    config = FontConfig.from_mapping({
        "font": "default",
        "txt": "© studio",
        "size": 24,
        "x": 10,
        "y": 10,
        "gravity": "NorthWest",
        "strokeWidth": 1,
        "strokeColor": "#000000",
        "fillColor": "#ffffff",
    })

    assert config.text == "© studio"
    assert config.stroke_width == 1
    assert config.stroke_color == "#000000"
    assert config.fill_color == "#ffffff"


@pytest.mark.parametrize("field", [
    "font", "text", "size", "x", "y", "gravity", "stroke_width", "stroke_color", "fill_color"
])
def test_each_field_is_required(font_config, field):
    del font_config[field]

    with pytest.raises(ConfigurationError) as excinfo:
        FontConfig.from_mapping(font_config)

    assert excinfo.value.details["Missing fields"] == field


def test_none_counts_as_missing(font_config):
    font_config["fill_color"] = None
    font_config["x"] = None

    with pytest.raises(ConfigurationError) as excinfo:
        FontConfig.from_mapping(font_config)

    assert excinfo.value.details["Missing fields"] == "x, fill_color"


def test_zero_offsets_are_present(font_config):
    font_config.update(x=0, y=0, stroke_width=0)

    assert FontConfig.from_mapping(font_config).x == 0


def test_unknown_gravity_is_rejected(font_config):
    font_config["gravity"] = "Middle"

    with pytest.raises(ConfigurationError, match="Unknown gravity"):
        FontConfig.from_mapping(font_config)


@pytest.mark.parametrize("field,value", [("size", 0), ("size", -3), ("stroke_width", -1), ("x", "10")])
def test_bad_numbers_are_rejected(font_config, field, value):
    font_config[field] = value

    with pytest.raises(ConfigurationError):
        FontConfig.from_mapping(font_config)


def test_non_mapping_is_rejected():
    with pytest.raises(ConfigurationError):
        FontConfig.from_mapping(["default", "W"])


def test_all_nine_gravities():
    assert len(GRAVITIES) == 9
    assert "Center" in GRAVITIES


def test_numeric_text_becomes_string(font_config):
    font_config["text"] = 2024

    assert FontConfig.from_mapping(font_config).text == "2024"


def test_numeric_text_on_dataclass_becomes_string(font_config):
    font_config["text"] = 2024
    config = FontConfig(**font_config)

    assert as_font_config(config).text == "2024"


@pytest.mark.parametrize("field,value", [
    ("font", 12),
    ("stroke_color", 0x000000),
    ("fill_color", ["white"]),
    ("text", True),
])
def test_non_string_fields_are_rejected(font_config, field, value):
    font_config[field] = value

    with pytest.raises(ConfigurationError, match=field):
        FontConfig.from_mapping(font_config)

"""Tests for the async pipeline operations."""

import asyncio
import time

import pytest
import yaml
from PIL import Image, ImageChops

import photo_pipeline.processing.pipeline as pipeline_module
from photo_pipeline import (
    ConfigurationError,
    EngineError,
    FontConfig,
    ProcessConfig,
    all_process,
    get_image_ori,
    get_image_size,
    remark_image,
    remove_exif_data,
    resize_image,
    strip_metadata,
)
from photo_pipeline.core import get_config
from photo_pipeline.processing.engine import ImageChain


def ink_bbox(path):
    with Image.open(path) as image:
        rgb = image.convert("RGB")
        return ImageChops.difference(rgb, Image.new("RGB", rgb.size, "white")).getbbox()


def test_get_image_size(make_image):
    size = asyncio.run(get_image_size(make_image(size=(64, 48))))

    assert (size.width, size.height) == (64, 48)


def test_get_image_size_rejects_with_engine_error(tmp_path):
    with pytest.raises(EngineError):
        asyncio.run(get_image_size(tmp_path / "missing.jpg"))


def test_get_image_ori(make_image):
    assert asyncio.run(get_image_ori(make_image(orientation=8))) == "LeftBottom"


def test_resize_image(make_image, tmp_path):
    output = tmp_path / "resized.png"

    result = asyncio.run(resize_image(make_image(size=(40, 20)), output, [30, 30]))

    assert result == output
    assert Image.open(output).size == (30, 30)


def test_resize_image_rejects_bad_size(make_image, tmp_path):
    with pytest.raises(ConfigurationError):
        asyncio.run(resize_image(make_image(), tmp_path / "out.png", [0, 30]))

    assert not (tmp_path / "out.png").exists()


def test_strip_metadata_rotates_left_bottom(make_image, tmp_path):
    source = make_image(size=(40, 20), orientation=8)

    output = asyncio.run(strip_metadata(source, tmp_path / "out.png", "LeftBottom"))

    with Image.open(output) as image:
        assert image.size == (20, 40)
        assert image.convert("RGB").getpixel((0, 39)) == (255, 0, 0)
        assert len(image.getexif()) == 0


def test_strip_metadata_other_orientation_only_strips(make_image, tmp_path):
    source = make_image(size=(40, 20), orientation=6)

    output = asyncio.run(strip_metadata(source, tmp_path / "out.png", "RightTop"))

    with Image.open(output) as image:
        assert image.size == (40, 20)
        assert image.convert("RGB").getpixel((0, 0)) == (255, 0, 0)
        assert len(image.getexif()) == 0


def test_remove_exif_data_reads_orientation_itself(make_image, tmp_path):
    source = make_image(size=(40, 20), orientation=8)

    output = asyncio.run(remove_exif_data(source, tmp_path / "out.png"))

    assert Image.open(output).size == (20, 40)
    assert asyncio.run(get_image_ori(output)) == "Undefined"


def test_stripping_twice_does_not_rotate_again(make_image, tmp_path):
    source = make_image(size=(40, 20), orientation=8)
    first = asyncio.run(remove_exif_data(source, tmp_path / "first.png"))

    second = asyncio.run(remove_exif_data(first, tmp_path / "second.png"))

    assert Image.open(second).size == (20, 40)
    assert list(Image.open(second).getdata()) == list(Image.open(first).getdata())


def test_remark_image_draws_text(make_image, tmp_path, font_config):
    source = make_image(size=(100, 60), marker=False)

    output = asyncio.run(remark_image(source, tmp_path / "out.png", font_config))

    assert ink_bbox(output) is not None


def test_remark_image_missing_field_rejects_without_output(make_image, tmp_path, monkeypatch, font_config):
    del font_config["stroke_color"]
    calls = []
    monkeypatch.setattr(ImageChain, "write", lambda self, path, *args: calls.append(path))
    output = tmp_path / "out.png"

    with pytest.raises(ConfigurationError) as excinfo:
        asyncio.run(remark_image(make_image(), output, font_config))

    assert "stroke_color" in str(excinfo.value)
    assert calls == []
    assert not output.exists()


def test_all_process_end_to_end_landscape(tmp_path):
    source = tmp_path / "photo.jpg"
    exif = Image.Exif()
    exif[0x0112] = 1
    Image.new("RGB", (4000, 3000), (90, 120, 150)).save(source, exif=exif.tobytes())
    output = tmp_path / "photo_out.jpg"

    result = asyncio.run(all_process(source, output, {
        "sizeConfig": [1200, 800],
        "needExif": False,
        "orientation": "Normal",
    }))

    assert result == output
    with Image.open(output) as image:
        assert image.size == (1200, 800)
        assert len(image.getexif()) == 0
        assert "exif" not in image.info


def test_all_process_left_bottom_without_resize_or_watermark(make_image, tmp_path):
    source = make_image(size=(40, 20), orientation=8)

    output = asyncio.run(all_process(source, tmp_path / "out.png", ProcessConfig(orientation="LeftBottom")))

    with Image.open(output) as image:
        assert image.size == (20, 40)
        assert image.convert("RGB").getpixel((0, 39)) == (255, 0, 0)
        assert len(image.getexif()) == 0


def test_all_process_watermark_uses_final_geometry(make_image, tmp_path, font_config):
    source = make_image(size=(200, 100), orientation=8, marker=False)
    font_config.update(x=3, y=3)

    output = asyncio.run(all_process(source, tmp_path / "out.png", ProcessConfig(
        size=(120, 60),
        font=FontConfig.from_mapping(font_config),
        keep_exif=False,
        orientation="LeftBottom",
    )))

    with Image.open(output) as image:
        assert image.size == (60, 120)

    left, top, right, bottom = ink_bbox(output)
    # SouthEast of the rotated 60x120 image, not of the 120x60 resize
    assert left >= 30 and top >= 90
    assert right <= 60 and bottom <= 120


def test_all_process_keep_exif(make_image, tmp_path):
    source = make_image(name="source.jpg", size=(40, 20), orientation=8)

    output = asyncio.run(all_process(source, tmp_path / "out.jpg", {
        "size_config": [20, 10],
        "keep_exif": True,
        "orientation": "LeftBottom",
    }))

    with Image.open(output) as image:
        assert image.size == (20, 10)
        assert image.getexif().get(0x0112) == 8


def test_all_process_rejects_incomplete_font_before_engine(make_image, tmp_path, monkeypatch, font_config):
    del font_config["gravity"]
    calls = []
    monkeypatch.setattr(ImageChain, "write", lambda self, path, *args: calls.append(path))

    with pytest.raises(ConfigurationError):
        asyncio.run(all_process(make_image(), tmp_path / "out.png", {
            "sizeConfig": [10, 10],
            "fontConfig": font_config,
        }))

    assert calls == []


def test_all_process_rejects_unknown_key(make_image, tmp_path):
    with pytest.raises(ConfigurationError, match="Unknown process config key"):
        asyncio.run(all_process(make_image(), tmp_path / "out.png", {"rotate": 90}))


def test_all_process_engine_failure(tmp_path):
    with pytest.raises(EngineError):
        asyncio.run(all_process(tmp_path / "missing.png", tmp_path / "out.png", {}))

    assert not (tmp_path / "out.png").exists()


def test_concurrent_runs_are_independent(make_image, tmp_path):
    first = make_image(name="a.png", size=(40, 20))
    second = make_image(name="b.png", size=(20, 40), orientation=8)

    async def run_both():
        return await asyncio.gather(
            all_process(first, tmp_path / "a_out.png", {"sizeConfig": [10, 5]}),
            all_process(second, tmp_path / "b_out.png", {"orientation": "LeftBottom"}),
        )

    a_out, b_out = asyncio.run(run_both())

    assert Image.open(a_out).size == (10, 5)
    assert Image.open(b_out).size == (40, 20)


def test_engine_timeout_is_engine_error(make_image, settings_dir, monkeypatch):
    get_config(settings_dir("engine:\n  timeout_seconds: 0.05\n"))

    def slow_read_size(path):
        time.sleep(0.3)
        return None

    monkeypatch.setattr(pipeline_module, "read_size", slow_read_size)

    with pytest.raises(EngineError) as excinfo:
        asyncio.run(get_image_size(make_image()))

    assert excinfo.value.operation == "size"
    assert isinstance(excinfo.value.error, TimeoutError)


def test_timed_out_write_never_lands(make_image, tmp_path, settings_dir, monkeypatch, caplog):
    get_config(settings_dir("engine:\n  timeout_seconds: 0.05\n"))
    apply_resize = ImageChain._apply_resize

    def slow_resize(self, state, width, height):
        time.sleep(0.3)
        apply_resize(self, state, width, height)

    monkeypatch.setattr(ImageChain, "_apply_resize", slow_resize)
    out_dir = tmp_path / "out"

    with pytest.raises(EngineError) as excinfo:
        asyncio.run(all_process(make_image(), out_dir / "out.png", {"sizeConfig": [10, 10]}))

    # let a late worker run to the end before checking
    time.sleep(0.4)
    assert excinfo.value.operation == "process"
    assert any(r.levelname == "WARNING" and "gave up" in r.getMessage() for r in caplog.records)
    assert not (out_dir / "out.png").exists()
    assert not out_dir.exists() or list(out_dir.iterdir()) == []


def test_remark_image_multiline_text(make_image, tmp_path, font_config):
    font_config.update(text="© 2024\nStudio", x=4, y=4)
    source = make_image(size=(160, 100), marker=False)

    output = asyncio.run(remark_image(source, tmp_path / "out.png", font_config))

    left, top, right, bottom = ink_bbox(output)
    assert left >= 80 and top >= 50
    assert right <= 156 and bottom <= 96


def test_remark_image_numeric_text_from_yaml(make_image, tmp_path, font_config):
    font_config["text"] = yaml.safe_load("txt: 2024")["txt"]
    source = make_image(size=(100, 60), marker=False)

    output = asyncio.run(remark_image(source, tmp_path / "out.png", font_config))

    assert ink_bbox(output) is not None


def test_remark_image_non_string_colour_is_configuration_error(make_image, tmp_path, font_config):
    font_config["fill_color"] = 255

    with pytest.raises(ConfigurationError):
        asyncio.run(remark_image(make_image(), tmp_path / "out.png", font_config))

    assert not (tmp_path / "out.png").exists()


@pytest.mark.parametrize("value", ["false", 0, "yes"])
def test_keep_exif_must_be_boolean(make_image, tmp_path, value):
    with pytest.raises(ConfigurationError, match="keep_exif"):
        asyncio.run(all_process(make_image(), tmp_path / "out.png", {"needExif": value}))


def test_keep_exif_null_means_strip(make_image, tmp_path):
    source = make_image(name="source.jpg", orientation=6)

    output = asyncio.run(all_process(source, tmp_path / "out.jpg", {"needExif": None}))

    assert len(Image.open(output).getexif()) == 0

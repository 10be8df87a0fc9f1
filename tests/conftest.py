"""Shared fixtures for the photo pipeline tests.

Images are synthesised with Pillow into ``tmp_path`` so every test works on
its own files. Configuration is reset around each test so settings
overrides never leak between tests.
"""

from pathlib import Path

import pytest
from PIL import Image

from photo_pipeline.core import reset_config
from photo_pipeline.core.config_manager import CONFIG_DIR_ENV
from photo_pipeline.processing.engine import ORIENTATION_TAG


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    monkeypatch.delenv(CONFIG_DIR_ENV, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def make_image(tmp_path):
    """Factory writing a solid image, optionally with an EXIF orientation.

    A red 4x4 marker sits in the top-left corner so rotations can be
    checked by looking for it afterwards.
    """

    def _make(name="source.png", size=(40, 20), orientation=None, color="white", marker=True):
        image = Image.new("RGB", size, color)
        if marker:
            image.paste((255, 0, 0), (0, 0, 4, 4))

        params = {}
        if orientation is not None:
            exif = Image.Exif()
            exif[ORIENTATION_TAG] = orientation
            params["exif"] = exif.tobytes()

        path = tmp_path / name
        image.save(path, **params)
        return path

    return _make


@pytest.fixture
def settings_dir(tmp_path):
    """Factory writing a settings.yaml override directory"""

    def _write(text: str) -> Path:
        config_dir = tmp_path / "config"
        config_dir.mkdir(exist_ok=True)
        (config_dir / "settings.yaml").write_text(text)
        return config_dir

    return _write


@pytest.fixture
def font_config():
    return {
        "font": "default",
        "text": "W",
        "size": 12,
        "x": 0,
        "y": 0,
        "gravity": "SouthEast",
        "stroke_width": 0,
        "stroke_color": "black",
        "fill_color": "black",
    }

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from imgconvertx.config import DEFAULT_IMAGE_FILE_EXT, ProcessorSettings


def test_defaults() -> None:
    settings = ProcessorSettings()
    assert settings.processor == "ImageMagick"
    assert settings.jpeg_quality == 85
    assert settings.image_file_ext == DEFAULT_IMAGE_FILE_EXT
    assert settings.pixel_limit == 10000
    assert settings.resolved_colorspace == "sRGB"


@pytest.mark.parametrize(
    ("value", "expected"),
    [(5, 10), (150, 100), (70, 70), ("90", 90), ("abc", 85), (0, 85), (None, 85)],
)
def test_jpeg_quality_is_forced_into_range(value: object, expected: int) -> None:
    assert ProcessorSettings(jpeg_quality=value).jpeg_quality == expected


def test_extensions_accept_comma_separated_string() -> None:
    settings = ProcessorSettings(image_file_ext=" PNG, jpg ,,gif")
    assert settings.image_file_ext == ("png", "jpg", "gif")
    assert settings.is_allowed_extension("JPG")
    assert not settings.is_allowed_extension("tif")


def test_colorspace_resolution() -> None:
    assert ProcessorSettings(processor="GraphicsMagick").resolved_colorspace == "RGB"
    assert ProcessorSettings(colorspace="CMYK").resolved_colorspace == "CMYK"
    assert ProcessorSettings(colorspace="bogus").resolved_colorspace == "RGB"


def test_settings_are_immutable() -> None:
    settings = ProcessorSettings()
    with pytest.raises(ValidationError):
        settings.jpeg_quality = 50  # type: ignore[misc]


def test_unknown_processor_is_rejected() -> None:
    with pytest.raises(ValidationError):
        ProcessorSettings(processor="GIMP")


def test_from_file(tmp_path: Path) -> None:
    config = tmp_path / "settings.json"
    config.write_text(json.dumps({"processor": "GraphicsMagick", "jpeg_quality": 70, "filename_prefix": "csm_"}))

    settings = ProcessorSettings.from_file(config)

    assert settings.processor == "GraphicsMagick"
    assert settings.jpeg_quality == 70
    assert settings.filename_prefix == "csm_"


def test_from_file_rejects_non_object(tmp_path: Path) -> None:
    config = tmp_path / "settings.json"
    config.write_text("[1, 2]")
    with pytest.raises(ValueError):
        ProcessorSettings.from_file(config)

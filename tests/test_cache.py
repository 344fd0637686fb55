from __future__ import annotations

import os
import shutil
from pathlib import Path

from imgconvertx.cache import output_name, output_path, source_identity
from imgconvertx.config import ProcessorSettings
from imgconvertx.types import Rectangle

COMMAND = "-auto-orient -geometry 200x150! -colorspace sRGB"


def test_same_inputs_give_same_name(sample_png: Path) -> None:
    first = output_name(COMMAND, None, sample_png, 0)
    second = output_name(COMMAND, None, sample_png, 0)
    assert first == second
    assert len(first) == 32


def test_each_input_changes_the_name(sample_png: Path) -> None:
    base = output_name(COMMAND, None, sample_png, 0)

    assert output_name(COMMAND + " -blur 1x2", None, sample_png, 0) != base
    assert output_name(COMMAND, Rectangle(10, 10), sample_png, 0) != base
    assert output_name(COMMAND, None, sample_png, 1) != base

    stat = sample_png.stat()
    os.utime(sample_png, (stat.st_atime, stat.st_mtime + 10))
    assert output_name(COMMAND, None, sample_png, 0) != base


def test_alternative_key_ignores_location_and_mtime(sample_png: Path, tmp_path: Path) -> None:
    copy = tmp_path / "elsewhere" / sample_png.name
    copy.parent.mkdir()
    shutil.copy(sample_png, copy)
    os.utime(copy, (0, 0))

    assert output_name(COMMAND, None, sample_png, 0, alternative_key="debug") == output_name(
        COMMAND, None, copy, 0, alternative_key="debug"
    )
    assert output_name(COMMAND, None, sample_png, 0, alternative_key="debug") != output_name(
        COMMAND, None, sample_png, 0, alternative_key="other"
    )


def test_source_identity(sample_png: Path) -> None:
    assert source_identity(sample_png, "key") == "sample.pngkey"
    assert source_identity(sample_png).startswith(str(sample_png))


def test_output_path_layout(tmp_path: Path) -> None:
    settings = ProcessorSettings(temp_assets_dir=tmp_path / "cache" / "images", filename_prefix="csm_")

    path = output_path(settings, "abc123", "webp")

    assert path == tmp_path / "cache" / "images" / "csm_abc123.webp"
    assert path.parent.is_dir()
